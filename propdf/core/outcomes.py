"""Result and error types shared by the composition contracts."""

from dataclasses import dataclass, field
from typing import List, Optional

import pymupdf

COMPOSED = "composed"
SKIPPED = "skipped"


class CompositionError(ValueError):
    """Base class for failures a caller should report as a rejected request."""

    code = "COMPOSITION_FAILED"


class EmptyPageSelectionError(CompositionError):
    """The page range expression resolved to zero pages."""

    code = "EMPTY_RESULT"

    def __init__(self, page_range: str = ""):
        self.page_range = page_range
        super().__init__(f"No valid pages specified in '{page_range}'")


class UnprocessableSourceError(CompositionError):
    """A source could not be loaded or its pages could not be enumerated."""

    code = "UNPROCESSABLE_SOURCE"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to process {source}: {reason}")


class NoOutputError(CompositionError):
    """Every candidate page or image was excluded."""

    code = "NO_OUTPUT"


@dataclass(frozen=True)
class ItemOutcome:
    """What happened to one input of a composition."""
    name: str
    status: str
    reason: str = ""


@dataclass
class ComposedDocument:
    """
    A PDF under construction.

    Pages are only ever appended. ``to_bytes()`` serializes the document
    once and closes it; the handle is unusable afterwards.
    """
    doc: pymupdf.Document
    source_count: int = 0
    outcomes: List[ItemOutcome] = field(default_factory=list)
    _data: Optional[bytes] = field(default=None, repr=False)
    _final_page_count: int = field(default=0, repr=False)

    @property
    def page_count(self) -> int:
        if self._data is not None:
            return self._final_page_count
        return self.doc.page_count

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SKIPPED)

    @property
    def skipped(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.status == SKIPPED]

    def record(self, name: str, status: str, reason: str = "") -> None:
        self.outcomes.append(ItemOutcome(name=name, status=status, reason=reason))

    def to_bytes(self) -> bytes:
        if self._data is None:
            self._final_page_count = self.doc.page_count
            self._data = self.doc.tobytes(garbage=4, deflate=True)
            self.doc.close()
        return self._data

    def close(self) -> None:
        if self._data is None and not self.doc.is_closed:
            self.doc.close()

    def __enter__(self) -> "ComposedDocument":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
