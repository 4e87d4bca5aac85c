"""Split backend: extracts a page range from one PDF."""

import logging
import re
from typing import Dict, Any, List, Tuple

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from .base import Backend
from ..core.composer import compose_from_selection
from ..core.outcomes import EmptyPageSelectionError
from ..core.sources import SourceFile, load_document
from ..utils.page_range import resolve_page_range

logger = logging.getLogger(__name__)


class SplitOptions(BaseModel):
    """Options accepted by the split operation."""
    page_ranges: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("pageRanges", "page_ranges", "pages"),
        description='Page ranges, e.g. "1-3,5,7-9"',
    )


class SplitBackend(Backend):
    """Backend for extracting selected pages of a PDF into a new PDF."""

    SUPPORTED_OPERATIONS = ["split"]

    def process(
        self,
        files: List[SourceFile],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        if len(files) != 1:
            raise ValueError("Exactly one PDF file is required for splitting")

        try:
            split_options = SplitOptions.model_validate(options)
        except ValidationError:
            raise ValueError('Page ranges required. Format: "1-3,5,7-9"')

        source = files[0]
        page_range = split_options.page_ranges
        logger.info(f"Splitting PDF: {source.name}, Ranges: {page_range}")

        with load_document(source) as document:
            source_pages = document.page_count
            logger.info(f"Source PDF has {source_pages} pages")

            pages = resolve_page_range(page_range, source_pages)
            if not pages:
                raise EmptyPageSelectionError(page_range)

            logger.info(
                f"Extracting {len(pages)} pages: {', '.join(str(p) for p in pages)}"
            )
            composed = compose_from_selection(document, pages)

        with composed:
            total_pages = composed.page_count
            output_data = composed.to_bytes()

        logger.info(
            f"Split complete. Output pages: {total_pages}, "
            f"Size: {len(output_data) / 1024:.2f} KB"
        )

        metadata = {
            "total_pages": str(total_pages),
            "source_pages": str(source_pages),
            "pages": ",".join(str(p) for p in pages),
            "filename": f"split-pages-{_filename_safe(page_range)}.pdf",
        }
        return output_data, "pdf", metadata


def _filename_safe(page_range: str) -> str:
    return re.sub(r"[^0-9_-]", "", page_range.replace(",", "_"))
