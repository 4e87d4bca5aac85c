"""Loading uploaded bytes into document and image handles."""

from dataclasses import dataclass
from io import BytesIO
from typing import Iterable

import pymupdf
from PIL import Image, UnidentifiedImageError

from .outcomes import UnprocessableSourceError


@dataclass(frozen=True)
class SourceFile:
    """Raw upload: a caller-visible name and its bytes."""
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class SourceDocument:
    """An opened PDF, owned by one request."""
    name: str
    doc: pymupdf.Document
    size: int = 0

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def close(self) -> None:
        if not self.doc.is_closed:
            self.doc.close()

    def __enter__(self) -> "SourceDocument":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


@dataclass(frozen=True)
class SourceImage:
    """An uploaded image with its decoded pixel dimensions."""
    name: str
    data: bytes
    width: int
    height: int
    format: str


def load_document(source: SourceFile) -> SourceDocument:
    """
    Open a PDF upload.

    Raises:
        UnprocessableSourceError: If the bytes are not a readable PDF, are
            password-protected, or contain no pages.
    """
    if not source.data:
        raise UnprocessableSourceError(source.name, "file is empty")

    try:
        doc = pymupdf.open(stream=source.data, filetype="pdf")
    except Exception as e:
        raise UnprocessableSourceError(
            source.name, f"file may be corrupted ({e})"
        ) from e

    if doc.needs_pass:
        doc.close()
        raise UnprocessableSourceError(source.name, "file is password-protected")

    if doc.page_count == 0:
        doc.close()
        raise UnprocessableSourceError(source.name, "file contains no pages")

    return SourceDocument(name=source.name, doc=doc, size=source.size)


def load_image(source: SourceFile, allowed_formats: Iterable[str]) -> SourceImage:
    """
    Identify an image upload's format and decode its pixel dimensions.

    Raises:
        UnprocessableSourceError: If the format is unrecognized, not allowed,
            or cannot be decoded.
    """
    if not source.data:
        raise UnprocessableSourceError(source.name, "file is empty")

    try:
        with Image.open(BytesIO(source.data)) as img:
            fmt = (img.format or "").lower()
    except (UnidentifiedImageError, OSError) as e:
        raise UnprocessableSourceError(source.name, "unrecognized image format") from e

    if fmt == "jpg":
        fmt = "jpeg"
    if fmt not in set(allowed_formats):
        raise UnprocessableSourceError(source.name, f"unsupported image format '{fmt}'")

    try:
        pix = pymupdf.Pixmap(source.data)
    except Exception as e:
        raise UnprocessableSourceError(source.name, f"unreadable image ({e})") from e
    width, height = pix.width, pix.height

    if width <= 0 or height <= 0:
        raise UnprocessableSourceError(source.name, "image has no pixel dimensions")

    return SourceImage(
        name=source.name,
        data=source.data,
        width=width,
        height=height,
        format=fmt,
    )
