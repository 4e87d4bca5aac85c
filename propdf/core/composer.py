"""Composition of new PDFs from pages of existing documents or from images."""

from typing import Iterable, Sequence, Tuple

import pymupdf

from .outcomes import (
    COMPOSED,
    SKIPPED,
    ComposedDocument,
    EmptyPageSelectionError,
    NoOutputError,
    UnprocessableSourceError,
)
from .sources import SourceDocument, SourceFile, load_document, load_image

A4_WIDTH = 595
A4_HEIGHT = 842


def compose_from_selection(
    source: SourceDocument, pages: Sequence[int]
) -> ComposedDocument:
    """
    Copy the given 1-indexed pages of ``source`` into a new document.

    Pages are copied in the order given, each with its own content and
    geometry, so the output has exactly ``len(pages)`` pages.

    Raises:
        EmptyPageSelectionError: If ``pages`` is empty.
        ValueError: If a page number lies outside the source.
    """
    if not pages:
        raise EmptyPageSelectionError()

    for page_num in pages:
        if page_num < 1 or page_num > source.page_count:
            raise ValueError(
                f"Page {page_num} is out of range for {source.name} "
                f"({source.page_count} pages)"
            )

    composed = ComposedDocument(doc=pymupdf.open(), source_count=1)
    for page_num in pages:
        try:
            composed.doc.insert_pdf(
                source.doc, from_page=page_num - 1, to_page=page_num - 1
            )
        except Exception as e:
            composed.close()
            raise UnprocessableSourceError(
                source.name, f"could not copy page {page_num} ({e})"
            ) from e
    composed.record(source.name, COMPOSED)
    return composed


def compose_from_concatenation(sources: Sequence[SourceFile]) -> ComposedDocument:
    """
    Append every page of every source, in source order.

    Sources are opened one at a time. The first one that cannot be opened
    aborts the whole merge and nothing is returned.

    Raises:
        UnprocessableSourceError: Naming the first source that failed to load
            or whose pages could not be copied.
    """
    composed = ComposedDocument(doc=pymupdf.open(), source_count=len(sources))
    try:
        for source in sources:
            with load_document(source) as document:
                try:
                    composed.doc.insert_pdf(document.doc)
                except Exception as e:
                    raise UnprocessableSourceError(
                        source.name, f"could not copy pages ({e})"
                    ) from e
            composed.record(source.name, COMPOSED)
    except Exception:
        composed.close()
        raise
    return composed


def fit_image_page(
    width: float,
    height: float,
    max_width: float = A4_WIDTH,
    max_height: float = A4_HEIGHT,
) -> Tuple[pymupdf.Rect, pymupdf.Rect]:
    """
    Choose the page size and image placement for one image.

    Images that fit inside ``max_width`` x ``max_height`` get a page of their
    own pixel size and fill it. Larger images are scaled down uniformly and
    centered on a ``max_width`` x ``max_height`` page.

    Returns:
        Tuple of (page_rect, image_rect)
    """
    if width <= max_width and height <= max_height:
        page_rect = pymupdf.Rect(0, 0, width, height)
        return page_rect, pymupdf.Rect(page_rect)

    scale = min(max_width / width, max_height / height)
    scaled_width = width * scale
    scaled_height = height * scale
    x0 = (max_width - scaled_width) / 2
    y0 = (max_height - scaled_height) / 2

    page_rect = pymupdf.Rect(0, 0, max_width, max_height)
    image_rect = pymupdf.Rect(x0, y0, x0 + scaled_width, y0 + scaled_height)
    return page_rect, image_rect


def compose_from_images(
    images: Sequence[SourceFile],
    allowed_formats: Iterable[str] = ("jpeg", "png"),
    max_width: float = A4_WIDTH,
    max_height: float = A4_HEIGHT,
) -> ComposedDocument:
    """
    Render each image onto its own page, in input order.

    Images that cannot be decoded or have a format outside
    ``allowed_formats`` are skipped and recorded on the result's outcomes.
    Skips leave no gap: page N holds the Nth image that rendered.

    Raises:
        NoOutputError: If every image was skipped.
    """
    allowed = frozenset(allowed_formats)
    composed = ComposedDocument(doc=pymupdf.open(), source_count=len(images))

    for source in images:
        try:
            image = load_image(source, allowed)
        except UnprocessableSourceError as e:
            composed.record(source.name, SKIPPED, e.reason)
            continue

        page_rect, image_rect = fit_image_page(
            image.width, image.height, max_width, max_height
        )
        page = composed.doc.new_page(width=page_rect.width, height=page_rect.height)
        try:
            page.insert_image(image_rect, stream=image.data)
        except Exception as e:
            composed.doc.delete_page(page.number)
            composed.record(source.name, SKIPPED, f"could not embed image ({e})")
            continue
        composed.record(source.name, COMPOSED)

    if composed.page_count == 0:
        composed.close()
        raise NoOutputError(
            f"None of the {len(images)} image(s) could be converted"
        )

    return composed
