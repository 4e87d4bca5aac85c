"""Page range resolution for split operations."""

from typing import Optional, Set, Tuple


def resolve_page_range(page_range: str, page_count: int) -> Tuple[int, ...]:
    """
    Resolve a page range expression against a document's page count.

    Tokens that do not parse, fall outside ``1..page_count`` or describe a
    reversed range are dropped rather than rejected. Ranges are not clamped:
    ``8-15`` against a 10-page document drops the whole token.

    Args:
        page_range: Comma-separated tokens (e.g., "1-3,5,7-9").
                    Pages are 1-indexed.
        page_count: Number of pages in the source document

    Returns:
        Strictly ascending tuple of distinct page numbers (1-indexed).
        An empty tuple means nothing in the expression was usable.
    """
    pages: Set[int] = set()

    for token in page_range.split(","):
        token = token.strip()
        if "-" in token:
            start_text, end_text = token.split("-", 1)
            start = _to_int(start_text)
            end = _to_int(end_text)
            if start is None or end is None:
                continue
            if start < 1 or end > page_count or start > end:
                continue
            pages.update(range(start, end + 1))
        else:
            page = _to_int(token)
            if page is None or page < 1 or page > page_count:
                continue
            pages.add(page)

    return tuple(sorted(pages))


def _to_int(text: str) -> Optional[int]:
    text = text.strip()
    # Plain ASCII digits only: int() would also take "+3", "1_0" and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)
