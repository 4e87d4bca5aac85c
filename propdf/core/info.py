"""Summary information about a loaded PDF."""

from typing import Any, Dict

from .sources import SourceDocument

_METADATA_DEFAULTS = {
    "title": "Untitled",
    "author": "Unknown",
    "subject": "N/A",
    "creator": "Unknown",
    "producer": "Unknown",
}


def describe_document(source: SourceDocument) -> Dict[str, Any]:
    """Return page count, document metadata and first-page size in points."""
    metadata = source.doc.metadata or {}
    first_page = source.doc[0].rect

    info: Dict[str, Any] = {
        "filename": source.name,
        "fileSize": source.size,
        "fileSizeKB": f"{source.size / 1024:.2f}",
        "pageCount": source.page_count,
    }
    for key, default in _METADATA_DEFAULTS.items():
        info[key] = metadata.get(key) or default

    info["pageSize"] = {
        "width": round(first_page.width),
        "height": round(first_page.height),
        "unit": "points",
    }
    return info
