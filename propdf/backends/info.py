"""Document info backend."""

import json
import logging
from typing import Dict, Any, List, Tuple

from .base import Backend
from ..core.info import describe_document
from ..core.sources import SourceFile, load_document

logger = logging.getLogger(__name__)


class InfoBackend(Backend):
    """Backend for reporting page count, metadata and page size of a PDF."""

    SUPPORTED_OPERATIONS = ["info"]

    def process(
        self,
        files: List[SourceFile],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        if len(files) != 1:
            raise ValueError("Exactly one PDF file is required")

        logger.info(f"Getting info for: {files[0].name}")

        with load_document(files[0]) as document:
            info = describe_document(document)

        logger.info(
            f"PDF Info: {info['pageCount']} pages, {info['fileSizeKB']} KB"
        )

        output_data = json.dumps(info, indent=2).encode("utf-8")
        metadata = {"total_pages": str(info["pageCount"])}
        return output_data, "json", metadata
