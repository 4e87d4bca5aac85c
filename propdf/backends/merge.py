"""Merge backend: concatenates whole PDFs in upload order."""

import logging
from typing import Dict, Any, List, Tuple

from .base import Backend
from ..config import get_config
from ..core.composer import compose_from_concatenation
from ..core.sources import SourceFile

logger = logging.getLogger(__name__)


class MergeBackend(Backend):
    """Backend for merging two or more PDFs into one."""

    SUPPORTED_OPERATIONS = ["merge"]

    def process(
        self,
        files: List[SourceFile],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        config = get_config()
        if not files:
            raise ValueError("No PDF files provided")
        if len(files) < 2:
            raise ValueError("At least 2 PDF files are required for merging")
        if len(files) > config.composer.max_merge_files:
            raise ValueError(
                f"Too many files. Maximum {config.composer.max_merge_files} files allowed."
            )

        logger.info(f"Merging {len(files)} PDF files")
        for i, source in enumerate(files, start=1):
            logger.info(
                f"Source {i}/{len(files)}: {source.name} ({source.size / 1024:.2f} KB)"
            )

        with compose_from_concatenation(files) as composed:
            total_pages = composed.page_count
            output_data = composed.to_bytes()

        logger.info(
            f"Merge complete. Total pages: {total_pages}, "
            f"Size: {len(output_data) / 1024:.2f} KB"
        )

        metadata = {
            "total_pages": str(total_pages),
            "source_files": str(composed.source_count),
            "filename": "merged.pdf",
        }
        return output_data, "pdf", metadata
