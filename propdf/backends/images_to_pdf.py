"""Images-to-PDF backend: renders each image onto its own page."""

import logging
from typing import Dict, Any, List, Tuple

from .base import Backend
from ..config import get_config
from ..core.composer import compose_from_images
from ..core.sources import SourceFile

logger = logging.getLogger(__name__)


class ImagesToPdfBackend(Backend):
    """Backend for converting a sequence of images into a PDF."""

    SUPPORTED_OPERATIONS = ["images_to_pdf"]

    def process(
        self,
        files: List[SourceFile],
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        config = get_config().composer
        if not files:
            raise ValueError("No image files provided")
        if len(files) > config.max_images:
            raise ValueError(f"Too many images. Maximum {config.max_images} images allowed.")

        logger.info(f"Converting {len(files)} images to PDF")

        composed = compose_from_images(
            files,
            allowed_formats=config.allowed_image_formats,
            max_width=config.page_width,
            max_height=config.page_height,
        )
        for outcome in composed.skipped:
            logger.warning(f"Skipped image {outcome.name}: {outcome.reason}")

        with composed:
            total_pages = composed.page_count
            skipped = composed.skipped
            output_data = composed.to_bytes()

        logger.info(
            f"Images to PDF complete. Pages: {total_pages}, "
            f"Skipped: {len(skipped)}, Size: {len(output_data) / 1024:.2f} KB"
        )

        metadata = {
            "total_pages": str(total_pages),
            "source_images": str(composed.source_count),
            "skipped_images": str(len(skipped)),
            "filename": "images.pdf",
        }
        if skipped:
            metadata["skipped_files"] = ",".join(o.name for o in skipped)
        return output_data, "pdf", metadata
