"""Configuration management for the PDF composition service."""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional


def _parse_formats(value: str) -> FrozenSet[str]:
    return frozenset(f.strip().lower() for f in value.split(",") if f.strip())


@dataclass
class ComposerConfig:
    """Configuration for PDF composition."""
    max_file_size_mb: int = field(
        default_factory=lambda: int(os.environ.get("MAX_FILE_SIZE_MB", "100"))
    )
    max_merge_files: int = field(
        default_factory=lambda: int(os.environ.get("MAX_MERGE_FILES", "20"))
    )
    max_images: int = field(
        default_factory=lambda: int(os.environ.get("MAX_IMAGES", "50"))
    )
    allowed_image_formats: FrozenSet[str] = field(
        default_factory=lambda: _parse_formats(os.environ.get("ALLOWED_IMAGE_FORMATS", "jpeg,png"))
    )
    # ISO A4 at 72 units/inch
    page_width: float = 595
    page_height: float = 842

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@dataclass
class ServerConfig:
    """Configuration for HTTP server."""
    host: str = field(
        default_factory=lambda: os.environ.get("HTTP_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("HTTP_PORT", "4001"))
    )


@dataclass
class Config:
    """Main configuration container."""
    composer: ComposerConfig = field(default_factory=ComposerConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration from environment."""
    global _config
    _config = Config()
    return _config
