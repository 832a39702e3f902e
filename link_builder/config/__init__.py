"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    IGNORE_PATTERN_ENV,
    ImportConfig,
    LinkBuilderConfig,
    PreviewConfig,
    ValidationConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "IGNORE_PATTERN_ENV",
    "ImportConfig",
    "LinkBuilderConfig",
    "PreviewConfig",
    "ValidationConfig",
]
