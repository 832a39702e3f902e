"""Pydantic models describing link-builder configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

IGNORE_PATTERN_ENV = "IMPORT_IGNORE"


def _ignore_pattern_from_env() -> str | None:
    return os.environ.get(IGNORE_PATTERN_ENV) or None


class ImportConfig(BaseModel):
    """Where the chat export is read from and the URL list is written to."""

    input_path: Path = Field(default=Path("import/export.json"))
    output_path: Path = Field(default=Path("dist/urls.json"))

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)


class ValidationConfig(BaseModel):
    """Concurrency and filtering knobs of the URL validator."""

    ignore_pattern: str | None = Field(
        default_factory=_ignore_pattern_from_env,
        description="Regular expression; matching URLs are counted as ignored.",
    )
    workers: int = 16
    validate_head: bool = False
    head_rate_per_second: float = 10.0
    head_burst: int = 1
    head_timeout: float = 15.0

    @field_validator("ignore_pattern", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @field_validator("workers", "head_burst")
    @classmethod
    def _positive_int(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be >= 1")
        return value

    @field_validator("head_rate_per_second", "head_timeout")
    @classmethod
    def _positive_float(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("value must be > 0")
        return value


class PreviewConfig(BaseModel):
    """Preview generation paths and HTTP settings."""

    input_path: Path = Field(default=Path("dist/urls.json"))
    output_path: Path = Field(default=Path("dist/previews.json"))
    timeout: float = 15.0
    user_agent: str | None = None
    show_progress: bool = True

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)


class LinkBuilderConfig(BaseModel):
    """Top-level configuration document."""

    imports: ImportConfig = Field(default_factory=ImportConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    previews: PreviewConfig = Field(default_factory=PreviewConfig)


__all__ = [
    "IGNORE_PATTERN_ENV",
    "ImportConfig",
    "LinkBuilderConfig",
    "PreviewConfig",
    "ValidationConfig",
]
