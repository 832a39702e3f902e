"""Error taxonomy shared by the import and preview pipelines."""

from __future__ import annotations


class LinkBuilderError(Exception):
    """Base class for failures that abort a pipeline run."""


class ConfigError(LinkBuilderError):
    """Configuration file or ignore pattern could not be used."""


class InputError(LinkBuilderError):
    """Input JSON is unreadable, malformed or misses required fields."""


class CacheCorruptError(LinkBuilderError):
    """Existing preview output matches none of the accepted cache shapes."""


class FetchError(LinkBuilderError):
    """A single URL could not be turned into a preview.

    Raised by fetchers and recovered by the preview generator, which logs the
    failure and skips the URL.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class NoValidPreviewsError(LinkBuilderError):
    """The preview run finished without a single usable preview."""


__all__ = [
    "CacheCorruptError",
    "ConfigError",
    "FetchError",
    "InputError",
    "LinkBuilderError",
    "NoValidPreviewsError",
]
