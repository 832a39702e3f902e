"""Engine components: normalize → validate → dedup, plus preview fetching."""

from .dedup import deduplicate, ensure_unique_urls, filter_unique_records
from .fetcher import HeadProbe, HttpPreviewFetcher, PreviewFetcher
from .normalizer import (
    is_valid_url,
    normalize_urls,
    strip_session_artifacts,
    warn_if_urls_contain_session,
)
from .parser import PreviewParser
from .validator import (
    ValidationResult,
    compile_ignore_pattern,
    validate_urls_concurrently,
)

__all__ = [
    "HeadProbe",
    "HttpPreviewFetcher",
    "PreviewFetcher",
    "PreviewParser",
    "ValidationResult",
    "compile_ignore_pattern",
    "deduplicate",
    "ensure_unique_urls",
    "filter_unique_records",
    "is_valid_url",
    "normalize_urls",
    "strip_session_artifacts",
    "validate_urls_concurrently",
    "warn_if_urls_contain_session",
]
