"""Concurrent URL classification over a bounded thread pool."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Protocol, Sequence

import structlog

from ..errors import ConfigError
from .normalizer import is_valid_url

DEFAULT_WORKERS = 16

logger = structlog.get_logger("link_builder.validator")


class Classification(str, Enum):
    VALID = "valid"
    IGNORED = "ignored"
    DROPPED = "dropped"


class LivenessProbe(Protocol):
    def is_alive(self, url: str) -> bool:
        """Return True when the remote end answers for ``url``."""


@dataclass
class ValidationResult:
    """Outcome of one validation run."""

    valid_urls: set[str] = field(default_factory=set)
    ignored_count: int = 0
    dropped_count: int = 0

    @property
    def classified_count(self) -> int:
        return len(self.valid_urls) + self.ignored_count + self.dropped_count


class _Aggregator:
    """Sole owner of the mutable result; workers only hand it classifications."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._result = ValidationResult()

    def record(self, url: str, outcome: Classification) -> None:
        with self._lock:
            if outcome is Classification.VALID:
                self._result.valid_urls.add(url)
            elif outcome is Classification.IGNORED:
                self._result.ignored_count += 1
            else:
                self._result.dropped_count += 1

    def snapshot(self) -> ValidationResult:
        with self._lock:
            return ValidationResult(
                valid_urls=set(self._result.valid_urls),
                ignored_count=self._result.ignored_count,
                dropped_count=self._result.dropped_count,
            )


def compile_ignore_pattern(pattern: str | None) -> re.Pattern[str] | None:
    """Compile the configured ignore pattern; empty means nothing is ignored."""

    if pattern is None or not pattern.strip():
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"invalid ignore pattern {pattern!r}: {exc}") from exc


def classify_url(
    url: str,
    ignore_pattern: re.Pattern[str] | None = None,
    probe: LivenessProbe | None = None,
) -> Classification:
    if ignore_pattern is not None and ignore_pattern.search(url):
        return Classification.IGNORED
    if not is_valid_url(url):
        return Classification.DROPPED
    if probe is not None and not probe.is_alive(url):
        return Classification.DROPPED
    return Classification.VALID


def validate_urls_concurrently(
    urls: Sequence[str],
    ignore_pattern: re.Pattern[str] | None = None,
    *,
    max_workers: int = DEFAULT_WORKERS,
    probe: LivenessProbe | None = None,
) -> ValidationResult:
    """Classify every URL concurrently and block until all are done.

    Each occurrence in ``urls`` is classified, so duplicates are counted once
    per occurrence in the ignored and dropped counters.
    """

    aggregator = _Aggregator()
    if not urls:
        return aggregator.snapshot()

    def _work(url: str) -> None:
        aggregator.record(url, classify_url(url, ignore_pattern, probe))

    workers = max(1, min(max_workers, len(urls)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="validator") as executor:
        futures = [executor.submit(_work, url) for url in urls]
        for future in as_completed(futures):
            future.result()

    result = aggregator.snapshot()
    logger.debug(
        "validation_finished",
        total=len(urls),
        valid=len(result.valid_urls),
        ignored=result.ignored_count,
        dropped=result.dropped_count,
        workers=workers,
    )
    return result


__all__ = [
    "Classification",
    "DEFAULT_WORKERS",
    "LivenessProbe",
    "ValidationResult",
    "classify_url",
    "compile_ignore_pattern",
    "validate_urls_concurrently",
]
