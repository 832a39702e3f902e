"""Incremental link-preview generation backed by the previous output file.

A run goes through four stages:

1. load the ``[{id, date, url}]`` input list;
2. merge the previous output file into a ``url -> preview`` cache;
3. walk the input in order, reusing cached previews and fetching the misses
   one at a time, rewriting the output file after every accepted entry;
4. fail with :class:`NoValidPreviewsError` when nothing was produced.

Fetches are sequential on purpose: the output file is rewritten after each
entry, so an interrupted run leaves a loadable prefix behind.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Sequence

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from .engine.fetcher import PreviewFetcher
from .errors import CacheCorruptError, FetchError, InputError, NoValidPreviewsError
from .infra import ensure_file, read_json_file, write_json_file
from .records import PreviewEntry, PreviewRecord, URLRecord

EMPTY_ARRAY_LITERAL = "[]"


class ProgressSink(Protocol):
    def start(self, total: int) -> None: ...

    def advance(
        self,
        success: bool = False,
        failed: bool = False,
        skipped: bool = False,
        current_url: str | None = None,
    ) -> None: ...

    def close(self) -> None: ...


class _CachedEntry(BaseModel):
    """Loose view of an output-array element, used only to rebuild the cache."""

    url: str
    preview: Any = None


_INPUT_RECORDS = TypeAdapter(list[URLRecord])
_CACHE_MAPPING = TypeAdapter(dict[str, Any])
_CACHE_ENTRIES = TypeAdapter(list[_CachedEntry])


def _has_preview(preview: Any) -> bool:
    return preview is not None and preview != {}


@dataclass(frozen=True)
class FetchOutcome:
    """Either a usable preview or the reason the URL was skipped."""

    preview: PreviewRecord | None = None
    skip_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.preview is not None


@dataclass
class PreviewRunResult:
    entries: list[PreviewEntry] = field(default_factory=list)
    cache: dict[str, Any] = field(default_factory=dict)
    cached: int = 0
    fetched: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.entries)


def load_url_records(path: Path) -> list[URLRecord]:
    """Read the preview input list; any unreadable or incomplete record is fatal."""

    try:
        payload = read_json_file(path)
    except OSError as exc:
        raise InputError(f"cannot read preview input {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"preview input {path} is not valid JSON: {exc}") from exc
    try:
        return _INPUT_RECORDS.validate_python(payload)
    except ValidationError as exc:
        raise InputError(f"preview input {path} has malformed records: {exc}") from exc


def decode_preview_cache(text: str) -> dict[str, Any]:
    """Decode cache file contents.

    Accepted shapes, tried in this order: a ``{url: preview}`` mapping, the
    output array (rehydrated by ``url``), the empty-array literal. Blank text
    is an empty cache; null and empty previews are left out so they get refetched.
    """

    if not text.strip():
        return {}

    try:
        mapping = _CACHE_MAPPING.validate_json(text)
    except ValidationError:
        pass
    else:
        return {url: preview for url, preview in mapping.items() if _has_preview(preview)}

    try:
        entries = _CACHE_ENTRIES.validate_json(text)
    except ValidationError:
        pass
    else:
        return {entry.url: entry.preview for entry in entries if _has_preview(entry.preview)}

    if text.strip() == EMPTY_ARRAY_LITERAL:
        return {}

    raise CacheCorruptError("existing preview output is neither a mapping nor a preview array")


def load_preview_cache(path: Path) -> dict[str, Any]:
    """Load the previous output as a cache, creating an empty placeholder if absent."""

    if not path.exists():
        ensure_file(path)
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CacheCorruptError(f"cannot read preview output {path}: {exc}") from exc
    try:
        return decode_preview_cache(text)
    except CacheCorruptError as exc:
        raise CacheCorruptError(f"{path}: {exc}") from exc


class PreviewCacheGenerator:
    """Produce previews for a URL list, reusing and extending a cache."""

    def __init__(
        self,
        fetcher: PreviewFetcher,
        progress: ProgressSink | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.progress = progress
        self.logger = logger or structlog.get_logger("link_builder.previews")

    def run(self, input_path: Path, output_path: Path) -> PreviewRunResult:
        records = load_url_records(input_path)
        cache = load_preview_cache(output_path)
        return self.generate(records, cache, output_path)

    def fetch_one(self, url: str) -> FetchOutcome:
        try:
            preview = self.fetcher.fetch(url)
        except FetchError as exc:
            return FetchOutcome(skip_reason=f"fetch failed: {exc.reason}")
        if preview is None:
            return FetchOutcome(skip_reason="fetcher returned nothing")
        if preview.is_empty:
            return FetchOutcome(skip_reason="empty preview")
        return FetchOutcome(preview=preview)

    def generate(
        self,
        records: Sequence[URLRecord],
        cache: dict[str, Any],
        output_path: Path,
    ) -> PreviewRunResult:
        """Fill ``cache`` for ``records`` and persist the output after each entry."""

        result = PreviewRunResult(cache=cache)
        total = len(records)
        cached = sum(1 for record in records if record.url in cache)
        self.logger.info("preview_plan", total=total, cached=cached, to_process=total - cached)
        if self.progress is not None:
            self.progress.start(total)

        try:
            for index, record in enumerate(records, start=1):
                self.logger.info("preview_processing", position=index, total=total, url=record.url)
                if record.url in cache:
                    preview = cache[record.url]
                    result.cached += 1
                    self._advance(skipped=True, url=record.url)
                else:
                    outcome = self.fetch_one(record.url)
                    if not outcome.ok:
                        self.logger.warning(
                            "preview_skipped", url=record.url, reason=outcome.skip_reason
                        )
                        result.skipped += 1
                        self._advance(failed=True, url=record.url)
                        continue
                    preview = outcome.preview.to_payload()
                    cache[record.url] = preview
                    result.fetched += 1
                    self._advance(success=True, url=record.url)

                result.entries.append(PreviewEntry.from_record(record, preview))
                write_json_file(
                    output_path, [entry.model_dump(mode="json") for entry in result.entries]
                )
        finally:
            if self.progress is not None:
                self.progress.close()

        if not result.entries:
            self.logger.error("no_valid_previews", output=str(output_path))
            raise NoValidPreviewsError("no valid previews generated")

        self.logger.info(
            "previews_saved",
            output=str(output_path),
            entries=result.total,
            cached=result.cached,
            fetched=result.fetched,
            skipped=result.skipped,
        )
        return result

    def _advance(
        self, *, success: bool = False, failed: bool = False, skipped: bool = False, url: str
    ) -> None:
        if self.progress is not None:
            self.progress.advance(success=success, failed=failed, skipped=skipped, current_url=url)


__all__ = [
    "FetchOutcome",
    "PreviewCacheGenerator",
    "PreviewRunResult",
    "decode_preview_cache",
    "load_preview_cache",
    "load_url_records",
]
