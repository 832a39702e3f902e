"""Wire configuration to the import and preview pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog

from .config import LinkBuilderConfig
from .engine import (
    HeadProbe,
    HttpPreviewFetcher,
    PreviewFetcher,
    compile_ignore_pattern,
    ensure_unique_urls,
    filter_unique_records,
    normalize_urls,
    validate_urls_concurrently,
    warn_if_urls_contain_session,
)
from .engine.fetcher import DEFAULT_USER_AGENT
from .imports import load_chat_export
from .infra import RateLimiter, write_json_file
from .previews import PreviewCacheGenerator, PreviewRunResult, ProgressSink
from .records import URLRecord


@dataclass
class ImportSummary:
    """Statistics of one import run."""

    output_path: Path
    total: int
    valid: int
    ignored: int
    records: list[URLRecord] = field(default_factory=list)

    @property
    def invalid(self) -> int:
        return self.total - self.valid - self.ignored


def project_records(records: list[URLRecord], normalized: dict[str, str]) -> list[URLRecord]:
    """Rewrite each surviving record onto its normalized URL; drop the rest."""

    return [record.with_url(normalized[record.url]) for record in records if record.url in normalized]


class Orchestrator:
    """Central coordinator running the import and preview pipelines."""

    def __init__(
        self,
        config: LinkBuilderConfig,
        fetcher_factory: Callable[[], PreviewFetcher] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.fetcher_factory = fetcher_factory
        self.logger = logger or structlog.get_logger("link_builder.orchestrator")

    # ------------------------------------------------------------------
    # URL import
    # ------------------------------------------------------------------
    def run_import(
        self,
        input_path: Path | None = None,
        output_path: Path | None = None,
        *,
        validate_head: bool | None = None,
        ignore_pattern: str | None = None,
        workers: int | None = None,
    ) -> ImportSummary:
        settings = self.config.validation
        input_path = input_path or self.config.imports.input_path
        output_path = output_path or self.config.imports.output_path
        validate_head = settings.validate_head if validate_head is None else validate_head
        pattern = compile_ignore_pattern(
            ignore_pattern if ignore_pattern is not None else settings.ignore_pattern
        )

        records = load_chat_export(input_path)

        probe = None
        if validate_head:
            limiter = RateLimiter(rate=settings.head_rate_per_second, burst=settings.head_burst)
            probe = HeadProbe(limiter, timeout=settings.head_timeout)
        try:
            result = validate_urls_concurrently(
                [record.url for record in records],
                pattern,
                max_workers=workers or settings.workers,
                probe=probe,
            )
        finally:
            if probe is not None:
                probe.close()

        normalized = normalize_urls(result.valid_urls)
        warn_if_urls_contain_session(normalized.values())
        projected = project_records(records, normalized)
        survivors = ensure_unique_urls(set(normalized.values()), projected)
        unique_records = filter_unique_records(survivors, projected)

        summary = ImportSummary(
            output_path=output_path,
            total=len(records),
            valid=len(unique_records),
            ignored=result.ignored_count,
            records=unique_records,
        )
        self.logger.info(
            "import_statistics",
            total=summary.total,
            valid=summary.valid,
            invalid=summary.invalid,
            ignored=summary.ignored,
        )

        write_json_file(output_path, [record.model_dump(mode="json") for record in unique_records])
        self.logger.info("import_saved", output=str(output_path), records=len(unique_records))
        return summary

    # ------------------------------------------------------------------
    # Previews
    # ------------------------------------------------------------------
    def _build_fetcher(self) -> PreviewFetcher:
        if self.fetcher_factory is not None:
            return self.fetcher_factory()
        settings = self.config.previews
        return HttpPreviewFetcher(
            timeout=settings.timeout,
            user_agent=settings.user_agent or DEFAULT_USER_AGENT,
        )

    def run_previews(
        self,
        input_path: Path | None = None,
        output_path: Path | None = None,
        progress: ProgressSink | None = None,
    ) -> PreviewRunResult:
        input_path = input_path or self.config.previews.input_path
        output_path = output_path or self.config.previews.output_path
        fetcher = self._build_fetcher()
        try:
            generator = PreviewCacheGenerator(fetcher, progress=progress)
            return generator.run(input_path, output_path)
        finally:
            close = getattr(fetcher, "close", None)
            if callable(close):
                close()


__all__ = ["ImportSummary", "Orchestrator", "project_records"]
