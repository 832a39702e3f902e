"""HTTP access: preview fetching and the optional HEAD liveness probe."""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from ..errors import FetchError
from ..infra import RateLimiter
from ..records import PreviewRecord
from .parser import PreviewParser

DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class PreviewFetcher(Protocol):
    """Capability turning a URL into preview metadata."""

    def fetch(self, url: str) -> PreviewRecord:
        """Return the preview for ``url`` or raise :class:`FetchError`."""


class HttpPreviewFetcher:
    """Fetch a page with httpx and parse its metadata."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        parser: PreviewParser | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
        self.parser = parser or PreviewParser()
        self.logger = logger or structlog.get_logger("link_builder.fetcher")

    def fetch(self, url: str) -> PreviewRecord:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(url, f"request failed: {exc}") from exc
        if not response.is_success:
            raise FetchError(url, f"unexpected status {response.status_code}")
        content_type = response.headers.get("content-type", "")
        if content_type and "html" not in content_type.lower():
            raise FetchError(url, f"unsupported content type {content_type}")
        self.logger.debug("preview_fetched", url=url, status=response.status_code)
        return self.parser.parse(response.text)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpPreviewFetcher":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()


class HeadProbe:
    """Rate-limited HEAD request telling whether a URL answers with 2xx/3xx."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.rate_limiter = rate_limiter
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=True, timeout=timeout)
        self.logger = logger or structlog.get_logger("link_builder.probe")

    def is_alive(self, url: str) -> bool:
        self.rate_limiter.wait()
        try:
            response = self._client.head(url)
        except httpx.HTTPError as exc:
            self.logger.info("head_probe_failed", url=url, error=str(exc))
            return False
        alive = 200 <= response.status_code < 400
        if not alive:
            self.logger.info("head_probe_rejected", url=url, status=response.status_code)
        return alive

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = ["DEFAULT_TIMEOUT", "HeadProbe", "HttpPreviewFetcher", "PreviewFetcher"]
