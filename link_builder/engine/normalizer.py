"""Structural URL checks and session-token stripping."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import structlog

ALLOWED_SCHEMES = ("http", "https")
JSESSIONID_MARKER = ";jsessionid="
SESSION_KEYWORD = "session"

logger = structlog.get_logger("link_builder.normalizer")


def _has_control_chars(value: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in value)


def is_valid_url(raw: str) -> bool:
    """Return True for absolute http(s) URLs with a host; never raises."""

    if not isinstance(raw, str) or raw != raw.strip() or _has_control_chars(raw):
        return False
    try:
        parts = urlsplit(raw)
    except ValueError:
        return False
    if parts.scheme not in ALLOWED_SCHEMES:
        return False
    host = parts.netloc.rpartition("@")[2]
    return bool(host)


def strip_session_artifacts(url: str) -> str:
    """Remove ``;jsessionid=`` suffixes and session query parameters.

    Raises ``ValueError`` when the remaining string is not a parseable URL.
    URLs without session markers are returned unchanged.
    """

    marker = url.find(JSESSIONID_MARKER)
    if marker != -1:
        url = url[:marker]
    if _has_control_chars(url):
        raise ValueError(f"control characters in URL: {url!r}")
    parts = urlsplit(url)
    if not parts.query:
        return url
    params = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(key, value) for key, value in params if SESSION_KEYWORD not in key.lower()]
    if len(kept) == len(params):
        return url
    kept.sort(key=lambda pair: pair[0])
    return urlunsplit(parts._replace(query=urlencode(kept)))


def normalize_urls(urls: Iterable[str]) -> dict[str, str]:
    """Map each URL to its stripped form.

    URLs that fail to parse, or that stop being valid once stripped, are dropped.
    """

    normalized: dict[str, str] = {}
    for url in urls:
        try:
            stripped = strip_session_artifacts(url)
        except ValueError as exc:
            logger.warning("url_parse_failed", url=url, error=str(exc))
            continue
        if not is_valid_url(stripped):
            logger.warning("url_parse_failed", url=url, error=f"invalid after stripping: {stripped!r}")
            continue
        normalized[url] = stripped
    return normalized


def warn_if_urls_contain_session(urls: Iterable[str]) -> list[str]:
    flagged = sorted(url for url in urls if SESSION_KEYWORD in url.lower())
    for url in flagged:
        logger.warning("url_contains_session", url=url)
    return flagged


__all__ = [
    "ALLOWED_SCHEMES",
    "is_valid_url",
    "normalize_urls",
    "strip_session_artifacts",
    "warn_if_urls_contain_session",
]
