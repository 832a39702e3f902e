from __future__ import annotations

import httpx
import pytest

from link_builder.engine.fetcher import HeadProbe, HttpPreviewFetcher
from link_builder.errors import FetchError
from link_builder.infra import RateLimiter

PAGE = """
<html>
  <head>
    <title> Example Domain </title>
    <meta name="description" content="An illustrative page">
    <meta property="og:title" content="OG Example">
    <meta property="og:image" content="https://example.com/a.png">
    <meta name="twitter:card" content="summary">
  </head>
  <body><h1>Example</h1></body>
</html>
"""


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)


def test_fetcher_parses_html_preview() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=PAGE, headers={"Content-Type": "text/html; charset=utf-8"})

    with HttpPreviewFetcher(client=_client(handler)) as fetcher:
        preview = fetcher.fetch("https://example.com/")

    assert seen == ["https://example.com/"]
    assert preview.title == "Example Domain"
    assert preview.description == "An illustrative page"
    assert preview.og_meta == {"title": "OG Example", "image": "https://example.com/a.png"}
    assert preview.twitter_meta == {"card": "summary"}


def test_fetcher_raises_fetch_error_on_bad_status() -> None:
    client = _client(lambda request: httpx.Response(404, text="missing"))
    fetcher = HttpPreviewFetcher(client=client)
    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("https://example.com/missing")
    assert "404" in excinfo.value.reason


def test_fetcher_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    fetcher = HttpPreviewFetcher(client=_client(handler))
    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("https://unreachable.example.com")
    assert excinfo.value.url == "https://unreachable.example.com"


def test_fetcher_rejects_non_html_content() -> None:
    client = _client(
        lambda request: httpx.Response(200, content=b"%PDF", headers={"Content-Type": "application/pdf"})
    )
    with pytest.raises(FetchError):
        HttpPreviewFetcher(client=client).fetch("https://example.com/doc.pdf")


class _CountingLimiter(RateLimiter):
    def __init__(self) -> None:
        super().__init__(rate=1000.0, burst=1000)
        self.waits = 0

    def wait(self) -> float:
        self.waits += 1
        return 0.0


@pytest.mark.parametrize(
    ("status", "alive"),
    [(200, True), (301, True), (399, True), (404, False), (500, False)],
)
def test_head_probe_status_classification(status: int, alive: bool) -> None:
    methods: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(status)

    limiter = _CountingLimiter()
    probe = HeadProbe(limiter, client=_client(handler))
    assert probe.is_alive("https://example.com") is alive
    assert methods == ["HEAD"]
    assert limiter.waits == 1


def test_head_probe_treats_transport_error_as_dead() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    probe = HeadProbe(_CountingLimiter(), client=_client(handler))
    assert probe.is_alive("https://slow.example.com") is False
