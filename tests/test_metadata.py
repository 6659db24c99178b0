"""Metadata extraction rules and the never-raise scraping contract."""
import asyncio
import time

import httpx
import pytest

from link_library.schemas import PageMetadata
from link_library.services.metadata import MetadataScraper, extract_metadata

FULL_PAGE = """
<html>
  <head>
    <title>Fallback title</title>
    <meta property="og:title" content="  Open Graph   Title ">
    <meta name="twitter:title" content="Twitter title">
    <meta name="description" content="Plain description">
    <meta property="og:description" content="OG description">
    <meta property="og:image" content="/img/cover.png">
    <meta property="og:site_name" content="Example Site">
    <link rel="shortcut icon" href="/favicon.ico">
  </head>
  <body><h1>Heading</h1></body>
</html>
"""


def test_open_graph_wins_over_other_rules():
    meta = extract_metadata(FULL_PAGE, "https://example.com/articles/1")
    assert meta.title == "Open Graph Title"
    assert meta.description == "OG description"
    assert meta.site_name == "Example Site"


def test_relative_image_and_favicon_are_resolved():
    meta = extract_metadata(FULL_PAGE, "https://example.com/articles/1")
    assert meta.image == "https://example.com/img/cover.png"
    assert meta.favicon == "https://example.com/favicon.ico"


def test_falls_back_through_rule_order():
    html = """
    <html><head>
      <title>
        Page   title
      </title>
      <meta name="twitter:description" content="Tweet description">
      <meta name="twitter:image" content="https://cdn.example.com/t.jpg">
      <meta name="application-name" content="Example App">
      <link rel="apple-touch-icon" href="touch.png">
      <link rel="icon" href="icon.png">
    </head></html>
    """
    meta = extract_metadata(html, "https://example.com/a/")
    assert meta.title == "Page title"
    assert meta.description == "Tweet description"
    assert meta.image == "https://cdn.example.com/t.jpg"
    assert meta.site_name == "Example App"
    assert meta.favicon == "https://example.com/a/touch.png"


def test_blank_values_are_skipped():
    html = '<meta property="og:title" content="   "><h1>Real heading</h1>'
    meta = extract_metadata(html, "https://example.com")
    assert meta.title == "Real heading"


def test_unmatched_fields_are_absent_not_empty():
    meta = extract_metadata("<html><body><p>nothing here</p></body></html>", "https://example.com")
    assert meta == PageMetadata()
    assert meta.is_empty


def test_malformed_html_is_tolerated():
    meta = extract_metadata("<html><head><title>Broken</head><body><div><p>unclosed", "https://example.com")
    assert isinstance(meta, PageMetadata)


def _scraper(handler) -> MetadataScraper:
    return MetadataScraper(timeout=1.0, user_agent="TestAgent/1.0", transport=httpx.MockTransport(handler))


async def test_scrape_returns_extracted_metadata():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, html=FULL_PAGE)

    meta = await _scraper(handler).scrape("https://example.com/articles/1")
    assert meta.title == "Open Graph Title"
    assert meta.image == "https://example.com/img/cover.png"
    assert seen["ua"] == "TestAgent/1.0"


async def test_scrape_follows_redirects_and_resolves_against_final_url():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "short.example":
            return httpx.Response(301, headers={"Location": "https://example.com/real/page"})
        return httpx.Response(200, html='<meta property="og:image" content="pic.png">')

    meta = await _scraper(handler).scrape("https://short.example/x")
    assert meta.image == "https://example.com/real/pic.png"


@pytest.mark.parametrize("status", [404, 500, 503])
async def test_scrape_non_success_status_yields_empty(status):
    def handler(request):
        return httpx.Response(status, html=FULL_PAGE)

    assert (await _scraper(handler).scrape("https://example.com")).is_empty


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("too slow"),
        RuntimeError("something odd"),
    ],
)
async def test_scrape_never_raises(error):
    def handler(request):
        raise error

    meta = await _scraper(handler).scrape("https://unreachable.invalid")
    assert meta == PageMetadata()


async def test_scrape_rejects_unsupported_url_quietly():
    meta = await MetadataScraper(timeout=1.0).scrape("not a url at all")
    assert meta.is_empty


async def test_scrape_deadline_covers_slow_body():
    # Headers arrive promptly, then the body trickles in; no single read
    # exceeds the timeout, so only an overall deadline can stop it.
    async def trickle(reader, writer):
        await reader.readuntil(b"\r\n\r\n")
        writer.write(
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 100000\r\n\r\n"
        )
        try:
            for _ in range(16):
                writer.write(b"<p>slow</p>")
                await writer.drain()
                await asyncio.sleep(0.25)
        except ConnectionError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(trickle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        started = time.monotonic()
        meta = await MetadataScraper(timeout=1.0).scrape(f"http://127.0.0.1:{port}/")
        elapsed = time.monotonic() - started
    finally:
        server.close()

    assert meta.is_empty
    assert elapsed < 2.5


async def test_scrape_gives_up_on_oversized_body():
    page = "<title>Huge</title>" + "x" * 5000

    def handler(request):
        return httpx.Response(200, html=page)

    scraper = MetadataScraper(timeout=1.0, max_bytes=1000, transport=httpx.MockTransport(handler))
    assert (await scraper.scrape("https://example.com")).is_empty

    roomy = MetadataScraper(timeout=1.0, max_bytes=10_000, transport=httpx.MockTransport(handler))
    assert (await roomy.scrape("https://example.com")).title == "Huge"
