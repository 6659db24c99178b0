"""Best-effort page metadata scraping.

One GET per URL, then a fixed list of rules per field; the first rule that
produces a non-blank value wins. Nothing in here raises to the caller: a
failed fetch or parse yields an empty ``PageMetadata``.
"""
import asyncio
import re
from collections.abc import Callable
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from link_library.common.logging import get_logger
from link_library.config import Settings
from link_library.schemas.metadata import PageMetadata

logger = get_logger(__name__)

Rule = Callable[[BeautifulSoup], Optional[str]]

_WHITESPACE = re.compile(r"\s+")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = _WHITESPACE.sub(" ", value).strip()
    return value or None


def _meta(attr: str, key: str) -> Rule:
    def rule(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find("meta", attrs={attr: key})
        return tag.get("content") if tag else None

    return rule


def _link_rel(rel: str) -> Rule:
    def rule(soup: BeautifulSoup) -> Optional[str]:
        wanted = rel.split()
        # bs4 splits rel into a list of tokens.
        for tag in soup.find_all("link", href=True):
            tokens = [t.lower() for t in tag.get("rel") or []]
            if all(t in tokens for t in wanted):
                return tag["href"]
        return None

    return rule


def _itemprop(name: str) -> Rule:
    def rule(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find(attrs={"itemprop": name})
        if tag is None:
            return None
        return tag.get("content") or tag.get("src") or tag.get("href") or tag.get_text()

    return rule


def _element_text(name: str) -> Rule:
    def rule(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find(name)
        return tag.get_text() if tag else None

    return rule


TITLE_RULES: list[Rule] = [
    _meta("property", "og:title"),
    _meta("name", "twitter:title"),
    _meta("name", "title"),
    _element_text("title"),
    _element_text("h1"),
]

DESCRIPTION_RULES: list[Rule] = [
    _meta("property", "og:description"),
    _meta("name", "twitter:description"),
    _meta("name", "description"),
    _itemprop("description"),
]

IMAGE_RULES: list[Rule] = [
    _meta("property", "og:image"),
    _meta("property", "og:image:url"),
    _meta("property", "og:image:secure_url"),
    _meta("name", "twitter:image"),
    _meta("name", "twitter:image:src"),
    _link_rel("image_src"),
    _itemprop("image"),
]

SITE_NAME_RULES: list[Rule] = [
    _meta("property", "og:site_name"),
    _meta("name", "application-name"),
    _meta("name", "apple-mobile-web-app-title"),
    _meta("name", "publisher"),
]

FAVICON_RULES: list[Rule] = [
    _meta("property", "og:logo"),
    _itemprop("logo"),
    _link_rel("apple-touch-icon"),
    _link_rel("icon"),  # also matches "shortcut icon"
]


def _first(soup: BeautifulSoup, rules: list[Rule]) -> Optional[str]:
    for rule in rules:
        value = _clean(rule(soup))
        if value:
            return value
    return None


def _absolute(base_url: str, value: Optional[str]) -> Optional[str]:
    return urljoin(base_url, value) if value else None


def extract_metadata(html: str, base_url: str) -> PageMetadata:
    soup = BeautifulSoup(html, "html.parser")
    return PageMetadata(
        title=_first(soup, TITLE_RULES),
        description=_first(soup, DESCRIPTION_RULES),
        image=_absolute(base_url, _first(soup, IMAGE_RULES)),
        site_name=_first(soup, SITE_NAME_RULES),
        favicon=_absolute(base_url, _first(soup, FAVICON_RULES)),
    )


class MetadataScraper:
    """Fetches a page and extracts preview metadata from it."""

    def __init__(
        self,
        timeout: float = 8.0,
        user_agent: str = "LinkLibrary/1.0",
        max_bytes: int = 2_000_000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_bytes = max_bytes
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "MetadataScraper":
        return cls(
            timeout=settings.scraper_timeout,
            user_agent=settings.scraper_user_agent,
            max_bytes=settings.scraper_max_bytes,
        )

    async def _fetch(self, url: str) -> Optional[tuple[str, str]]:
        """Return (html, final_url), or None when the page is unusable."""
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    logger.warning("Metadata fetch for %s returned %s", url, response.status_code)
                    return None
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self.max_bytes:
                        logger.warning("Metadata fetch for %s exceeded %d bytes", url, self.max_bytes)
                        return None
                html = bytes(body).decode(response.encoding or "utf-8", errors="replace")
                return html, str(response.url)

    async def scrape(self, url: str) -> PageMetadata:
        logger.info("Scraping metadata for %s", url)
        try:
            # httpx timeouts are per phase; this bounds the whole request.
            fetched = await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
            if fetched is None:
                return PageMetadata()
            html, final_url = fetched
            return extract_metadata(html, final_url)
        except asyncio.TimeoutError:
            logger.warning("Metadata scrape for %s timed out after %ss", url, self.timeout)
            return PageMetadata()
        except Exception as exc:
            logger.warning("Metadata scrape failed for %s: %r", url, exc)
            return PageMetadata()
