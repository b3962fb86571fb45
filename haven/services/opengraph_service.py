"""Link previews from Open Graph and Twitter card meta tags."""
from typing import Any
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from haven.errors import InvalidOptionError, MissingFieldError
from haven.utils.logging import get_logger

logger = get_logger(__name__)

FETCH_TIMEOUT = 5.0
HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; HavenBot/1.0; +link-preview)"}


def normalize_url(url: str | None) -> str:
    """Trim, default to https, and reject anything without a host."""
    if not url or not url.strip():
        raise MissingFieldError("URL is required")
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname or any(ch.isspace() for ch in url):
        raise InvalidOptionError("Invalid URL format")
    return url


def _meta(soup: BeautifulSoup, *names: str) -> str | None:
    for name in names:
        tag = soup.find("meta", attrs={"property": name}) or soup.find("meta", attrs={"name": name})
        if tag and tag.get("content"):
            return tag["content"].strip()
    return None


def parse_preview(html: str, url: str) -> dict[str, Any]:
    soup = BeautifulSoup(html, "html.parser")
    title = _meta(soup, "og:title", "twitter:title", "dc.title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()
    return {
        "title": title or "No title available",
        "description": _meta(soup, "og:description", "twitter:description", "description") or "",
        "image": _meta(soup, "og:image", "twitter:image", "twitter:image:src"),
        "siteName": _meta(soup, "og:site_name", "twitter:site") or urlparse(url).hostname,
        "url": url,
    }


async def fetch_preview(url: str | None) -> dict[str, Any]:
    """Preview for a link. Fetch or parse failures return ``{error, fallback: true}``."""
    normalized = normalize_url(url)
    try:
        async with httpx.AsyncClient(timeout=FETCH_TIMEOUT, follow_redirects=True, headers=HEADERS) as client:
            resp = await client.get(normalized)
        resp.raise_for_status()
        return parse_preview(resp.text, normalized)
    except Exception as e:
        logger.warning("opengraph_fetch_failed", url=normalized, error=str(e))
        return {"error": "Failed to fetch metadata", "fallback": True}
