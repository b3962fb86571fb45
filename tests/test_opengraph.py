"""Tests for link preview metadata."""

from unittest.mock import patch

import httpx
import pytest

from haven.errors import InvalidOptionError, MissingFieldError
from haven.services.opengraph_service import fetch_preview, normalize_url, parse_preview

HTML = """
<html><head>
  <title>Fallback title</title>
  <meta property="og:title" content=" Rivers of Europe ">
  <meta name="description" content="A guide to rivers.">
  <meta name="twitter:image" content="https://img.example/river.png">
</head><body></body></html>
"""


class TestNormalizeUrl:
    def test_adds_scheme(self):
        assert normalize_url(" example.com/page ") == "https://example.com/page"

    def test_keeps_http(self):
        assert normalize_url("http://example.com") == "http://example.com"

    def test_empty(self):
        with pytest.raises(MissingFieldError, match="URL is required"):
            normalize_url("   ")

    @pytest.mark.parametrize("url", ["https://", "not a url"])
    def test_invalid(self, url):
        with pytest.raises(InvalidOptionError, match="Invalid URL format"):
            normalize_url(url)


class TestParsePreview:
    def test_open_graph_and_fallbacks(self):
        preview = parse_preview(HTML, "https://rivers.example/eu")

        assert preview == {
            "title": "Rivers of Europe",
            "description": "A guide to rivers.",
            "image": "https://img.example/river.png",
            "siteName": "rivers.example",
            "url": "https://rivers.example/eu",
        }

    def test_title_tag_when_no_meta(self):
        preview = parse_preview("<html><head><title> Plain </title></head></html>", "https://a.example")

        assert preview["title"] == "Plain"
        assert preview["description"] == ""
        assert preview["image"] is None

    def test_no_title_at_all(self):
        assert parse_preview("<html></html>", "https://a.example")["title"] == "No title available"


class TestFetchPreview:
    async def test_network_failure_is_a_soft_fallback(self):
        with patch("haven.services.opengraph_service.httpx.AsyncClient", side_effect=httpx.ConnectError("down")):
            result = await fetch_preview("example.com")

        assert result == {"error": "Failed to fetch metadata", "fallback": True}

    def test_route_rejects_bad_url(self, client):
        response = client.post("/opengraph", json={"url": "not a url"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL format"}
