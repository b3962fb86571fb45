"""Tests for staging item categorization."""

import io
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from haven.agents.categorize import categorize_item, normalize_suggestion
from haven.errors import ModelResponseError, NotFoundError
from haven.models.db_models import Asset, StagingItem
from haven.services.staging_service import StagingService

SUGGESTION = {"category": "document", "title": "River Notes", "summary": "Notes on rivers.", "tags": ["rivers", "water"]}


def _fetch(data, content_type=None):
    return patch("haven.agents.categorize.fetch_bytes", AsyncMock(return_value=(data, content_type)))


@pytest.fixture
def mock_media():
    with patch("haven.services.gemini_service.generate_with_media", return_value=json.dumps(SUGGESTION)) as mock:
        yield mock


class TestCategorizeItem:
    async def test_raw_text_goes_in_the_prompt(self, mock_generate):
        mock_generate.return_value = json.dumps({"category": "link", "title": "Docs", "summary": "A site.", "tags": ["web"]})

        result = await categorize_item("text", "https://docs.example")

        assert result == {"category": "link", "title": "Docs", "summary": "A site.", "tags": ["web"]}
        assert '"https://docs.example"' in mock_generate.call_args.args[0]

    async def test_pdf_is_sent_inline(self, mock_generate, mock_media):
        asset = {"url": "https://files/r.pdf", "type": "document", "filename": "r.pdf"}
        with _fetch(b"%PDF-1.7"):
            result = await categorize_item("file", None, asset)

        assert result == SUGGESTION
        assert mock_media.call_args.args[1:3] == (b"%PDF-1.7", "application/pdf")
        mock_generate.assert_not_called()

    async def test_image_uses_response_content_type(self, mock_generate, mock_media):
        asset = {"url": "https://files/p.png", "type": "image", "filename": "p.png"}
        with _fetch(b"\x89PNG", "image/png; charset=binary"):
            await categorize_item("file", None, asset)

        assert mock_media.call_args.args[2] == "image/png"

    async def test_markdown_is_read_into_the_prompt(self, mock_generate):
        mock_generate.return_value = json.dumps(SUGGESTION)
        asset = {"url": "https://files/n.md", "type": "document", "filename": "n.md"}
        with _fetch("# Rivers flow".encode()):
            await categorize_item("file", None, asset)

        prompt = mock_generate.call_args.args[0]
        assert "Analyze this document content" in prompt
        assert "# Rivers flow" in prompt

    async def test_docx_text_is_extracted(self, mock_generate):
        from docx import Document

        doc = Document()
        doc.add_paragraph("Quarterly river survey")
        buf = io.BytesIO()
        doc.save(buf)
        mock_generate.return_value = json.dumps(SUGGESTION)
        asset = {"url": "https://files/s.docx", "type": "document", "filename": "s.docx"}
        with _fetch(buf.getvalue()):
            await categorize_item("file", None, asset)

        assert "Quarterly river survey" in mock_generate.call_args.args[0]

    async def test_unreadable_docx_is_judged_by_filename(self, mock_generate):
        mock_generate.return_value = json.dumps(SUGGESTION)
        asset = {"url": "https://files/s.docx", "type": "document", "filename": "survey.docx"}
        with _fetch(b"not a zip"):
            await categorize_item("file", None, asset)

        assert 'Analyze this file: "survey.docx"' in mock_generate.call_args.args[0]

    async def test_video_is_not_fetched(self, mock_generate):
        mock_generate.return_value = json.dumps({"title": "Clip", "summary": "", "tags": []})
        asset = {"url": "https://files/c.mp4", "type": "video", "filename": "c.mp4"}
        with _fetch(b"") as fetch:
            result = await categorize_item("file", None, asset)

        fetch.assert_not_called()
        assert result["category"] == "video"

    async def test_non_json_answer_is_an_error(self, mock_generate):
        mock_generate.return_value = "I think this is a note."

        with pytest.raises(ModelResponseError):
            await categorize_item("text", "buy milk")


class TestNormalizeSuggestion:
    def test_unknown_category_and_bad_tags(self):
        result = normalize_suggestion({"category": "Podcast", "title": "T", "tags": "a,b"}, {})

        assert result == {"category": "note", "title": "T", "summary": "", "tags": []}

    def test_category_is_lowercased(self):
        assert normalize_suggestion({"category": " Image "}, {})["category"] == "image"


class TestStagingService:
    async def test_suggestion_is_stored_and_item_leaves_the_sweep(self, db_session, mock_media):
        item = StagingItem(id="s1", user_id="u1", type="file", asset_id="a1", meta={"source": "upload"}, is_categorized=False)
        asset = Asset(id="a1", user_id="u1", filename="r.pdf", type="document", url="https://files/r.pdf")
        db_session.get.side_effect = [item, asset]

        with _fetch(b"%PDF"):
            suggestion = await StagingService(db_session).categorize("s1")

        assert suggestion == SUGGESTION
        assert item.is_categorized is True
        assert item.meta == {"source": "upload", "ai_suggestion": SUGGESTION, "is_categorizing": False}
        db_session.commit.assert_awaited_once()

    async def test_unknown_item(self, db_session):
        db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await StagingService(db_session).categorize("missing")

    def test_route(self, client, db_session, mock_generate):
        mock_generate.return_value = json.dumps({"category": "note", "title": "Milk", "summary": "Errand.", "tags": []})
        db_session.get.return_value = SimpleNamespace(
            type="text", content="buy milk", asset_id=None, meta=None, is_categorized=False
        )

        response = client.post("/staging/s1/categorize")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "suggestion": {"category": "note", "title": "Milk", "summary": "Errand.", "tags": []},
        }

    def test_route_unknown_item(self, client, db_session):
        db_session.get.return_value = None

        response = client.post("/staging/missing/categorize")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Staging item missing not found"}
