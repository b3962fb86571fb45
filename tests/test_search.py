"""Tests for semantic search, vault lookup and web research."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import ProgrammingError

from haven.errors import ConfigurationError, DatastoreError, MissingFieldError
from haven.services import search_service
from haven.services.search_service import SearchService, is_missing_function_error, vault_item_to_dict


@pytest.fixture
def mock_embed():
    with patch("haven.services.gemini_service.embed_text", return_value=[0.1, 0.2, 0.3]) as mock:
        yield mock


def _count(n):
    result = MagicMock()
    result.scalar.return_value = n
    return result


def _db_error(message):
    return ProgrammingError("SELECT * FROM match_assets(...)", {}, Exception(message))


class TestSemanticSearch:
    async def test_requires_query_and_user(self, db_session):
        with pytest.raises(MissingFieldError, match="Query is required"):
            await SearchService(db_session).search("", "u1")
        with pytest.raises(MissingFieldError, match="User ID is required"):
            await SearchService(db_session).search("rivers", None)

    async def test_rows_are_returned(self, db_session, mock_embed):
        rows = [SimpleNamespace(_mapping={"id": "a1", "filename": "river.jpg", "similarity": 0.82})]
        db_session.execute.side_effect = [_count(4), rows]

        result = await SearchService(db_session).search("rivers", "u1", threshold=0.2, limit=5)

        assert result["results"] == [{"id": "a1", "filename": "river.jpg", "similarity": 0.82}]
        assert result["fallback"] is False
        assert result["assetsWithEmbeddings"] == 4
        params = db_session.execute.call_args_list[1].args[1]
        assert params["query_embedding"] == "[0.1,0.2,0.3]"
        assert params["match_threshold"] == 0.2
        assert params["match_count"] == 5

    async def test_missing_function_falls_back(self, db_session, mock_embed):
        db_session.execute.side_effect = [_count(0), _db_error("function match_assets(vector) does not exist")]

        result = await SearchService(db_session).search("rivers", "u1")

        assert result["results"] == []
        assert result["fallback"] is True
        db_session.rollback.assert_awaited_once()

    async def test_missing_embedding_column_still_falls_back(self, db_session, mock_embed):
        db_session.execute.side_effect = [
            _db_error("column assets.embedding does not exist"),
            _db_error("function match_assets(vector) does not exist"),
        ]

        result = await SearchService(db_session).search("rivers", "u1")

        assert result["results"] == []
        assert result["fallback"] is True
        assert db_session.rollback.await_count == 2

    async def test_failed_count_reports_zero(self, db_session, mock_embed):
        db_session.execute.side_effect = [_db_error("column assets.embedding does not exist"), []]

        result = await SearchService(db_session).search("rivers", "u1")

        assert result["fallback"] is False
        assert result["assetsWithEmbeddings"] == 0

    async def test_other_database_errors_raise(self, db_session, mock_embed):
        db_session.execute.side_effect = [_count(0), _db_error("permission denied for table assets")]

        with pytest.raises(DatastoreError):
            await SearchService(db_session).search("rivers", "u1")

    def test_missing_function_detection(self):
        assert is_missing_function_error('relation "match_assets" does not exist')
        assert not is_missing_function_error("connection refused")

    def test_route_reports_datastore_errors_with_fallback(self, client, db_session, mock_embed):
        db_session.execute.side_effect = [_count(0), _db_error("permission denied for table assets")]

        response = client.post("/search", json={"query": "rivers", "userId": "u1"})

        assert response.status_code == 500
        body = response.json()
        assert body["results"] == [] and body["fallback"] is True

    def test_route_without_vector_setup_answers_fallback(self, client, db_session, mock_embed):
        db_session.execute.side_effect = [
            _db_error("column assets.embedding does not exist"),
            _db_error("function match_assets(vector) does not exist"),
        ]

        response = client.post("/search", json={"query": "rivers", "userId": "u1"})

        assert response.status_code == 200
        body = response.json()
        assert body["results"] == []
        assert body["fallback"] is True


class TestVault:
    def test_item_preview_and_url(self):
        item = SimpleNamespace(
            id="v1", title="T", summary=None, category="c", asset_type="link",
            created_at=None, url=None, file_url="https://files/v1.pdf",
        )

        data = vault_item_to_dict(item)

        assert data["preview"] == "No summary available"
        assert data["url"] == "https://files/v1.pdf"

    async def test_blank_query_rejected(self, db_session):
        with pytest.raises(MissingFieldError):
            await SearchService(db_session).vault_search("   ", "u1")


class TestWebSearch:
    async def test_missing_key(self):
        with patch.object(search_service.settings, "tavily_api_key", ""):
            with pytest.raises(ConfigurationError, match="Tavily API key not configured"):
                await search_service.web_search("rivers")

    async def test_sources_are_mapped(self):
        response = MagicMock()
        response.json.return_value = {
            "results": [{"title": "Rivers", "url": "https://r.example", "content": "Water flows", "score": 0.9}]
        }
        client = MagicMock()
        client.post = AsyncMock(return_value=response)
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)

        with patch.object(search_service.settings, "tavily_api_key", "key"), patch(
            "haven.services.search_service.httpx.AsyncClient", return_value=client
        ):
            sources = await search_service.web_search("rivers")

        assert sources == [{"title": "Rivers", "url": "https://r.example", "snippet": "Water flows", "score": 0.9}]
