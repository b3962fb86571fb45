"""Tests for the embedding backfill."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from haven.errors import MissingFieldError
from haven.services.backfill_service import BackfillService, searchable_text


def _pending(*assets):
    result = MagicMock()
    result.all.return_value = list(assets)
    return result


class TestSearchableText:
    def test_joins_metadata(self):
        text = searchable_text("trip.jpg", {"title": "Alps", "summary": "Hiking", "tags": ["snow", "peaks"]})

        assert text == "trip.jpg Alps Hiking snow peaks"

    def test_truncated(self):
        assert len(searchable_text("a", {"raw_content": "x" * 5000})) == 2000

    def test_missing_metadata(self):
        assert searchable_text(None, None) == ""


class TestBackfill:
    async def test_requires_user(self, db_session):
        with pytest.raises(MissingFieldError):
            await BackfillService(db_session).backfill(None)

    async def test_nothing_to_do(self, db_session):
        db_session.execute.return_value = _pending()

        result = await BackfillService(db_session).backfill("u1")

        assert result == {"message": "No assets need backfilling", "processed": 0}

    async def test_counts_success_and_failure(self, db_session):
        db_session.execute.side_effect = [
            _pending(
                SimpleNamespace(id="a1", filename="river.jpg", meta=None),
                SimpleNamespace(id="a2", filename="lake.jpg", meta={"title": "Lake"}),
                SimpleNamespace(id="a3", filename="", meta=None),
            ),
            None,
        ]

        with patch(
            "haven.services.gemini_service.embed_text", side_effect=[[0.1, 0.2], RuntimeError("quota")]
        ):
            result = await BackfillService(db_session).backfill("u1")

        assert result == {"message": "Backfill complete", "processed": 1, "failed": 1, "total": 3}
        db_session.commit.assert_awaited_once()
        db_session.rollback.assert_awaited_once()
