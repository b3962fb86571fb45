"""Tests for B-roll keyword extraction and asset ranking."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from haven.agents.video import DEFAULT_BROLL_KEYWORDS, keywords_from_text
from haven.services.broll_service import matched_keywords, rank_assets

NOW = datetime(2026, 10, 18, tzinfo=timezone.utc)


def _asset(asset_id, filename, age_days=0, asset_type="video"):
    return SimpleNamespace(
        id=asset_id, filename=filename, type=asset_type, url=f"https://cdn/{filename}",
        created_at=NOW - timedelta(days=age_days),
    )


class TestKeywords:
    def test_array_in_prose(self):
        assert keywords_from_text('Sure: ["laptop", "coffee", ""]', {}) == ["laptop", "coffee"]

    def test_no_array_means_no_keywords(self):
        assert keywords_from_text("I could not find any.", {}) == []

    def test_broken_array_uses_defaults(self):
        assert keywords_from_text("[laptop, coffee]", {}) == DEFAULT_BROLL_KEYWORDS


class TestRanking:
    def test_matches_are_case_insensitive(self):
        assert matched_keywords("Office_LAPTOP.mp4", ["laptop", "desk"]) == ["laptop"]

    def test_score_then_recency(self):
        assets = [
            _asset("old-match", "laptop-office.mp4", age_days=5),
            _asset("new-match", "laptop-office-2.mp4", age_days=1),
            _asset("best", "laptop-coffee-office.mov", age_days=9),
            _asset("none", "beach.jpg", asset_type="image"),
        ]

        ranked = rank_assets(assets, ["laptop", "office", "coffee"])

        assert [r["id"] for r in ranked] == ["best", "new-match", "old-match", "none"]
        assert ranked[0]["relevanceScore"] == 3
        assert ranked[0]["matchedKeywords"] == ["laptop", "office", "coffee"]
        assert ranked[-1]["relevanceScore"] == 0

    def test_limit(self):
        assets = [_asset(str(i), f"clip{i}.mp4", age_days=i) for i in range(20)]

        assert len(rank_assets(assets, ["clip"])) == 12


class TestBrollRoute:
    def test_suggestions(self, client, db_session, mock_generate):
        mock_generate.return_value = '["laptop"]'
        candidates = MagicMock()
        candidates.scalars.return_value.all.return_value = [_asset("a1", "laptop.mp4")]
        db_session.execute.return_value = candidates

        response = client.post("/agents/broll", json={"scriptContent": "Typing on a laptop", "userId": "u1"})

        body = response.json()
        assert body["success"] is True
        assert body["keywords"] == ["laptop"]
        assert body["suggestions"][0]["id"] == "a1"

    def test_requires_script_and_user(self, client, mock_generate):
        response = client.post("/agents/broll", json={"scriptContent": "x"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Script content and userId required"}
