"""Tests for profiles, Haven memory and the publishing calendar."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from haven.errors import MissingFieldError, NotFoundError
from haven.models.db_models import Asset, UserProfile
from haven.models.schemas import ProfileIn
from haven.services.profile_service import ProfileService, ScheduleService, resolve_publication_status

SLOT = datetime(2026, 11, 1, 9, 0, tzinfo=timezone.utc)


class TestPublicationStatus:
    def test_explicit_status_wins(self):
        assert resolve_publication_status("published", SLOT) == "published"

    def test_timestamp_means_scheduled(self):
        assert resolve_publication_status(None, SLOT) == "scheduled"

    def test_default_is_draft(self):
        assert resolve_publication_status(None, None) == "draft"


class TestProfileService:
    async def test_get_requires_user(self, db_session):
        with pytest.raises(MissingFieldError, match="User ID required"):
            await ProfileService(db_session).get_profile(None)

    async def test_save_creates_profile(self, db_session):
        db_session.get.return_value = None

        profile = await ProfileService(db_session).save_profile(
            "u1", ProfileIn(name="Ana", writing_style="punchy", languages=["en", "ms"])
        )

        added = db_session.add.call_args.args[0]
        assert isinstance(added, UserProfile)
        assert profile.user_id == "u1"
        assert profile.writing_style == "punchy"
        assert profile.languages == ["en", "ms"]
        db_session.commit.assert_awaited_once()

    def test_get_route_returns_camel_case(self, client, db_session):
        db_session.get.return_value = UserProfile(user_id="u1", name="Ana", writing_style="calm", languages=["en"])

        body = client.get("/user/profile", params={"userId": "u1"}).json()

        assert body["success"] is True
        assert body["profile"]["userId"] == "u1"
        assert body["profile"]["writingStyle"] == "calm"

    def test_missing_profile_is_null(self, client, db_session):
        db_session.get.return_value = None

        assert client.get("/user/profile", params={"userId": "u1"}).json() == {"success": True, "profile": None}

    def test_add_memory_requires_summary(self, client):
        response = client.post("/haven/memory", json={"userId": "u1"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "User ID and session summary required"}

    def test_recent_memories(self, client, db_session):
        memory = SimpleNamespace(id="m1", session_summary="Talked rivers", key_topics=None, created_at=SLOT)
        result = MagicMock()
        result.scalars.return_value.all.return_value = [memory]
        db_session.execute.return_value = result

        body = client.get("/haven/memory", params={"userId": "u1", "limit": 3}).json()

        assert body == {
            "success": True,
            "memories": [
                {"id": "m1", "sessionSummary": "Talked rivers", "keyTopics": [], "createdAt": SLOT.isoformat()}
            ],
        }


class TestScheduleService:
    async def test_schedule_sets_status_from_timestamp(self, db_session):
        asset = Asset(id="a1", user_id="u1", filename="post.png", publication_status="draft")
        db_session.get.return_value = asset

        data = await ScheduleService(db_session).schedule("a1", SLOT, None)

        assert data["publication_status"] == "scheduled"
        assert data["scheduled_at"] == SLOT.isoformat()

    async def test_unknown_asset(self, db_session):
        db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await ScheduleService(db_session).schedule("ghost", SLOT, None)

    def test_schedule_route_requires_asset(self, client):
        response = client.post("/assets/schedule", json={"scheduledAt": SLOT.isoformat()})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing assetId"}
