"""Tests for the staging lifecycle sweep."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from haven.models.db_models import ArchivedItem, StagingItem
from haven.services.lifecycle_service import LifecycleService, archived_copy, classify_staging_item

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _item(days_old, state="fresh", categorized=False, item_id="s1"):
    return StagingItem(
        id=item_id,
        user_id="u1",
        type="note",
        content="idea",
        is_categorized=categorized,
        lifecycle_state=state,
        created_at=NOW - timedelta(days=days_old),
    )


class TestClassify:
    def test_fresh_item_is_left_alone(self):
        assert classify_staging_item(_item(2), NOW) is None

    def test_ten_day_old_item_ages(self):
        assert classify_staging_item(_item(10), NOW) == "age"

    def test_fresh_month_old_item_is_archived(self):
        assert classify_staging_item(_item(31), NOW) == "archive"

    def test_week_old_item_ages(self):
        assert classify_staging_item(_item(8), NOW) == "age"

    def test_aging_item_is_not_aged_twice(self):
        assert classify_staging_item(_item(8, state="aging"), NOW) is None

    def test_month_old_item_is_archived(self):
        assert classify_staging_item(_item(31, state="aging"), NOW) == "archive"

    def test_categorized_items_never_move(self):
        assert classify_staging_item(_item(40, categorized=True), NOW) is None

    def test_naive_timestamps_are_treated_as_utc(self):
        item = _item(10)
        item.created_at = item.created_at.replace(tzinfo=None)

        assert classify_staging_item(item, NOW) == "age"


class TestSweep:
    async def test_sweep_archives_and_ages(self, db_session):
        old, stale = _item(45, item_id="old"), _item(9, item_id="stale")
        candidates = MagicMock()
        candidates.scalars.return_value.all.return_value = [old, stale]
        db_session.execute.return_value = candidates

        counts = await LifecycleService(db_session).sweep(now=NOW)

        assert counts == {"archived": 1, "aged": 1}
        copies = db_session.add_all.call_args.args[0]
        assert len(copies) == 1 and isinstance(copies[0], ArchivedItem)
        assert copies[0].original_staging_id == "old"
        assert copies[0].archived_at == NOW
        assert db_session.execute.await_count == 3
        db_session.commit.assert_awaited_once()

    async def test_empty_sweep_still_commits(self, db_session):
        candidates = MagicMock()
        candidates.scalars.return_value.all.return_value = []
        db_session.execute.return_value = candidates

        assert await LifecycleService(db_session).sweep(now=NOW) == {"archived": 0, "aged": 0}
        db_session.add_all.assert_not_called()
        db_session.commit.assert_awaited_once()

    def test_archived_copy_keeps_payload(self):
        item = _item(40)
        item.meta = {"source": "inbox"}

        copy = archived_copy(item, NOW)

        assert copy.content == "idea"
        assert copy.meta == {"source": "inbox"}
        assert copy.created_at == item.created_at


class TestLifecycleRoute:
    def test_route_reports_counts(self, client, db_session):
        candidates = MagicMock()
        candidates.scalars.return_value.all.return_value = []
        db_session.execute.return_value = candidates

        response = client.post("/lifecycle")

        assert response.json() == {"success": True, "archived": 0, "aged": 0, "message": "Lifecycle sync complete"}
