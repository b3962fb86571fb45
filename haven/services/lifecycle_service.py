"""Staging lifecycle: uncategorized items age after a week and are archived after a month."""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Literal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from haven.config import settings
from haven.models.db_models import ArchivedItem, StagingItem
from haven.utils.logging import get_logger

logger = get_logger(__name__)

AGING_AFTER = timedelta(days=7)
ARCHIVE_AFTER = timedelta(days=30)

Transition = Literal["archive", "age"]


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def classify_staging_item(item: StagingItem, now: datetime) -> Transition | None:
    """Which transition, if any, the item is due for at ``now``."""
    if item.is_categorized or item.lifecycle_state == "archived" or item.created_at is None:
        return None
    age = _aware(now) - _aware(item.created_at)
    if age > ARCHIVE_AFTER:
        return "archive"
    if age > AGING_AFTER and item.lifecycle_state == "fresh":
        return "age"
    return None


def archived_copy(item: StagingItem, now: datetime) -> ArchivedItem:
    return ArchivedItem(
        user_id=item.user_id,
        original_staging_id=item.id,
        type=item.type,
        content=item.content,
        asset_id=item.asset_id,
        meta=item.meta,
        created_at=item.created_at,
        archived_at=now,
    )


class LifecycleService:
    """One sweep over staging_items. Safe to run repeatedly."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def sweep(self, now: datetime | None = None) -> dict[str, int]:
        """Archive stale items, then age the week-old ones. Returns ``{archived, aged}``."""
        now = now or datetime.now(timezone.utc)
        result = await self.session.execute(
            select(StagingItem).where(
                StagingItem.is_categorized.is_(False),
                StagingItem.lifecycle_state != "archived",
                StagingItem.created_at < now - AGING_AFTER,
            )
        )
        to_archive: list[StagingItem] = []
        to_age: list[str] = []
        for item in result.scalars().all():
            transition = classify_staging_item(item, now)
            if transition == "archive":
                to_archive.append(item)
            elif transition == "age":
                to_age.append(item.id)

        if to_archive:
            self.session.add_all([archived_copy(item, now) for item in to_archive])
            await self.session.execute(
                update(StagingItem)
                .where(StagingItem.id.in_([item.id for item in to_archive]))
                .values(lifecycle_state="archived", archived_at=now)
            )
        if to_age:
            await self.session.execute(
                update(StagingItem)
                .where(StagingItem.id.in_(to_age), StagingItem.lifecycle_state == "fresh")
                .values(lifecycle_state="aging")
            )
        await self.session.commit()
        logger.info("lifecycle_sweep_complete", archived=len(to_archive), aged=len(to_age))
        return {"archived": len(to_archive), "aged": len(to_age)}


async def _sweep_once() -> dict[str, int]:
    # Own engine: the scheduler thread runs its own event loop
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            return await LifecycleService(session).sweep()
    finally:
        await engine.dispose()


def run_scheduled_sweep() -> None:
    """APScheduler job entry point."""
    try:
        asyncio.run(_sweep_once())
    except Exception as e:
        logger.exception("lifecycle_job_failed", error=str(e))
