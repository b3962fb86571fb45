"""Asset routes: publishing calendar, embedding backfill, staging categorization and the lifecycle sweep."""
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from haven.db import get_db
from haven.models.schemas import BackfillRequest, ScheduleRequest
from haven.routes.responses import guarded
from haven.services.backfill_service import BackfillService
from haven.services.lifecycle_service import LifecycleService
from haven.services.profile_service import ScheduleService
from haven.services.staging_service import StagingService

router = APIRouter(tags=["assets"])


@router.post("/assets/schedule")
async def schedule_asset(body: ScheduleRequest, session: AsyncSession = Depends(get_db)):
    async def _run():
        asset = await ScheduleService(session).schedule(body.asset_id, body.scheduled_at, body.publication_status)
        return {"success": True, "asset": asset}

    return await guarded("schedule_update_failed", _run())


@router.get("/assets/schedule")
async def scheduled_assets(
    user_id: str | None = Query(default=None, alias="userId"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    session: AsyncSession = Depends(get_db),
):
    """Calendar view: scheduled assets in ascending order."""
    async def _run():
        return {"scheduledAssets": await ScheduleService(session).scheduled(user_id, start_date, end_date)}

    return await guarded("schedule_fetch_failed", _run())


@router.post("/backfill")
async def backfill(body: BackfillRequest, session: AsyncSession = Depends(get_db)):
    return await guarded("backfill_failed", BackfillService(session).backfill(body.user_id))


@router.post("/lifecycle")
async def lifecycle(session: AsyncSession = Depends(get_db)):
    """Run one staging sweep now (the scheduler also runs it periodically)."""
    async def _run():
        counts = await LifecycleService(session).sweep()
        return {"success": True, **counts, "message": "Lifecycle sync complete"}

    return await guarded("lifecycle_failed", _run(), envelope=True)


@router.post("/staging/{item_id}/categorize")
async def categorize_staging_item(item_id: str, session: AsyncSession = Depends(get_db)):
    """Suggest a category, title, summary and tags; marks the item categorized."""
    async def _run():
        return {"success": True, "suggestion": await StagingService(session).categorize(item_id)}

    return await guarded("categorize_failed", _run(), envelope=True)
