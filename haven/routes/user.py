"""User profile and Haven conversation memory."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from haven.db import get_db
from haven.models.schemas import MemoryRequest, ProfileRequest
from haven.routes.responses import guarded
from haven.services.profile_service import DEFAULT_MEMORY_LIMIT, ProfileService

router = APIRouter(tags=["user"])


@router.get("/user/profile")
async def get_profile(
    user_id: str | None = Query(default=None, alias="userId"),
    session: AsyncSession = Depends(get_db),
):
    async def _run():
        profile = await ProfileService(session).get_profile(user_id)
        return {"success": True, "profile": profile.model_dump(by_alias=True) if profile else None}

    return await guarded("profile_fetch_failed", _run(), envelope=True)


@router.post("/user/profile")
async def save_profile(body: ProfileRequest, session: AsyncSession = Depends(get_db)):
    async def _run():
        profile = await ProfileService(session).save_profile(body.user_id, body.profile)
        return {"success": True, "profile": profile.model_dump(by_alias=True)}

    return await guarded("profile_save_failed", _run(), envelope=True)


@router.get("/haven/memory")
async def get_memories(
    user_id: str | None = Query(default=None, alias="userId"),
    limit: int = Query(default=DEFAULT_MEMORY_LIMIT, ge=1, le=100),
    session: AsyncSession = Depends(get_db),
):
    """Most recent conversation summaries first."""
    async def _run():
        return {"success": True, "memories": await ProfileService(session).recent_memories(user_id, limit)}

    return await guarded("memory_fetch_failed", _run(), envelope=True)


@router.post("/haven/memory")
async def add_memory(body: MemoryRequest, session: AsyncSession = Depends(get_db)):
    async def _run():
        memory = await ProfileService(session).add_memory(body.user_id, body.session_summary, body.key_topics)
        return {"success": True, "memory": memory}

    return await guarded("memory_save_failed", _run(), envelope=True)
