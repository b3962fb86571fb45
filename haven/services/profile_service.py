"""User profiles, Haven conversation memory and the publishing calendar."""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from haven.errors import MissingFieldError, NotFoundError
from haven.models.db_models import Asset, HavenConversation, UserProfile
from haven.models.schemas import ProfileIn, ProfileOut
from haven.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MEMORY_LIMIT = 5


def memory_to_dict(memory: HavenConversation) -> dict[str, Any]:
    return {
        "id": memory.id,
        "sessionSummary": memory.session_summary,
        "keyTopics": memory.key_topics or [],
        "createdAt": memory.created_at.isoformat() if memory.created_at else None,
    }


def asset_to_dict(asset: Asset) -> dict[str, Any]:
    return {
        "id": asset.id,
        "user_id": asset.user_id,
        "filename": asset.filename,
        "type": asset.type,
        "url": asset.url,
        "metadata": asset.meta,
        "publication_status": asset.publication_status,
        "scheduled_at": asset.scheduled_at.isoformat() if asset.scheduled_at else None,
        "created_at": asset.created_at.isoformat() if asset.created_at else None,
    }


def resolve_publication_status(status: str | None, scheduled_at: datetime | None) -> str:
    """Explicit status wins; a timestamp alone means scheduled; otherwise draft."""
    if status:
        return status
    return "scheduled" if scheduled_at else "draft"


class ProfileService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_profile(self, user_id: str | None) -> ProfileOut | None:
        if not user_id:
            raise MissingFieldError("User ID required")
        profile = await self.session.get(UserProfile, user_id)
        return ProfileOut.model_validate(profile) if profile else None

    async def save_profile(self, user_id: str | None, data: ProfileIn | None) -> ProfileOut:
        """Create or replace the user's profile."""
        if not user_id or data is None:
            raise MissingFieldError("User ID and profile data required")
        profile = await self.session.get(UserProfile, user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id)
            self.session.add(profile)
        profile.name = data.name
        profile.role = data.role
        profile.industry = data.industry
        profile.goals = data.goals
        profile.writing_style = data.writing_style
        profile.languages = data.languages
        profile.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(profile)
        logger.info("profile_saved", user_id=user_id)
        return ProfileOut.model_validate(profile)

    async def recent_memories(self, user_id: str | None, limit: int = DEFAULT_MEMORY_LIMIT) -> list[dict[str, Any]]:
        if not user_id:
            raise MissingFieldError("User ID required")
        result = await self.session.execute(
            select(HavenConversation)
            .where(HavenConversation.user_id == user_id)
            .order_by(HavenConversation.created_at.desc())
            .limit(limit)
        )
        return [memory_to_dict(m) for m in result.scalars().all()]

    async def add_memory(self, user_id: str | None, session_summary: str | None, key_topics: list[str] | None) -> dict[str, Any]:
        if not user_id or not session_summary:
            raise MissingFieldError("User ID and session summary required")
        memory = HavenConversation(
            user_id=user_id,
            session_summary=session_summary,
            key_topics=key_topics or [],
            created_at=datetime.now(timezone.utc),
        )
        self.session.add(memory)
        await self.session.commit()
        await self.session.refresh(memory)
        return memory_to_dict(memory)


class ScheduleService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def schedule(self, asset_id: str | None, scheduled_at: datetime | None, status: str | None) -> dict[str, Any]:
        """Set an asset's publication status and slot. A missing timestamp clears the slot."""
        if not asset_id:
            raise MissingFieldError("Missing assetId")
        asset = await self.session.get(Asset, asset_id)
        if asset is None:
            raise NotFoundError(f"Asset {asset_id} not found")
        asset.publication_status = resolve_publication_status(status, scheduled_at)
        asset.scheduled_at = scheduled_at
        await self.session.commit()
        await self.session.refresh(asset)
        logger.info("asset_scheduled", asset_id=asset_id, status=asset.publication_status)
        return asset_to_dict(asset)

    async def scheduled(
        self,
        user_id: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[dict[str, Any]]:
        """Scheduled assets in ascending slot order, optionally per user and window."""
        stmt = select(Asset).where(Asset.scheduled_at.is_not(None))
        if user_id:
            stmt = stmt.where(Asset.user_id == user_id)
        if start:
            stmt = stmt.where(Asset.scheduled_at >= start)
        if end:
            stmt = stmt.where(Asset.scheduled_at <= end)
        result = await self.session.execute(stmt.order_by(Asset.scheduled_at.asc()))
        return [asset_to_dict(a) for a in result.scalars().all()]
