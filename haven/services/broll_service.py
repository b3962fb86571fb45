"""B-roll suggestions: rank the user's image and video uploads against script keywords."""
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from haven.models.db_models import UserAsset

CANDIDATE_LIMIT = 50
SUGGESTION_LIMIT = 12
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def matched_keywords(filename: str | None, keywords: list[str]) -> list[str]:
    name = (filename or "").lower()
    return [kw for kw in keywords if kw.lower() in name]


def _created(asset: Any) -> datetime:
    created = getattr(asset, "created_at", None)
    if created is None:
        return _EPOCH
    return created if created.tzinfo else created.replace(tzinfo=timezone.utc)


def rank_assets(assets: Iterable[Any], keywords: list[str], limit: int = SUGGESTION_LIMIT) -> list[dict[str, Any]]:
    """Score = number of keywords found in the filename. Ties go to the newest upload."""
    scored = []
    for asset in assets:
        matched = matched_keywords(asset.filename, keywords)
        scored.append((len(matched), _created(asset), asset, matched))
    scored.sort(key=lambda row: (row[0], row[1]), reverse=True)
    return [
        {
            "id": asset.id,
            "filename": asset.filename,
            "type": asset.type,
            "url": asset.url,
            "relevanceScore": score,
            "matchedKeywords": matched,
        }
        for score, _, asset, matched in scored[:limit]
    ]


class BrollService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def candidates(self, user_id: str) -> list[UserAsset]:
        """The user's 50 most recent image and video uploads."""
        result = await self.session.execute(
            select(UserAsset)
            .where(UserAsset.user_id == user_id, UserAsset.type.in_(["image", "video"]))
            .order_by(UserAsset.created_at.desc())
            .limit(CANDIDATE_LIMIT)
        )
        return list(result.scalars().all())

    async def suggest(self, user_id: str, keywords: list[str]) -> list[dict[str, Any]]:
        return rank_assets(await self.candidates(user_id), keywords)
