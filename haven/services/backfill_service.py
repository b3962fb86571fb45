"""Embedding backfill for assets stored before semantic search existed."""
import asyncio
from typing import Any

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

import haven.services.gemini_service as gemini_svc
from haven.errors import MissingFieldError
from haven.models.db_models import Asset
from haven.utils.helpers import vector_literal
from haven.utils.logging import get_logger

logger = get_logger(__name__)

MAX_SEARCHABLE_CHARS = 2000
MIN_SEARCHABLE_CHARS = 3

UPDATE_EMBEDDING_SQL = text("UPDATE assets SET embedding = CAST(:embedding AS vector) WHERE id = :id")


def searchable_text(filename: str | None, meta: dict[str, Any] | None) -> str:
    """Filename, title, summary, tags and raw content joined, cut to 2000 chars."""
    meta = meta or {}
    tags = meta.get("tags") or []
    parts = [
        filename or "",
        meta.get("title") or "",
        meta.get("summary") or "",
        " ".join(str(t) for t in tags) if isinstance(tags, list) else "",
        meta.get("raw_content") or "",
    ]
    return " ".join(p for p in parts if p)[:MAX_SEARCHABLE_CHARS]


class BackfillService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def backfill(self, user_id: str | None) -> dict[str, Any]:
        """Embed every asset of the user that has no embedding yet, one at a time."""
        if not user_id:
            raise MissingFieldError("User ID is required")
        result = await self.session.execute(
            select(Asset.id, Asset.filename, Asset.meta).where(Asset.user_id == user_id, Asset.embedding.is_(None))
        )
        assets = result.all()
        logger.info("backfill_started", user_id=user_id, assets=len(assets))
        if not assets:
            return {"message": "No assets need backfilling", "processed": 0}

        processed = failed = 0
        for asset in assets:
            content = searchable_text(asset.filename, asset.meta)
            if len(content.strip()) < MIN_SEARCHABLE_CHARS:
                logger.debug("backfill_skipped", asset_id=asset.id)
                continue
            try:
                vector = await asyncio.to_thread(gemini_svc.embed_text, content)
                await self.session.execute(UPDATE_EMBEDDING_SQL, {"embedding": vector_literal(vector), "id": asset.id})
                await self.session.commit()
                processed += 1
            except Exception as e:
                await self.session.rollback()
                logger.warning("backfill_asset_failed", asset_id=asset.id, error=str(e))
                failed += 1
        logger.info("backfill_complete", processed=processed, failed=failed, total=len(assets))
        return {"message": "Backfill complete", "processed": processed, "failed": failed, "total": len(assets)}
