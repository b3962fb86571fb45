"""Staging inbox: AI categorization of uploaded or pasted items."""
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from haven.agents.categorize import categorize_item
from haven.errors import NotFoundError
from haven.models.db_models import Asset, StagingItem
from haven.utils.logging import get_logger

logger = get_logger(__name__)


class StagingService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def categorize(self, item_id: str) -> dict[str, Any]:
        """Ask the model how to file the item and store the answer as ``metadata.ai_suggestion``.

        A categorized item is out of the lifecycle sweep: it no longer ages or gets archived.
        """
        item = await self.session.get(StagingItem, item_id)
        if item is None:
            raise NotFoundError(f"Staging item {item_id} not found")
        asset = await self.session.get(Asset, item.asset_id) if item.asset_id else None
        asset_info = {"url": asset.url, "type": asset.type, "filename": asset.filename} if asset else None

        suggestion = await categorize_item(item.type, item.content, asset_info)

        item.meta = {**(item.meta or {}), "ai_suggestion": suggestion, "is_categorizing": False}
        item.is_categorized = True
        await self.session.commit()
        logger.info("staging_item_categorized", item_id=item_id, category=suggestion["category"])
        return suggestion
