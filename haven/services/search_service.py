"""Semantic search over embedded assets, keyword search over the vault, and Tavily web search."""
import asyncio
from typing import Any

import httpx
from sqlalchemy import func, or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import haven.services.gemini_service as gemini_svc
from haven.config import settings
from haven.errors import ConfigurationError, DatastoreError, HavenError, MissingFieldError
from haven.models.db_models import Asset, VaultItem
from haven.utils.helpers import vector_literal
from haven.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_MESSAGE = "Semantic search not yet configured. Using text fallback."
VAULT_LIMIT = 10
WEB_RESULTS = 5

MATCH_ASSETS_SQL = text(
    "SELECT * FROM match_assets("
    "CAST(:query_embedding AS vector), :match_threshold, :match_count, :user_id_filter)"
)


async def embed(text_value: str | None) -> list[float]:
    """Gemini embedding for one text."""
    if not text_value:
        raise MissingFieldError("Text is required")
    vector = await asyncio.to_thread(gemini_svc.embed_text, text_value)
    logger.info("embedding_generated", dimensions=len(vector))
    return vector


def is_missing_function_error(message: str) -> bool:
    """The match_assets function has not been installed in the database."""
    return "function" in message or "does not exist" in message


class SearchService:
    """Vector similarity and vault lookups for one request session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_embedded_assets(self, user_id: str) -> int:
        """Assets of the user that have an embedding. 0 when the count itself fails."""
        try:
            result = await self.session.execute(
                select(func.count(Asset.id)).where(Asset.user_id == user_id, Asset.embedding.is_not(None))
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning("embedding_count_failed", error=str(e)[:200])
            return 0
        return int(result.scalar() or 0)

    async def search(self, query: str | None, user_id: str | None, threshold: float = 0.1, limit: int = 20) -> dict[str, Any]:
        """Rank the user's assets by cosine similarity to the query.

        When ``match_assets`` is not installed, returns an empty result flagged as fallback.
        """
        if not query:
            raise MissingFieldError("Query is required")
        if not user_id:
            raise MissingFieldError("User ID is required")

        query_embedding = await embed(query)
        embedded = await self.count_embedded_assets(user_id)
        try:
            result = await self.session.execute(
                MATCH_ASSETS_SQL,
                {
                    "query_embedding": vector_literal(query_embedding),
                    "match_threshold": threshold,
                    "match_count": limit,
                    "user_id_filter": user_id,
                },
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            message = str(e)
            if is_missing_function_error(message):
                logger.warning("semantic_search_unconfigured", error=message[:200])
                return {"results": [], "fallback": True, "message": FALLBACK_MESSAGE}
            logger.exception("semantic_search_failed", error=message[:200])
            raise DatastoreError(message) from e

        rows = [dict(row._mapping) for row in result]
        if not rows and embedded:
            logger.info("semantic_search_empty", user_id=user_id, assets_with_embeddings=embedded, threshold=threshold)
        return {"results": rows, "query": query, "fallback": False, "assetsWithEmbeddings": embedded}

    async def vault_search(self, query: str | None, user_id: str | None) -> list[dict[str, Any]]:
        """Ten newest vault items whose title, summary or tags match the query."""
        if not query or not query.strip():
            raise MissingFieldError("Query is required")
        if not user_id:
            raise MissingFieldError("User ID is required")
        pattern = f"%{query}%"
        try:
            result = await self.session.execute(
                select(VaultItem)
                .where(
                    VaultItem.user_id == user_id,
                    or_(
                        VaultItem.title.ilike(pattern),
                        VaultItem.summary.ilike(pattern),
                        VaultItem.tags.contains([query]),
                    ),
                )
                .order_by(VaultItem.created_at.desc())
                .limit(VAULT_LIMIT)
            )
        except SQLAlchemyError as e:
            logger.exception("vault_search_failed", error=str(e))
            raise DatastoreError("Vault search failed") from e
        return [vault_item_to_dict(item) for item in result.scalars().all()]


def vault_item_to_dict(item: VaultItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "summary": item.summary,
        "category": item.category,
        "asset_type": item.asset_type,
        "created_at": item.created_at.isoformat() if item.created_at else None,
        "preview": item.summary or "No summary available",
        "url": item.url or item.file_url or None,
    }


async def web_search(query: str | None) -> list[dict[str, Any]]:
    """Tavily search mapped to ``{title, url, snippet, score}`` sources."""
    if not query or not query.strip():
        raise MissingFieldError("Query is required")
    if not settings.tavily_api_key:
        raise ConfigurationError("Tavily API key not configured")
    body = {
        "api_key": settings.tavily_api_key,
        "query": query,
        "search_depth": "basic",
        "include_answer": False,
        "include_raw_content": False,
        "max_results": WEB_RESULTS,
        "include_domains": [],
        "exclude_domains": [],
    }
    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            resp = await client.post(settings.tavily_search_url, json=body)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning("web_search_failed", status=e.response.status_code, body=e.response.text[:500])
        error = HavenError("Web search failed")
        error.status_code = e.response.status_code
        raise error from e
    except httpx.HTTPError as e:
        logger.warning("web_search_failed", error=str(e))
        raise HavenError("Web search failed") from e
    return [
        {
            "title": r.get("title"),
            "url": r.get("url"),
            "snippet": r.get("content") or r.get("snippet") or "",
            "score": r.get("score") or 0,
        }
        for r in resp.json().get("results") or []
    ]
