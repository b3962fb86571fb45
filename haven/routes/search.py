"""Search routes: semantic search, web research, vault lookup and raw embeddings."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from haven.db import get_db
from haven.errors import DatastoreError
from haven.models.schemas import EmbedRequest, SearchRequest, VaultSearchRequest, WebSearchRequest
from haven.routes.responses import error_response, guarded
from haven.services import search_service
from haven.services.search_service import SearchService

router = APIRouter(tags=["search"])


@router.post("/search")
async def semantic_search(body: SearchRequest, session: AsyncSession = Depends(get_db)):
    """Vector search over the user's assets. Unconfigured search answers with ``fallback: true``."""
    async def _run():
        try:
            return await SearchService(session).search(body.query, body.user_id, body.threshold, body.limit)
        except DatastoreError as e:
            return error_response(e, results=[], fallback=True)

    return await guarded("semantic_search_failed", _run())


@router.post("/search/web")
async def web_search(body: WebSearchRequest):
    async def _run():
        return {"sources": await search_service.web_search(body.query)}

    return await guarded("web_search_failed", _run())


@router.post("/vault/search")
async def vault_search(body: VaultSearchRequest, session: AsyncSession = Depends(get_db)):
    async def _run():
        return {"assets": await SearchService(session).vault_search(body.query, body.user_id)}

    return await guarded("vault_search_failed", _run())


@router.post("/embed")
async def embed(body: EmbedRequest):
    async def _run():
        vector = await search_service.embed(body.text)
        if body.return_embedding:
            return {"embedding": vector, "dimensions": len(vector)}
        return {"success": True, "dimensions": len(vector)}

    return await guarded("embed_failed", _run())
