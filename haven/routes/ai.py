"""Writing routes: article builder, ghostwriter, repurposing and translation."""
from fastapi import APIRouter

from haven.agents.capability import run_capability, select_action
from haven.agents.writing import (
    ARTICLE_ACTIONS,
    GHOSTWRITER_ACTIONS,
    REPURPOSE_ACTIONS,
    TRANSLATE,
    repurpose_result,
)
from haven.models.schemas import ArticleRequest, GhostwriterRequest, RepurposeRequest, TranslateRequest
from haven.routes.responses import guarded

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/article")
async def article(body: ArticleRequest):
    """GENERATE_OUTLINE -> {outline}; EXPAND_SECTION and POLISH_ARTICLE -> {content}."""
    async def _run():
        fields = body.model_dump()
        capability = select_action(ARTICLE_ACTIONS, body.action)
        result = await run_capability(capability, fields)
        if body.action == "GENERATE_OUTLINE":
            return {"outline": result}
        return {"content": result}

    return await guarded("article_failed", _run())


@router.post("/ghostwriter")
async def ghostwriter(body: GhostwriterRequest):
    """DECONSTRUCT -> {patterns}; the generators -> {content}."""
    async def _run():
        capability = select_action(GHOSTWRITER_ACTIONS, body.action)
        result = await run_capability(capability, body.model_dump())
        if body.action == "DECONSTRUCT":
            return {"patterns": result}
        return {"content": result}

    return await guarded("ghostwriter_failed", _run())


@router.post("/repurpose")
async def repurpose(body: RepurposeRequest):
    async def _run():
        fields = body.model_dump()
        capability = select_action(REPURPOSE_ACTIONS, body.action)
        text = await run_capability(capability, fields)
        return repurpose_result(body.action, text, fields)

    return await guarded("repurpose_failed", _run())


@router.post("/translate")
async def translate(body: TranslateRequest):
    async def _run():
        return {"translatedText": await run_capability(TRANSLATE, body.model_dump())}

    return await guarded("translate_failed", _run())
