"""POST /analyze: describe an image with Gemini vision."""
from fastapi import APIRouter

from haven.agents.vision import analyze_image_url
from haven.models.schemas import AnalyzeRequest
from haven.routes.responses import guarded

router = APIRouter(prefix="/analyze", tags=["analyze"])


@router.post("")
async def analyze(body: AnalyzeRequest):
    async def _run():
        return {"text": await analyze_image_url(body.image_url, body.user_prompt)}

    return await guarded("analyze_failed", _run())
