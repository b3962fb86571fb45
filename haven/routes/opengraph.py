"""POST /opengraph: link preview metadata."""
from fastapi import APIRouter

from haven.models.schemas import OpenGraphRequest
from haven.routes.responses import guarded
from haven.services.opengraph_service import fetch_preview

router = APIRouter(prefix="/opengraph", tags=["opengraph"])


@router.post("")
async def opengraph(body: OpenGraphRequest):
    """Fetch failures still answer 200 with ``fallback: true``; bad input is a 400."""
    return await guarded("opengraph_failed", fetch_preview(body.url))
