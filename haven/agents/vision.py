"""Image analysis with Gemini vision."""
import asyncio

import haven.services.gemini_service as gemini_svc
from haven.errors import MissingFieldError
from haven.services.document_service import fetch_bytes
from haven.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PROMPT = "Analyze this image and describe what you see."
DEFAULT_MIME = "image/jpeg"


async def analyze_image_url(image_url: str | None, prompt: str | None = None) -> str:
    """Fetch an image and ask the model about it. Also the canvas image analyzer."""
    if not image_url:
        raise MissingFieldError("Image URL is required")
    data, content_type = await fetch_bytes(image_url)
    mime_type = (content_type or DEFAULT_MIME).split(";")[0].strip() or DEFAULT_MIME
    logger.info("image_analysis_started", mime_type=mime_type, size=len(data))
    return await asyncio.to_thread(
        gemini_svc.generate_with_media, prompt or DEFAULT_PROMPT, data, mime_type
    )
