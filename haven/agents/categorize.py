"""Staging item categorization: a category, title, summary and tags suggested by Gemini.

Images and PDFs go to the model as inline bytes. Markdown, text and Word files
are read into the prompt. Anything else is judged by its filename.
"""
import asyncio
from typing import Any

import httpx

import haven.services.gemini_service as gemini_svc
from haven.agents.capability import Capability, Fields, run_capability
from haven.errors import HavenError, ModelResponseError
from haven.services.document_service import (
    TEXT_EXTENSIONS,
    decode_text,
    docx_text,
    fetch_bytes,
    file_extension,
)
from haven.utils.helpers import extract_json_object
from haven.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = ("image", "video", "audio", "document", "link", "note")
IMAGE_MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}
ANALYZABLE_ASSET_TYPES = ("image", "document")
MAX_SOURCE_CHARS = 30000

SUGGESTION_FORMAT = """Categorize it into one of: image, video, audio, document, link, note.
Provide a short, descriptive title based on the actual content.
Provide a 1-sentence summary of what this document is about.
Suggest 2-3 relevant tags based on the content.
Return JSON format: { "category": "...", "title": "...", "summary": "...", "tags": ["...", "..."] }"""


def build_file_prompt(asset_type: str | None) -> str:
    return f"Analyze this {asset_type or 'document'} file.\nRead and understand the CONTENT of this document.\n{SUGGESTION_FORMAT}"


def build_categorize_prompt(fields: Fields) -> str:
    if fields.get("source_text") is not None:
        return f"Analyze this document content:\n---\n{fields['source_text']}\n---\n{SUGGESTION_FORMAT}"
    if fields.get("filename"):
        return f'Analyze this file: "{fields["filename"]}".\n{SUGGESTION_FORMAT}'
    return (
        f'Analyze this raw content: "{fields.get("content") or ""}".\n'
        "(Note: If it's a URL, it's likely a 'link'. If it's short text, it's a 'note').\n"
        f"{SUGGESTION_FORMAT}"
    )


def normalize_suggestion(data: Any, fields: Fields) -> dict[str, Any]:
    """Coerce the model's object to ``{category, title, summary, tags}``."""
    if not isinstance(data, dict):
        raise ModelResponseError("categorize: model returned invalid JSON (expected an object)")
    category = str(data.get("category") or "").strip().lower()
    if category not in CATEGORIES:
        category = fields.get("default_category") or "note"
    tags = data.get("tags")
    return {
        "category": category,
        "title": str(data.get("title") or fields.get("filename") or "Untitled"),
        "summary": str(data.get("summary") or ""),
        "tags": [str(t) for t in tags if t] if isinstance(tags, list) else [],
    }


CATEGORIZE = Capability(
    name="categorize",
    build_prompt=build_categorize_prompt,
    response="object",
    normalize=normalize_suggestion,
)


async def _categorize_media(data: bytes, mime_type: str, fields: Fields) -> dict[str, Any]:
    prompt = build_file_prompt(fields.get("asset_type"))
    text = await asyncio.to_thread(gemini_svc.generate_with_media, prompt, data, mime_type)
    try:
        parsed = extract_json_object(text)
    except ValueError as e:
        logger.warning("categorize_parse_failed", mime_type=mime_type, error=str(e))
        raise ModelResponseError(f"categorize: model returned invalid JSON ({e})") from e
    return normalize_suggestion(parsed, fields)


async def categorize_item(
    item_type: str | None,
    content: str | None,
    asset: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Suggest how to file one staging item. ``asset`` carries ``url``, ``type`` and ``filename``."""
    fields: Fields = {"type": item_type, "content": content}
    if item_type != "file" or not asset:
        return await run_capability(CATEGORIZE, fields)

    filename = asset.get("filename") or ""
    url = asset.get("url")
    ext = file_extension(filename)
    fields.update(filename=filename, asset_type=asset.get("type"), default_category=asset.get("type"))
    if asset.get("type") not in ANALYZABLE_ASSET_TYPES or not url:
        return await run_capability(CATEGORIZE, fields)

    try:
        data, content_type = await fetch_bytes(url)
    except httpx.HTTPError as e:
        logger.warning("categorize_fetch_failed", url=url, error=str(e))
        raise HavenError(f"Failed to fetch file: {e}") from e
    logger.info("categorize_file_fetched", ext=ext, size=len(data))

    if ext == "pdf":
        return await _categorize_media(data, "application/pdf", fields)
    if ext in IMAGE_MIME_TYPES:
        mime_type = (content_type or "").split(";")[0].strip() or IMAGE_MIME_TYPES[ext]
        return await _categorize_media(data, mime_type, fields)
    if ext in TEXT_EXTENSIONS:
        fields["source_text"] = decode_text(data)[:MAX_SOURCE_CHARS]
    elif ext == "docx":
        try:
            fields["source_text"] = docx_text(data)[:MAX_SOURCE_CHARS]
        except Exception as e:
            # Judged by filename instead
            logger.warning("categorize_docx_extract_failed", error=str(e))
    return await run_capability(CATEGORIZE, fields)
