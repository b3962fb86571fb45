"""Fetch documents, audio and images by URL and turn documents into plain text."""
from io import BytesIO
from urllib.parse import urlparse

import httpx

from haven.utils.logging import get_logger

logger = get_logger(__name__)

FETCH_TIMEOUT = 30.0
TEXT_EXTENSIONS = ("md", "txt", "markdown")
PDF_PLACEHOLDER = "[PDF Document - content available via summarization]"


def file_extension(url: str | None) -> str:
    """Lower-cased extension of the URL path, without query string. "" when there is none."""
    path = urlparse(url or "").path
    name = path.rsplit("/", 1)[-1]
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


async def fetch_bytes(url: str, timeout: float = FETCH_TIMEOUT) -> tuple[bytes, str | None]:
    """GET the URL. Returns the body and its content type; raises httpx errors on failure."""
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        resp = await client.get(url)
    resp.raise_for_status()
    return resp.content, resp.headers.get("content-type")


def docx_text(data: bytes) -> str:
    """Paragraph text of a Word document, one paragraph per line."""
    from docx import Document

    doc = Document(BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


async def extract_document_content(url: str) -> tuple[str, int]:
    """Text of a canvas document and its character count.

    PDFs get a placeholder (their text is read by the model at summarize time).
    Unknown formats get a ``[EXT Document]`` marker. Fetch and parse errors propagate.
    """
    ext = file_extension(url)
    data, _ = await fetch_bytes(url)
    if ext == "pdf":
        content = PDF_PLACEHOLDER
    elif ext == "docx":
        content = docx_text(data)
    elif ext in TEXT_EXTENSIONS:
        content = decode_text(data)
    else:
        content = f"[{ext.upper()} Document]"
    logger.info("document_extracted", ext=ext, chars=len(content))
    return content, len(content)
