"""General assistant: summarize, write, orchestrate, brainstorm and transcribe.

One route serves every inspector panel. Text actions go through the capability
runner; document summaries and transcription send inline bytes to the model.
"""
import asyncio
from dataclasses import replace
from typing import Any

import haven.services.gemini_service as gemini_svc
from haven.agents.capability import Capability, Fields, run_capability, select_action
from haven.agents.voice import build_voice_prompt, language_instruction
from haven.config import settings
from haven.errors import HavenError, MissingFieldError
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

MAX_DOCUMENT_CHARS = 30000

SUMMARIZE_SYSTEM = """You are a precision summarizer.
Your goal is to crystallize the input into a concise, high-density summary.
- Focus on key insights and actionable points.
- Use bullet points for readability.
- Ignore fluff.
- If analyzing a document, focus on its main topics and purpose."""

WRITE_SYSTEM = """You are an expert writing assistant.
You help users refine their thoughts.
- Maintain the user's original voice but improve clarity and flow.
- Verify facts where possible (or flag uncertainties).
- Output ONLY the rewritten text, no preamble."""

CONNECTION_SYSTEM = """You are a connection engine.
Analyze the provided nodes and identify logical connections between them.
- "source" and "target" must be the exact Node IDs provided in the content.
- "label" should be a 1-3 word description of the relationship.
- Return ONLY valid JSON.
- Schema: { "edges": [{ "source": "id1", "target": "id2", "label": "claims" }] }"""

SYNTHESIS_SYSTEM = """You are a synthesis engine.
You are given multiple data points (notes, images, docs).
Your job is to find connections, synthesize information, and answer the specific user request based on the COMBINED context.
- If asked to summarize, merge insights from all sources.
- If asked to find patterns, look for common themes.
- If asked a specific question, use all nodes as context."""

BRAINSTORM_SYSTEM = """You are a deep research partner and ideation assistant.
Your role is to help the user explore ideas, answer complex questions, and provide well-researched insights.
- Think deeply and critically about the topic.
- If context is provided, use it to ground your responses.
- If Deep Research is enabled, cite sources from your search results.
- Ask clarifying questions when needed.
- Be conversational but intellectually rigorous."""

TRANSCRIBE_PROMPT = """Transcribe this audio file. Identify and label distinct speakers (Speaker 1, Speaker 2, etc.),
give timestamps in MM:SS format and detect the primary emotion of each segment. Provide:
1. A brief summary (2-3 sentences)
2. Full transcript with speaker labels and timestamps
3. Segment the transcript by speaker changes or every 30 seconds

Format your response as JSON:
{
  "summary": "Brief summary here",
  "transcript": "Full text transcript",
  "segments": [
    { "speaker": "Speaker 1", "timestamp": "00:15", "text": "Segment content", "emotion": "Neutral" }
  ]
}"""

DOCUMENT_SUMMARY_BRIEF = """Provide a concise, high-density summary:
- Focus on key insights and main topics
- Use bullet points for readability
- Identify the purpose and content type"""

WRITE_MODES = {
    "expand": "Expand on this, adding more detail and depth",
    "simplify": "Simplify this, making it clearer and more concise",
    "fix_grammar": "Fix grammar and polish this text",
}

AUDIO_MIME_TYPES = (
    (".m4a", "audio/mp4"),
    (".wav", "audio/wav"),
    (".ogg", "audio/ogg"),
    (".flac", "audio/flac"),
)


def _with_language(system: str, fields: Fields) -> str:
    return system + language_instruction(fields.get("language_mode"))


def _write_system(fields: Fields) -> str:
    voice = build_voice_prompt(fields.get("voice_profile"))
    return _with_language(f"{WRITE_SYSTEM}\n{voice}" if voice else WRITE_SYSTEM, fields)


def _is_auto_link(fields: Fields) -> bool:
    return "JSON Edges" in (fields.get("prompt") or "")


def _orchestrate_system(fields: Fields) -> str:
    return _with_language(CONNECTION_SYSTEM if _is_auto_link(fields) else SYNTHESIS_SYSTEM, fields)


def build_write_prompt(fields: Fields) -> str:
    prompt = fields.get("prompt")
    instruction = WRITE_MODES.get(prompt) or prompt or "Improve this text"
    return f"{instruction}:\n\n{fields.get('content') or ''}"


def build_orchestrate_prompt(fields: Fields) -> str:
    default = "Find connections" if _is_auto_link(fields) else "Synthesize these items"
    return f"{fields.get('prompt') or default}:\n\n{fields.get('content') or ''}"


def build_brainstorm_prompt(fields: Fields) -> str:
    question = fields.get("prompt") or fields.get("content") or ""
    if fields.get("context"):
        return f"Context:\n{fields['context']}\n\nUser Question: {question}"
    return question


ASSISTANT_ACTIONS = {
    "summarize": Capability(
        name="summarize",
        build_prompt=lambda fields: f"Summarize this content:\n\n{fields.get('content') or ''}",
        system_instruction=lambda fields: _with_language(SUMMARIZE_SYSTEM, fields),
        response="text",
    ),
    "write": Capability(
        name="write",
        build_prompt=build_write_prompt,
        system_instruction=_write_system,
        response="text",
    ),
    "orchestrate": Capability(
        name="orchestrate",
        build_prompt=build_orchestrate_prompt,
        system_instruction=_orchestrate_system,
        response="text",
    ),
    "brainstorm": Capability(
        name="brainstorm",
        build_prompt=build_brainstorm_prompt,
        system_instruction=lambda fields: _with_language(BRAINSTORM_SYSTEM, fields),
        response="text",
    ),
}

# Sends the audio bytes to the model instead of going through run_capability
TRANSCRIBE_ACTION = "transcribe"


def audio_mime_type(url: str) -> str:
    for marker, mime in AUDIO_MIME_TYPES:
        if marker in url:
            return mime
    return "audio/mpeg"


async def summarize_document(document_url: str, label: str | None = None) -> str:
    """Summary of a stored document: PDFs go inline, text formats as text, DOCX via python-docx."""
    ext = file_extension(document_url)
    if ext != "pdf" and ext != "docx" and ext not in TEXT_EXTENSIONS:
        return f"Unable to summarize this document type ({ext}). Please convert to PDF, MD, or TXT."

    data, _ = await fetch_bytes(document_url)
    logger.info("document_summary_started", ext=ext, size=len(data))
    if ext == "pdf":
        prompt = (
            "Read and understand this document. Then provide a concise, high-density summary:\n"
            "- Focus on key insights and main topics\n- Use bullet points for readability\n"
            "- Identify the purpose and content type\n- Ignore formatting and focus on substance"
        )
        return await asyncio.to_thread(
            gemini_svc.generate_with_media, prompt, data, "application/pdf", prompt_first=False
        )

    if ext == "docx":
        try:
            text = docx_text(data)
        except Exception as e:
            logger.warning("docx_extract_failed", error=str(e))
            prompt = (
                f'Create a summary for a document file named: "{label or document_url}".\n'
                "This is a Microsoft Word document.\n"
                "Based on the document title, infer what it contains."
            )
            return await asyncio.to_thread(gemini_svc.generate_text, prompt)
    else:
        text = decode_text(data)
    prompt = f"Summarize this document content:\n---\n{text[:MAX_DOCUMENT_CHARS]}\n---\n{DOCUMENT_SUMMARY_BRIEF}"
    return await asyncio.to_thread(gemini_svc.generate_text, prompt)


async def transcribe_media(media_url: str | None) -> dict[str, Any]:
    """Transcript with speaker segments. A non-JSON answer becomes a plain transcript."""
    if not media_url:
        raise MissingFieldError("Media URL is required")
    try:
        data, _ = await fetch_bytes(media_url)
        mime_type = audio_mime_type(media_url)
        logger.info("transcription_started", mime_type=mime_type, size=len(data))
        text = await asyncio.to_thread(
            gemini_svc.generate_with_media, TRANSCRIBE_PROMPT, data, mime_type, prompt_first=False
        )
    except HavenError:
        raise
    except Exception as e:
        logger.exception("transcription_failed", error=str(e))
        raise HavenError(f"Transcription failed: {e}") from e
    try:
        return extract_json_object(text)
    except ValueError:
        logger.warning("transcription_not_json")
        return {"summary": "Transcription completed", "transcript": text, "segments": []}


async def run_assistant(fields: Fields) -> dict[str, Any]:
    """Dispatch one assistant action. Returns ``{text}`` or, for transcribe, the transcript object."""
    if fields.get("action") == TRANSCRIBE_ACTION:
        return await transcribe_media(fields.get("content"))
    capability = select_action(ASSISTANT_ACTIONS, fields.get("action"))
    if capability.name == "summarize" and fields.get("document_url"):
        return {"text": await summarize_document(fields["document_url"], fields.get("content"))}

    capability = replace(
        capability,
        model=settings.gemini_reasoning_model if fields.get("use_reasoning_model") else None,
        google_search=bool(fields.get("deep_research")),
    )
    return {"text": await run_capability(capability, fields)}
