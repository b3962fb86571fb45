"""Gemini API: text generation, multimodal prompts and text embeddings."""
from typing import Any

from haven.config import settings
from haven.errors import ConfigurationError
from haven.utils.logging import get_logger

logger = get_logger(__name__)

# Lazy client to avoid import errors when API key is missing
_gemini_client: Any = None


def _get_client():
    """Return Google GenAI client. Uses google-genai SDK."""
    global _gemini_client
    if _gemini_client is None:
        if not (settings.gemini_api_key or "").strip():
            raise ConfigurationError("Gemini API key missing. Set GEMINI_API_KEY or GOOGLE_AI_API_KEY.")
        try:
            from google import genai

            _gemini_client = genai.Client(api_key=settings.gemini_api_key)
        except Exception as e:
            logger.warning("gemini_client_init_failed", error=str(e))
            raise ConfigurationError("Gemini API key not configured or invalid") from e
    return _gemini_client


def _build_config(
    system_instruction: str | None,
    temperature: float | None,
    max_output_tokens: int | None,
    google_search: bool,
):
    if system_instruction is None and temperature is None and max_output_tokens is None and not google_search:
        return None
    from google.genai import types

    kwargs: dict[str, Any] = {}
    if system_instruction:
        kwargs["system_instruction"] = system_instruction
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_output_tokens is not None:
        kwargs["max_output_tokens"] = max_output_tokens
    if google_search:
        kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    return types.GenerateContentConfig(**kwargs)


def generate_text(
    prompt: str,
    *,
    model: str | None = None,
    system_instruction: str | None = None,
    temperature: float | None = None,
    max_output_tokens: int | None = None,
    google_search: bool = False,
) -> str:
    """One generate_content call; returns the response text ("" when the model sent none)."""
    client = _get_client()
    kwargs: dict[str, Any] = {"model": model or settings.gemini_text_model, "contents": [prompt]}
    config = _build_config(system_instruction, temperature, max_output_tokens, google_search)
    if config is not None:
        kwargs["config"] = config
    try:
        response = client.models.generate_content(**kwargs)
    except Exception as e:
        logger.exception("gemini_generate_failed", model=kwargs["model"], error=str(e))
        raise
    return response.text or ""


def generate_with_media(
    prompt: str,
    data: bytes,
    mime_type: str,
    *,
    model: str | None = None,
    prompt_first: bool = True,
) -> str:
    """Send inline bytes (image, audio, PDF) together with a text prompt."""
    from google.genai import types

    client = _get_client()
    part = types.Part.from_bytes(data=data, mime_type=mime_type)
    contents = [prompt, part] if prompt_first else [part, prompt]
    try:
        response = client.models.generate_content(
            model=model or settings.gemini_text_model,
            contents=contents,
        )
    except Exception as e:
        logger.exception("gemini_media_generate_failed", mime_type=mime_type, error=str(e))
        raise
    return response.text or ""


def embed_text(text: str) -> list[float]:
    """Embed one text. Length of the vector is whatever the embedding model produces."""
    client = _get_client()
    try:
        response = client.models.embed_content(
            model=settings.gemini_embedding_model,
            contents=text,
        )
    except Exception as e:
        logger.exception("gemini_embed_failed", error=str(e))
        raise
    embeddings = getattr(response, "embeddings", None) or []
    if not embeddings or not embeddings[0].values:
        raise ValueError("Embedding response was empty")
    return list(embeddings[0].values)
