"""Prompt fragments shared by the writing capabilities."""
from typing import Any

MALAY_INSTRUCTION = (
    "\n\nCRITICAL: Output MUST be in Bahasa Melayu (Malay) language, "
    "but you may use English terms for technical concepts if common."
)


def _get(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def build_voice_prompt(voice_profile: Any) -> str:
    """Writing samples and style rules the model must imitate. Empty when there are none."""
    samples = (_get(voice_profile, "samples") or "").strip()
    rules = (_get(voice_profile, "rules") or "").strip()
    parts: list[str] = []
    if samples:
        parts.append(
            "=== VOICE PROFILE ===\n"
            "Writing Samples (mimic this exact style, tone, and vocabulary):\n"
            f"{samples}\n"
        )
    if rules:
        parts.append(f"Style Rules (follow these strictly):\n{rules}")
    if parts:
        parts.append(
            "\nCRITICAL: Match the tone, vocabulary, cadence, and language mixing of the samples above. "
            "Follow the style rules strictly.\n=== END VOICE PROFILE ==="
        )
    return "\n".join(parts)


def language_instruction(language_mode: str | None) -> str:
    return MALAY_INSTRUCTION if (language_mode or "").upper() == "MS" else ""


def build_source_context(
    canvas_context: str | None = None,
    vault_assets: list[dict[str, Any]] | None = None,
    web_sources: list[dict[str, Any]] | None = None,
) -> str:
    """Reference material for article generation, with citation markers for web sources."""
    parts: list[str] = []
    if canvas_context:
        parts += ["=== SOURCE: CANVAS CONTEXT ===", canvas_context, "=== END CANVAS CONTEXT ==="]
    if vault_assets:
        parts.append("=== SOURCE: VAULT ASSETS ===")
        for i, asset in enumerate(vault_assets, start=1):
            body = asset.get("preview") or asset.get("summary") or ""
            parts.append(f"\n[Asset {i}] {asset.get('title', '')}\nCategory: {asset.get('category', '')}\n{body}")
        parts.append("\nUse the above vault assets as references for this article.\n=== END VAULT ASSETS ===")
    if web_sources:
        parts.append("=== SOURCE: WEB RESEARCH ===")
        for i, source in enumerate(web_sources, start=1):
            body = source.get("snippet") or source.get("content") or ""
            parts.append(f"\n[{i}] {source.get('title', '')}\nURL: {source.get('url', '')}\n{body}")
        parts.append(
            "\nUse the above web sources as references. IMPORTANT: Add citations [1], [2], etc. "
            "when referencing these sources.\n=== END WEB RESEARCH ==="
        )
    return "\n".join(parts)
