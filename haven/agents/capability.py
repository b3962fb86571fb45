"""Capability descriptor and the single runner every agent route goes through.

A capability is data: which request fields it needs, how to phrase the prompt,
how to read the model's answer, and what to do when that answer does not parse.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Literal

import haven.services.gemini_service as gemini_svc
from haven.errors import (
    InvalidOptionError,
    MissingFieldError,
    ModelResponseError,
    ModelTimeoutError,
    require,
)
from haven.models.schemas import AgentOutput, AgentResult
from haven.utils.helpers import extract_json_object, parse_json_response
from haven.utils.logging import get_logger

logger = get_logger(__name__)

Fields = dict[str, Any]


@dataclass(frozen=True)
class Capability:
    name: str
    build_prompt: Callable[[Fields], str]
    required: tuple[str, ...] = ()
    missing_message: str | None = None
    # json: strip fences then parse; object: parse the first {...} span; text: raw text
    response: Literal["json", "object", "text"] = "json"
    fallback: Callable[[Fields], Any] | None = None
    normalize: Callable[[Any, Fields], Any] | None = None
    system_instruction: Callable[[Fields], str] | None = None
    next_agent: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    timeout: float | None = None
    model: str | None = None
    google_search: bool = False


def _parse(capability: Capability, text: str) -> Any:
    if capability.response == "object":
        return extract_json_object(text)
    return parse_json_response(text)


async def call_model(capability: Capability, prompt: str, fields: Fields) -> str:
    """One model call, bounded by the capability's timeout when it has one.

    On timeout the worker thread is abandoned, not cancelled.
    """
    system = capability.system_instruction(fields) if capability.system_instruction else None
    call = asyncio.to_thread(
        gemini_svc.generate_text,
        prompt,
        model=capability.model,
        system_instruction=system,
        temperature=capability.temperature,
        max_output_tokens=capability.max_output_tokens,
        google_search=capability.google_search,
    )
    if capability.timeout is None:
        return await call
    try:
        return await asyncio.wait_for(call, timeout=capability.timeout)
    except asyncio.TimeoutError as e:
        logger.warning("capability_timeout", capability=capability.name, timeout=capability.timeout)
        raise ModelTimeoutError(f"Gemini API timeout after {int(capability.timeout)} seconds") from e


async def run_capability(capability: Capability, fields: Fields) -> Any:
    """Validate, prompt, call once, parse. Returns the parsed (or fallback) result."""
    require(fields, *capability.required, message=capability.missing_message)
    prompt = capability.build_prompt(fields)
    text = await call_model(capability, prompt, fields)

    if capability.response == "text":
        data: Any = text.strip()
    else:
        try:
            data = _parse(capability, text)
        except (ValueError, TypeError) as e:
            if capability.fallback is None:
                logger.warning("capability_parse_failed", capability=capability.name, error=str(e))
                raise ModelResponseError(f"{capability.name}: model returned invalid JSON ({e})") from e
            logger.warning("capability_fallback_used", capability=capability.name, error=str(e))
            data = capability.fallback(fields)
    if capability.normalize is not None:
        data = capability.normalize(data, fields)
    return data


def envelope(content: str, metadata: dict[str, Any] | None = None, next_agent: str | None = None) -> AgentOutput:
    return AgentOutput(success=True, result=AgentResult(content=content, metadata=metadata, next_agent=next_agent))


def failure(error: str) -> AgentOutput:
    return AgentOutput(success=False, error=error)


def select_action(table: dict[str, Capability], action: str | None) -> Capability:
    """Capability for an action-dispatched route."""
    if not action:
        raise MissingFieldError("Action is required")
    try:
        return table[action]
    except KeyError:
        raise InvalidOptionError("Invalid action") from None
