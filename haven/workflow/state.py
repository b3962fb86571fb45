"""LangGraph state schema for the agent pipeline."""
from typing import Any, TypedDict


class PipelineState(TypedDict, total=False):
    """State passed between pipeline steps. All keys optional for partial updates."""

    # Canvas selection as the first agent sees it (AgentInput dump, snake_case keys)
    agent_input: dict[str, Any]

    # Wire-format AgentOutput of each completed step
    outputs: list[dict[str, Any]]

    # Last step's envelope (success or the failure that stopped the chain)
    final: dict[str, Any]

    # HTTP status of the failure that stopped the chain
    status_code: int
