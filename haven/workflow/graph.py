"""Compiled LangGraph that chains envelope agents: course -> quiz -> END.

Each step sees the original selection plus a note node holding the previous
step's result. The first failing step ends the run.
"""
import time
from typing import Any

from langgraph.graph import END, START, StateGraph

from haven.agents.capability import failure
from haven.agents.learning import ENVELOPE_AGENTS
from haven.errors import HavenError, InvalidOptionError
from haven.utils.logging import get_logger
from haven.workflow.state import PipelineState

logger = get_logger(__name__)


def output_note(output: dict[str, Any]) -> dict[str, Any]:
    """A step's result as a note node the next step can read."""
    result = output.get("result") or {}
    return {
        "id": f"agent-output-{int(time.time() * 1000)}",
        "type": "note",
        "data": {"content": result.get("content"), "metadata": result.get("metadata")},
    }


def make_step(name: str):
    runner = ENVELOPE_AGENTS[name]

    async def step(state: PipelineState) -> dict:
        agent_input = state.get("agent_input") or {}
        try:
            output = await runner(agent_input)
        except HavenError as e:
            logger.warning("pipeline_step_failed", agent=name, error=e.message)
            return {"final": failure(e.message).to_wire(), "status_code": e.status_code}
        wire = output.to_wire()
        next_input = {**agent_input, "nodes": [*(agent_input.get("nodes") or []), output_note(wire)]}
        return {
            "agent_input": next_input,
            "outputs": [*(state.get("outputs") or []), wire],
            "final": wire,
        }

    return step


def _continue_or_end(next_node: str):
    def route(state: PipelineState) -> str:
        final = state.get("final") or {}
        return next_node if final.get("success") else END

    return route


def create_pipeline_graph(agents: list[str]):
    """Build and compile a linear graph over the named envelope agents."""
    unknown = [a for a in agents if a not in ENVELOPE_AGENTS]
    if unknown or not agents:
        raise InvalidOptionError(f"Unknown pipeline agents: {', '.join(unknown) or 'none given'}")

    builder = StateGraph(PipelineState)
    names = [f"{i}_{agent}" for i, agent in enumerate(agents)]
    for node_name, agent in zip(names, agents):
        builder.add_node(node_name, make_step(agent))

    builder.add_edge(START, names[0])
    for current, following in zip(names, names[1:]):
        builder.add_conditional_edges(current, _continue_or_end(following), [following, END])
    builder.add_edge(names[-1], END)

    return builder.compile()


async def run_pipeline(agent_input: dict[str, Any], agents: list[str]) -> tuple[dict[str, Any], int]:
    """Run the chain. Returns the last envelope (final success or first failure) and its HTTP status."""
    graph = create_pipeline_graph(agents)
    state = await graph.ainvoke({"agent_input": agent_input, "outputs": []})
    final = state.get("final") or failure("Pipeline produced no output").to_wire()
    return final, state.get("status_code") or (200 if final.get("success") else 500)
