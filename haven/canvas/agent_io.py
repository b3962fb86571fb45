"""Convert canvas nodes into the agent input envelope."""
from typing import Iterable

from haven.canvas.models import Edge, Node
from haven.models.schemas import AgentInput, AgentNodeData, AgentNodeSummary


def node_to_summary(node: Node) -> AgentNodeSummary:
    data = node.data
    content = data.get("content")
    metadata = data.get("metadata")
    return AgentNodeSummary(
        id=node.id,
        type=node.type.value,
        data=AgentNodeData(
            asset_id=data.get("assetId"),
            label=data.get("label"),
            content=content if isinstance(content, str) else None,
            metadata=metadata if isinstance(metadata, dict) else None,
        ),
    )


def nodes_to_agent_input(
    nodes: Iterable[Node],
    edges: Iterable[Edge] | None = None,
    user_prompt: str | None = None,
) -> AgentInput:
    nodes = list(nodes)
    ids = {n.id for n in nodes}
    edge_list = None
    if edges is not None:
        # Only edges between the selected nodes
        edge_list = [
            {"id": e.id, "source": e.source, "target": e.target, "label": e.label}
            for e in edges
            if e.source in ids and e.target in ids
        ]
    return AgentInput(nodes=[node_to_summary(n) for n in nodes], edges=edge_list, user_prompt=user_prompt)
