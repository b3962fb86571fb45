"""Canvas graph state: typed nodes, display edges, commands and persistence."""
from haven.canvas.agent_io import nodes_to_agent_input
from haven.canvas.models import Edge, Node, NodeType, Position
from haven.canvas.persistence import InMemoryPersistence, JsonFilePersistence
from haven.canvas.store import CanvasStore

__all__ = [
    "CanvasStore",
    "Edge",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "Node",
    "NodeType",
    "Position",
    "nodes_to_agent_input",
]
