"""Canvas routes: the single-user node graph and its typed commands."""
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from pydantic import Field

from haven.agents.vision import analyze_image_url
from haven.canvas import CanvasStore, JsonFilePersistence, NodeType, Position, nodes_to_agent_input
from haven.canvas.commands import CanvasCommand
from haven.config import settings
from haven.errors import NotFoundError
from haven.models.schemas import CamelModel
from haven.services.document_service import extract_document_content
from haven.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/canvas", tags=["canvas"])

_store: CanvasStore | None = None


def get_store() -> CanvasStore:
    """Loaded once per process from the configured storage directory."""
    global _store
    if _store is None:
        _store = CanvasStore.load(JsonFilePersistence(settings.canvas_storage_dir), image_analyzer=analyze_image_url)
    return _store


class DropRequest(CamelModel):
    type: str
    position: Position = Field(default_factory=Position)
    payload: dict[str, Any] = Field(default_factory=dict)


class NodePatch(CamelModel):
    data: dict[str, Any] | None = None
    position: Position | None = None


class ConnectRequest(CamelModel):
    source: str
    target: str
    label: str | None = None


class DeleteEdgesRequest(CamelModel):
    ids: list[str] = Field(default_factory=list)


class AgentInputRequest(CamelModel):
    node_ids: list[str] = Field(default_factory=list)
    user_prompt: str | None = None


@router.get("")
async def get_canvas(store: CanvasStore = Depends(get_store)):
    return store.snapshot()


@router.post("/nodes")
async def drop_node(body: DropRequest, background_tasks: BackgroundTasks, store: CanvasStore = Depends(get_store)):
    """Drop an item onto the canvas. Document text is extracted after the response."""
    node = store.add_node_from_drop(body.type, body.position, body.payload)
    if node.type == NodeType.DOCUMENT and node.data.get("url"):
        background_tasks.add_task(store.extract_document, node.id, extract_document_content)
    return node.model_dump(mode="json")


@router.patch("/nodes/{node_id}")
async def update_node(node_id: str, body: NodePatch, store: CanvasStore = Depends(get_store)):
    node = store.get_node(node_id)
    if node is None:
        raise NotFoundError(f"Node {node_id} not found")
    if body.data:
        node = store.update_node_data(node_id, body.data)
    if body.position is not None:
        node = store.move_node(node_id, body.position)
    return node.model_dump(mode="json")


@router.delete("/nodes/{node_id}")
async def delete_node(node_id: str, store: CanvasStore = Depends(get_store)):
    if not store.delete_node(node_id):
        raise NotFoundError(f"Node {node_id} not found")
    return {"success": True}


@router.post("/edges")
async def connect(body: ConnectRequest, store: CanvasStore = Depends(get_store)):
    """Connecting an image to an AI-analysis node runs the analysis before answering."""
    edge = await store.connect(body.source, body.target, body.label)
    # The target may have been deleted while the analysis was running
    target = store.get_node(body.target)
    return {"edge": edge.model_dump(mode="json"), "target": target.model_dump(mode="json") if target else None}


@router.delete("/edges")
async def delete_edges(body: DeleteEdgesRequest, store: CanvasStore = Depends(get_store)):
    return {"removed": store.delete_edges(body.ids)}


@router.delete("/assets/{asset_id}")
async def delete_asset_nodes(asset_id: str, store: CanvasStore = Depends(get_store)):
    """Called when an asset is deleted elsewhere, so the canvas drops its nodes."""
    return {"removed": store.delete_by_asset_id(asset_id)}


@router.post("/commands")
async def dispatch_command(command: CanvasCommand = Body(...), store: CanvasStore = Depends(get_store)):
    node_id = store.dispatch(command)
    logger.info("canvas_command", kind=command.kind, node_id=node_id)
    return {"nodeId": node_id}


@router.post("/agent-input")
async def agent_input(body: AgentInputRequest, store: CanvasStore = Depends(get_store)):
    """Selected nodes (unknown ids skipped) as the agent input envelope."""
    wanted = set(body.node_ids)
    selected = [n for n in store.nodes if n.id in wanted]
    return nodes_to_agent_input(selected, store.edges, body.user_prompt).model_dump(by_alias=True, exclude_none=True)
