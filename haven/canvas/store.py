"""Canvas state store: authoritative node and edge lists for one session."""
import copy
from typing import Any, Awaitable, Callable

from haven.canvas import edges as edge_styles
from haven.canvas.commands import (
    CreateCourseFromContent,
    CreateNote,
    CreateNoteFromContent,
    CreateQuizFromContent,
    CreateRepurposedNode,
    UpdateQuizNode,
)
from haven.canvas.defaults import default_payload
from haven.canvas.models import Edge, Node, NodeType, Position, new_edge_id, new_node_id
from haven.canvas.persistence import CanvasPersistence
from haven.errors import NotFoundError
from haven.utils.helpers import clamp_percent
from haven.utils.logging import get_logger

logger = get_logger(__name__)

ImageAnalyzer = Callable[[str], Awaitable[str]]
DocumentExtractor = Callable[[str], Awaitable[tuple[str, int]]]

# Where a chat note lands when its source node is gone
_DEFAULT_NOTE_BASE = Position(x=400, y=400)


def quiz_score(performance: dict[str, Any]) -> int | None:
    """Percent of answered questions that were correct; None before the first attempt."""
    correct = int(performance.get("correct") or 0)
    answered = correct + int(performance.get("incorrect") or 0)
    if not performance.get("attempts") or answered == 0:
        return None
    return clamp_percent(100 * correct / answered)


class CanvasStore:
    """Nodes and edges plus the operations that mutate them.

    Every mutation saves through the persistence port. ``image_analyzer`` is
    called when an image node is connected to an AI-analysis node.
    """

    def __init__(
        self,
        persistence: CanvasPersistence,
        image_analyzer: ImageAnalyzer | None = None,
        nodes: list[Node] | None = None,
        edges: list[Edge] | None = None,
    ):
        self.persistence = persistence
        self.image_analyzer = image_analyzer
        self._nodes: list[Node] = list(nodes or [])
        self._edges: list[Edge] = list(edges or [])

    @classmethod
    def load(cls, persistence: CanvasPersistence, image_analyzer: ImageAnalyzer | None = None) -> "CanvasStore":
        nodes, edges = persistence.load()
        logger.info("canvas_loaded", nodes=len(nodes), edges=len(edges))
        return cls(persistence, image_analyzer=image_analyzer, nodes=nodes, edges=edges)

    # ----- reads -----
    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self._nodes if n.id == node_id), None)

    def _require_node(self, node_id: str) -> Node:
        node = self.get_node(node_id)
        if node is None:
            raise NotFoundError(f"Node {node_id} not found")
        return node

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "nodes": [n.model_dump(mode="json") for n in self._nodes],
            "edges": [e.model_dump(mode="json") for e in self._edges],
        }

    def save(self) -> None:
        self.persistence.save(self._nodes, self._edges)

    # ----- direct edits -----
    def add_node_from_drop(self, type_tag: str, position: Position, payload: dict[str, Any] | None = None) -> Node:
        node_type, data = default_payload(type_tag, payload)
        node = Node(id=new_node_id(node_type), type=node_type, position=position, data=data)
        self._nodes.append(node)
        self.save()
        logger.info("canvas_node_dropped", node_id=node.id, type=node_type.value)
        return node

    async def extract_document(self, node_id: str, extractor: DocumentExtractor) -> Node:
        """Fill a document node's text. Extraction failures only clear the busy flag."""
        node = self._require_node(node_id)
        url = node.data.get("url")
        try:
            content, char_count = await extractor(url) if url else ("", 0)
        except Exception as e:
            logger.warning("canvas_document_extract_failed", node_id=node_id, error=str(e))
            node.data["isExtracting"] = False
        else:
            node.data.update({"content": content, "charCount": char_count, "isExtracting": False})
        self.save()
        return node

    def update_node_data(self, node_id: str, patch: dict[str, Any]) -> Node:
        node = self._require_node(node_id)
        node.data.update(patch)
        self.save()
        return node

    def move_node(self, node_id: str, position: Position) -> Node:
        node = self._require_node(node_id)
        node.position = position
        self.save()
        return node

    async def connect(self, source_id: str, target_id: str, label: str | None = None) -> Edge:
        source = self._require_node(source_id)
        target = self._require_node(target_id)
        edge = Edge(id=new_edge_id(source_id, target_id), source=source_id, target=target_id, label=label)
        self._edges.append(edge)
        self.save()
        if source.type == NodeType.IMAGE and target.type == NodeType.AI_ANALYSIS:
            await self._analyze_into(source, target)
        return edge

    async def _analyze_into(self, image: Node, analysis: Node) -> None:
        if self.image_analyzer is None:
            return
        analysis.data["status"] = "processing"
        self.save()
        try:
            text = await self.image_analyzer(image.data.get("url") or "")
        except Exception as e:
            logger.warning("canvas_image_analysis_failed", node_id=analysis.id, error=str(e))
            analysis.data.update({"status": "error", "result": str(e)})
        else:
            analysis.data.update({"status": "done", "result": text})
        self.save()

    def delete_node(self, node_id: str) -> bool:
        """Remove a node and every edge that starts or ends at it."""
        before = len(self._nodes)
        self._nodes = [n for n in self._nodes if n.id != node_id]
        if len(self._nodes) == before:
            return False
        self._edges = [e for e in self._edges if not e.touches(node_id)]
        self.save()
        return True

    def delete_edges(self, edge_ids: list[str]) -> int:
        drop = set(edge_ids)
        before = len(self._edges)
        self._edges = [e for e in self._edges if e.id not in drop]
        removed = before - len(self._edges)
        if removed:
            self.save()
        return removed

    def delete_by_asset_id(self, asset_id: str) -> list[str]:
        """Remove nodes whose payload references the asset, with their edges."""
        removed = [n.id for n in self._nodes if n.asset_id is not None and n.asset_id == asset_id]
        if not removed:
            return []
        gone = set(removed)
        self._nodes = [n for n in self._nodes if n.id not in gone]
        self._edges = [e for e in self._edges if e.source not in gone and e.target not in gone]
        self.save()
        logger.info("canvas_asset_nodes_removed", asset_id=asset_id, count=len(removed))
        return removed

    # ----- commands -----
    def dispatch(self, command) -> str | None:
        """Apply a command. Returns the created or updated node id, or None when ignored."""
        if isinstance(command, UpdateQuizNode):
            return self._update_quiz(command)
        if isinstance(command, CreateNote):
            return self._create_note(command)

        source = self.get_node(command.source_node_id)
        if source is None:
            logger.debug("canvas_command_ignored", kind=command.kind, source_node_id=command.source_node_id)
            return None

        if isinstance(command, CreateRepurposedNode):
            node, label, color = self._repurposed_node(source, command)
        elif isinstance(command, CreateNoteFromContent):
            node = Node(
                id=new_node_id(NodeType.NOTE),
                type=NodeType.NOTE,
                position=source.position.offset(350, 0),
                data={"label": command.label, "content": command.content, "history": []},
            )
            label, color = edge_styles.NOTE
        elif isinstance(command, CreateCourseFromContent):
            node = Node(
                id=new_node_id(NodeType.COURSE),
                type=NodeType.COURSE,
                position=source.position.offset(350, 100),
                data={
                    "label": command.label or "New Course",
                    "metadata": {
                        "courseData": {
                            "description": "Course generated from content",
                            "modules": [],
                            "sourceContent": command.content,
                        },
                        "masteryLevel": 0,
                    },
                },
            )
            label, color = edge_styles.COURSE
        elif isinstance(command, CreateQuizFromContent):
            node = Node(
                id=new_node_id(NodeType.QUIZ),
                type=NodeType.QUIZ,
                position=source.position.offset(350, 200),
                data={
                    "label": command.label or "New Quiz",
                    "metadata": {
                        "quizData": {"questions": [], "sourceContent": command.content},
                        "performance": {"attempts": 0, "correct": 0, "incorrect": 0},
                    },
                },
            )
            label, color = edge_styles.QUIZ
        else:
            raise TypeError(f"Unsupported canvas command: {type(command).__name__}")

        self._splice(source.id, node, label=label, color=color, animated=True)
        return node.id

    def _repurposed_node(self, source: Node, command: CreateRepurposedNode) -> tuple[Node, str, str]:
        position = source.position.offset(350, 80)
        if command.is_chain_workflow and command.chain_index is not None:
            # Fan chained outputs out vertically around the source
            position = Position(x=source.position.x + 350, y=source.position.y + command.chain_index * 150 - 100)
        metadata = {
            **copy.deepcopy(command.metadata),
            "sourceNodeId": source.id,
            "transformationType": command.transformation_type,
        }
        node = Node(
            id=new_node_id(command.node_type),
            type=command.node_type,
            position=position,
            data={"label": command.label, "content": command.content, "history": [], "metadata": metadata},
        )
        label, color = edge_styles.repurpose_style(command.transformation_type, command.platform)
        return node, label, color

    def _create_note(self, command: CreateNote) -> str:
        source = self.get_node(command.source_node_id) if command.source_node_id else None
        base = source.position if source else _DEFAULT_NOTE_BASE
        node = Node(
            id=new_node_id(NodeType.NOTE),
            type=NodeType.NOTE,
            position=base.offset(250, 0),
            data={"content": command.content, "label": command.label},
        )
        if source is None:
            self._nodes.append(node)
            self.save()
        else:
            self._splice(source.id, node)
        return node.id

    def _update_quiz(self, command: UpdateQuizNode) -> str | None:
        node = self.get_node(command.node_id)
        if node is None:
            logger.debug("canvas_command_ignored", kind=command.kind, node_id=command.node_id)
            return None
        metadata = node.data.get("metadata")
        metadata = dict(metadata) if isinstance(metadata, dict) else {}
        if command.performance:
            performance = dict(command.performance)
            performance["scorePercentage"] = quiz_score(performance)
            metadata["performance"] = performance
        if command.quiz_data:
            metadata["quizData"] = command.quiz_data
        if command.clear_source:
            metadata.pop("sourceContent", None)
        node.data["metadata"] = metadata
        self.save()
        return node.id

    def _splice(
        self,
        source_id: str,
        node: Node,
        label: str | None = None,
        color: str | None = None,
        animated: bool = False,
    ) -> None:
        self._nodes.append(node)
        self._edges.append(
            Edge(
                id=new_edge_id(source_id, node.id),
                source=source_id,
                target=node.id,
                label=label,
                color=color,
                animated=animated,
            )
        )
        self.save()
        logger.info("canvas_node_spliced", source_id=source_id, node_id=node.id, type=node.type.value)
