"""Canvas graph types: typed nodes with free-form payloads, and display-only edges."""
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    IMAGE = "image"
    NOTE = "note"
    LINK = "link"
    DOCUMENT = "document"
    AUDIO = "audio"
    VIDEO = "video"
    AI_ANALYSIS = "ai-analysis"
    COURSE = "course"
    QUIZ = "quiz"
    WORKFLOW = "workflow"
    SCRIPT = "script"
    STORYBOARD = "storyboard"
    MARKETING_ANGLE = "marketing-angle"
    CAMPAIGN = "campaign"
    PRODUCTION_PLAN = "production-plan"

    @classmethod
    def parse(cls, tag: str) -> "NodeType | None":
        try:
            return cls(tag)
        except ValueError:
            return None


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> "Position":
        return Position(x=self.x + dx, y=self.y + dy)


class Node(BaseModel):
    """Canvas vertex. Readers treat absent payload fields as not yet generated."""

    id: str
    type: NodeType
    position: Position = Field(default_factory=Position)
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def asset_id(self) -> str | None:
        return self.data.get("assetId")


class Edge(BaseModel):
    """Directed link between two node ids; label and color are display hints."""

    id: str
    source: str
    target: str
    label: str | None = None
    color: str | None = None
    animated: bool = False

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


def new_node_id(node_type: NodeType) -> str:
    return f"{node_type.value}-{uuid4().hex[:12]}"


def new_edge_id(source: str, target: str) -> str:
    return f"e-{source}-{target}-{uuid4().hex[:6]}"
