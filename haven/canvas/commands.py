"""Typed commands that splice derived nodes into the canvas or patch one in place."""
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from haven.canvas.models import NodeType
from haven.models.schemas import CamelModel


class CreateNote(CamelModel):
    """Note from a chat reply, placed beside the source (or at a fixed spot without one)."""

    kind: Literal["create-note"] = "create-note"
    source_node_id: str | None = None
    content: str = ""
    label: str | None = None


class CreateRepurposedNode(CamelModel):
    kind: Literal["create-repurposed-node"] = "create-repurposed-node"
    source_node_id: str
    content: str = ""
    label: str | None = None
    node_type: NodeType = NodeType.NOTE
    transformation_type: str | None = None
    platform: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_chain_workflow: bool = False
    chain_index: int | None = None


class CreateNoteFromContent(CamelModel):
    kind: Literal["create-note-from-content"] = "create-note-from-content"
    source_node_id: str
    content: str = ""
    label: str | None = None


class CreateCourseFromContent(CamelModel):
    kind: Literal["create-course-from-content"] = "create-course-from-content"
    source_node_id: str
    content: str = ""
    label: str | None = None


class CreateQuizFromContent(CamelModel):
    kind: Literal["create-quiz-from-content"] = "create-quiz-from-content"
    source_node_id: str
    content: str = ""
    label: str | None = None


class UpdateQuizNode(CamelModel):
    """Merge quiz results into an existing node's metadata."""

    kind: Literal["update-quiz-node"] = "update-quiz-node"
    node_id: str
    performance: dict[str, Any] | None = None
    quiz_data: dict[str, Any] | None = None
    clear_source: bool = False


CanvasCommand = Annotated[
    Union[
        CreateNote,
        CreateRepurposedNode,
        CreateNoteFromContent,
        CreateCourseFromContent,
        CreateQuizFromContent,
        UpdateQuizNode,
    ],
    Field(discriminator="kind"),
]
