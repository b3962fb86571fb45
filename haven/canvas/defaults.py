"""Default payload shape for each node type created by a drop."""
import copy
from typing import Any

from haven.canvas.models import NodeType
from haven.utils.logging import get_logger

logger = get_logger(__name__)


def _asset_fields(payload: dict[str, Any]) -> dict[str, Any]:
    return {"label": payload.get("label"), "assetId": payload.get("assetId")}


def _image(payload: dict[str, Any]) -> dict[str, Any]:
    return {"url": payload.get("url"), **_asset_fields(payload)}


def _ai_analysis(payload: dict[str, Any]) -> dict[str, Any]:
    return {"status": "idle", "result": ""}


def _note(payload: dict[str, Any]) -> dict[str, Any]:
    return {"label": payload.get("label"), "content": payload.get("content"), "assetId": payload.get("assetId")}


def _link(payload: dict[str, Any]) -> dict[str, Any]:
    return {"label": payload.get("label"), "url": payload.get("url"), "assetId": payload.get("assetId")}


def _document(payload: dict[str, Any]) -> dict[str, Any]:
    # Text extraction runs after the node exists and fills content/charCount
    return {
        "label": payload.get("label"),
        "url": payload.get("url"),
        "assetId": payload.get("assetId"),
        "content": "",
        "charCount": 0,
        "isExtracting": True,
    }


def _media(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label"),
        "url": payload.get("url"),
        "assetId": payload.get("assetId"),
        "metadata": payload.get("metadata"),
    }


def _course(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Course",
        "metadata": {"masteryLevel": 0, "courseData": {}, "studySessions": []},
    }


def _quiz(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Quiz",
        "metadata": {
            "quizData": {"questions": []},
            "performance": {"attempts": 0, "correct": 0, "incorrect": 0},
        },
    }


def _workflow(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Workflow",
        "stages": [],
        "currentStage": None,
        "completedStages": [],
        "assignedNodes": {},
    }


def _script(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Script",
        "format": "tiktok",
        "hookType": "question",
        "voiceStyle": "casual",
        "hook": "",
        "contentBlocks": [],
        "cta": "",
        "scenes": [],
        "estimatedDuration": 0,
    }


def _storyboard(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Storyboard",
        "visualStyle": "cinematic",
        "scenes": [],
        "totalDuration": 0,
    }


def _marketing_angle(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "Marketing Angles",
        "product": "",
        "targetAudience": "",
        "angles": [],
    }


def _campaign(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "label": payload.get("label") or "New Campaign",
        "campaignName": "",
        "posts": [],
        "template": "",
    }


def _production_plan(payload: dict[str, Any]) -> dict[str, Any]:
    return {"label": payload.get("label") or "New Project", "metadata": {"productionData": {}}}


_BUILDERS = {
    NodeType.IMAGE: _image,
    NodeType.AI_ANALYSIS: _ai_analysis,
    NodeType.NOTE: _note,
    NodeType.LINK: _link,
    NodeType.DOCUMENT: _document,
    NodeType.AUDIO: _media,
    NodeType.VIDEO: _media,
    NodeType.COURSE: _course,
    NodeType.QUIZ: _quiz,
    NodeType.WORKFLOW: _workflow,
    NodeType.SCRIPT: _script,
    NodeType.STORYBOARD: _storyboard,
    NodeType.MARKETING_ANGLE: _marketing_angle,
    NodeType.CAMPAIGN: _campaign,
    NodeType.PRODUCTION_PLAN: _production_plan,
}


def default_payload(type_tag: str, payload: dict[str, Any] | None = None) -> tuple[NodeType, dict[str, Any]]:
    """Resolve a drop's type tag and build its payload.

    Unknown tags keep the image shape, with a warning so the fallthrough is visible.
    """
    payload = copy.deepcopy(payload or {})
    node_type = NodeType.parse(type_tag)
    if node_type is None:
        logger.warning("canvas_unknown_node_type", type_tag=type_tag, fallback=NodeType.IMAGE.value)
        node_type = NodeType.IMAGE
    return node_type, _BUILDERS[node_type](payload)
