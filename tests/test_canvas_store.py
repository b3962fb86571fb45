"""Tests for the canvas store: drops, deletes, commands and the image analysis hook."""

from unittest.mock import AsyncMock

import pytest

from haven.canvas import CanvasStore, NodeType, Position
from haven.canvas.commands import (
    CreateCourseFromContent,
    CreateNote,
    CreateNoteFromContent,
    CreateQuizFromContent,
    CreateRepurposedNode,
    UpdateQuizNode,
)
from haven.canvas.store import quiz_score
from haven.errors import NotFoundError


def _note(store, x=0, y=0, **payload):
    return store.add_node_from_drop("note", Position(x=x, y=y), payload)


DROP_PAYLOAD = {"label": "L", "url": "https://x/f", "assetId": "a1", "content": "c", "metadata": {"duration": 3}}

ASSET = {"label": "L", "url": "https://x/f", "assetId": "a1"}

DROP_SHAPES = {
    NodeType.IMAGE: {"url": "https://x/f", "label": "L", "assetId": "a1"},
    NodeType.AI_ANALYSIS: {"status": "idle", "result": ""},
    NodeType.NOTE: {"label": "L", "content": "c", "assetId": "a1"},
    NodeType.LINK: ASSET,
    NodeType.DOCUMENT: {**ASSET, "content": "", "charCount": 0, "isExtracting": True},
    NodeType.AUDIO: {**ASSET, "metadata": {"duration": 3}},
    NodeType.VIDEO: {**ASSET, "metadata": {"duration": 3}},
    NodeType.COURSE: {"label": "L", "metadata": {"masteryLevel": 0, "courseData": {}, "studySessions": []}},
    NodeType.QUIZ: {
        "label": "L",
        "metadata": {
            "quizData": {"questions": []},
            "performance": {"attempts": 0, "correct": 0, "incorrect": 0},
        },
    },
    NodeType.WORKFLOW: {
        "label": "L", "stages": [], "currentStage": None, "completedStages": [], "assignedNodes": {},
    },
    NodeType.SCRIPT: {
        "label": "L", "format": "tiktok", "hookType": "question", "voiceStyle": "casual",
        "hook": "", "contentBlocks": [], "cta": "", "scenes": [], "estimatedDuration": 0,
    },
    NodeType.STORYBOARD: {"label": "L", "visualStyle": "cinematic", "scenes": [], "totalDuration": 0},
    NodeType.MARKETING_ANGLE: {"label": "L", "product": "", "targetAudience": "", "angles": []},
    NodeType.CAMPAIGN: {"label": "L", "campaignName": "", "posts": [], "template": ""},
    NodeType.PRODUCTION_PLAN: {"label": "L", "metadata": {"productionData": {}}},
}

DEFAULT_LABELS = {
    NodeType.COURSE: "New Course",
    NodeType.QUIZ: "New Quiz",
    NodeType.WORKFLOW: "New Workflow",
    NodeType.SCRIPT: "New Script",
    NodeType.STORYBOARD: "New Storyboard",
    NodeType.MARKETING_ANGLE: "Marketing Angles",
    NodeType.CAMPAIGN: "New Campaign",
    NodeType.PRODUCTION_PLAN: "New Project",
}


class TestDrops:
    def test_every_type_has_a_shape(self):
        assert set(DROP_SHAPES) == set(NodeType)

    @pytest.mark.parametrize("node_type", list(NodeType), ids=lambda t: t.value)
    def test_drop_builds_default_shape(self, store, node_type):
        node = store.add_node_from_drop(node_type.value, Position(x=1, y=2), DROP_PAYLOAD)

        assert node.type == node_type
        assert node.data == DROP_SHAPES[node_type]
        assert node.position == Position(x=1, y=2)

    @pytest.mark.parametrize("node_type,label", list(DEFAULT_LABELS.items()), ids=lambda v: str(v))
    def test_generated_types_get_default_label(self, store, node_type, label):
        node = store.add_node_from_drop(node_type.value, Position(), {})

        assert node.data["label"] == label

    def test_document_drop_starts_extracting(self, store):
        node = store.add_node_from_drop("document", Position(x=10, y=20), {"url": "https://x/a.docx", "label": "A"})

        assert node.type == NodeType.DOCUMENT
        assert node.data["isExtracting"] is True
        assert node.data["content"] == ""
        assert node.data["charCount"] == 0
        assert node.position == Position(x=10, y=20)

    def test_quiz_drop_has_empty_performance(self, store):
        node = store.add_node_from_drop("quiz", Position(), {})

        assert node.data["label"] == "New Quiz"
        assert node.data["metadata"]["performance"] == {"attempts": 0, "correct": 0, "incorrect": 0}

    def test_unknown_tag_falls_back_to_image_shape(self, store):
        node = store.add_node_from_drop("hologram", Position(), {"url": "https://x/p.png"})

        assert node.type == NodeType.IMAGE
        assert node.data["url"] == "https://x/p.png"

    def test_drop_does_not_alias_payload(self, store):
        payload = {"label": "L", "content": "c"}
        node = store.add_node_from_drop("note", Position(), payload)
        payload["content"] = "changed"

        assert node.data["content"] == "c"

    def test_every_drop_saves(self, store, persistence):
        _note(store)
        _note(store)

        assert persistence.saves == 2


class TestDocumentExtraction:
    async def test_extracted_text_fills_node(self, store):
        node = store.add_node_from_drop("document", Position(), {"url": "https://x/a.md"})
        extractor = AsyncMock(return_value=("# Title", 7))

        await store.extract_document(node.id, extractor)

        assert node.data["content"] == "# Title"
        assert node.data["charCount"] == 7
        assert node.data["isExtracting"] is False
        extractor.assert_awaited_once_with("https://x/a.md")

    async def test_failed_extraction_only_clears_flag(self, store):
        node = store.add_node_from_drop("document", Position(), {"url": "https://x/a.docx"})
        extractor = AsyncMock(side_effect=RuntimeError("boom"))

        await store.extract_document(node.id, extractor)

        assert node.data["isExtracting"] is False
        assert node.data["content"] == ""


class TestDeletes:
    async def test_delete_node_cascades_edges(self, store):
        a, b, c = _note(store), _note(store), _note(store)
        await store.connect(a.id, b.id)
        await store.connect(b.id, c.id)

        assert store.delete_node(b.id) is True
        assert [n.id for n in store.nodes] == [a.id, c.id]
        assert store.edges == []

    def test_delete_missing_node(self, store):
        assert store.delete_node("nope") is False

    async def test_delete_by_asset_id(self, store):
        kept = _note(store, assetId="other")
        first = _note(store, assetId="asset-1")
        second = store.add_node_from_drop("image", Position(), {"assetId": "asset-1", "url": "u"})
        await store.connect(kept.id, first.id)

        removed = store.delete_by_asset_id("asset-1")

        assert sorted(removed) == sorted([first.id, second.id])
        assert [n.id for n in store.nodes] == [kept.id]
        assert store.edges == []

    async def test_delete_edges_counts_removed(self, store):
        a, b = _note(store), _note(store)
        await store.connect(a.id, b.id)
        edge_id = store.edges[0].id

        assert store.delete_edges([edge_id, "missing"]) == 1
        assert store.edges == []


class TestConnect:
    async def test_connect_requires_both_nodes(self, store):
        a = _note(store)

        with pytest.raises(NotFoundError):
            await store.connect(a.id, "missing")

    async def test_image_into_analysis_runs_analyzer(self, persistence):
        analyzer = AsyncMock(return_value="A red bicycle")
        store = CanvasStore(persistence, image_analyzer=analyzer)
        image = store.add_node_from_drop("image", Position(), {"url": "https://x/bike.jpg"})
        analysis = store.add_node_from_drop("ai-analysis", Position(x=300), {})

        edge = await store.connect(image.id, analysis.id)

        assert edge.source == image.id and edge.target == analysis.id
        assert analysis.data == {"status": "done", "result": "A red bicycle"}
        analyzer.assert_awaited_once_with("https://x/bike.jpg")

    async def test_analyzer_failure_marks_error(self, persistence):
        store = CanvasStore(persistence, image_analyzer=AsyncMock(side_effect=RuntimeError("quota")))
        image = store.add_node_from_drop("image", Position(), {"url": "u"})
        analysis = store.add_node_from_drop("ai-analysis", Position(), {})

        await store.connect(image.id, analysis.id)

        assert analysis.data["status"] == "error"
        assert analysis.data["result"] == "quota"

    async def test_other_connections_do_not_analyze(self, persistence):
        analyzer = AsyncMock()
        store = CanvasStore(persistence, image_analyzer=analyzer)
        a, b = _note(store), store.add_node_from_drop("ai-analysis", Position(), {})

        await store.connect(a.id, b.id, label="ref")

        analyzer.assert_not_awaited()
        assert b.data["status"] == "idle"


class TestCommands:
    def test_create_note_beside_source(self, store):
        source = _note(store, x=100, y=50)

        node_id = store.dispatch(CreateNote(source_node_id=source.id, content="reply"))

        node = store.get_node(node_id)
        assert node.position == Position(x=350, y=50)
        assert node.data["content"] == "reply"
        assert store.edges[0].source == source.id

    def test_create_note_without_source_has_no_edge(self, store):
        node_id = store.dispatch(CreateNote(source_node_id="gone", content="orphan"))

        assert store.get_node(node_id).position == Position(x=650, y=400)
        assert store.edges == []

    def test_repurposed_node_edge_style(self, store):
        source = _note(store)

        node_id = store.dispatch(
            CreateRepurposedNode(
                source_node_id=source.id,
                content="post",
                label="Linkedin Post",
                transformation_type="FORMAT_PLATFORM",
                platform="linkedin",
            )
        )

        edge = store.edges[0]
        assert edge.target == node_id
        assert edge.label == "💼 LinkedIn"
        assert edge.color == "#0077b5"
        assert edge.animated is True
        assert store.get_node(node_id).data["metadata"]["sourceNodeId"] == source.id

    def test_chained_repurpose_fans_out_vertically(self, store):
        source = _note(store, x=0, y=0)

        node_id = store.dispatch(
            CreateRepurposedNode(source_node_id=source.id, is_chain_workflow=True, chain_index=2)
        )

        assert store.get_node(node_id).position == Position(x=350, y=200)

    def test_content_commands_place_nodes(self, store):
        source = _note(store)

        note_id = store.dispatch(CreateNoteFromContent(source_node_id=source.id, content="c", label="L"))
        course_id = store.dispatch(CreateCourseFromContent(source_node_id=source.id, content="c"))
        quiz_id = store.dispatch(CreateQuizFromContent(source_node_id=source.id, content="c"))

        assert store.get_node(note_id).position == Position(x=350, y=0)
        course = store.get_node(course_id)
        assert course.position == Position(x=350, y=100)
        assert course.data["metadata"]["courseData"]["sourceContent"] == "c"
        quiz = store.get_node(quiz_id)
        assert quiz.position == Position(x=350, y=200)
        assert quiz.data["label"] == "New Quiz"
        assert [e.label for e in store.edges] == ["📝 Note", "📚 Course", "❓ Quiz"]

    def test_command_with_missing_source_is_ignored(self, store):
        assert store.dispatch(CreateNoteFromContent(source_node_id="gone", content="c")) is None
        assert store.nodes == []

    def test_update_quiz_merges_performance(self, store):
        quiz = store.add_node_from_drop("quiz", Position(), {})
        quiz.data["metadata"]["sourceContent"] = "raw"

        store.dispatch(
            UpdateQuizNode(
                node_id=quiz.id,
                performance={"attempts": 1, "correct": 3, "incorrect": 1},
                clear_source=True,
            )
        )

        metadata = store.get_node(quiz.id).data["metadata"]
        assert metadata["performance"]["scorePercentage"] == 75
        assert "sourceContent" not in metadata
        assert metadata["quizData"] == {"questions": []}


class TestQuizScore:
    def test_no_attempts(self):
        assert quiz_score({"attempts": 0, "correct": 0, "incorrect": 0}) is None

    def test_rounded_percentage(self):
        assert quiz_score({"attempts": 1, "correct": 2, "incorrect": 1}) == 67

    def test_clamped(self):
        assert quiz_score({"attempts": 1, "correct": 5, "incorrect": -3}) == 100


class TestReload:
    async def test_snapshot_survives_reload(self, store, persistence):
        a = _note(store, content="one")
        b = _note(store, content="two")
        await store.connect(a.id, b.id, label="link")

        reloaded = CanvasStore.load(persistence)

        assert reloaded.snapshot() == store.snapshot()
