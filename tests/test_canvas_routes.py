"""Tests for the /canvas endpoints backed by an in-memory store."""

from unittest.mock import AsyncMock, patch


def _drop(client, type_tag="note", **payload):
    response = client.post("/canvas/nodes", json={"type": type_tag, "position": {"x": 0, "y": 0}, "payload": payload})
    assert response.status_code == 200
    return response.json()


class TestCanvasRoutes:
    def test_empty_canvas(self, client):
        assert client.get("/canvas").json() == {"nodes": [], "edges": []}

    def test_document_drop_extracts_in_background(self, client, store):
        with patch("haven.routes.canvas.extract_document_content", AsyncMock(return_value=("Body text", 9))) as extract:
            node = _drop(client, "document", url="https://files.example/notes.md", label="Notes")

        assert node["data"]["isExtracting"] is True
        extract.assert_awaited_once_with("https://files.example/notes.md")
        stored = store.get_node(node["id"])
        assert stored.data["content"] == "Body text"
        assert stored.data["isExtracting"] is False

    def test_patch_node_data_and_position(self, client):
        node = _drop(client, content="draft")

        response = client.patch(
            f"/canvas/nodes/{node['id']}", json={"data": {"content": "final"}, "position": {"x": 40, "y": 60}}
        )

        body = response.json()
        assert body["data"]["content"] == "final"
        assert body["position"] == {"x": 40.0, "y": 60.0}

    def test_patch_unknown_node(self, client):
        response = client.patch("/canvas/nodes/missing", json={"data": {"content": "x"}})

        assert response.status_code == 404
        assert response.json() == {"error": "Node missing not found"}

    def test_connect_and_delete_edges(self, client):
        a, b = _drop(client), _drop(client)

        edge = client.post("/canvas/edges", json={"source": a["id"], "target": b["id"], "label": "ref"}).json()["edge"]
        assert edge["label"] == "ref"

        removed = client.request("DELETE", "/canvas/edges", json={"ids": [edge["id"]]}).json()
        assert removed == {"removed": 1}
        assert client.get("/canvas").json()["edges"] == []

    def test_connect_image_to_analysis_fills_result(self, client, store):
        store.image_analyzer = AsyncMock(return_value="A red kite over a field")
        image = _drop(client, "image", url="https://x/kite.png")
        analysis = _drop(client, "ai-analysis")

        body = client.post("/canvas/edges", json={"source": image["id"], "target": analysis["id"]}).json()

        assert body["target"]["data"] == {"status": "done", "result": "A red kite over a field"}

    def test_connect_when_target_deleted_during_analysis(self, client, store):
        image = _drop(client, "image", url="https://x/kite.png")
        analysis = _drop(client, "ai-analysis")

        async def analyze_then_delete(url):
            store.delete_node(analysis["id"])
            return "too late"

        store.image_analyzer = analyze_then_delete

        response = client.post("/canvas/edges", json={"source": image["id"], "target": analysis["id"]})

        assert response.status_code == 200
        assert response.json()["target"] is None
        assert store.get_node(analysis["id"]) is None

    def test_connect_missing_target(self, client):
        a = _drop(client)

        response = client.post("/canvas/edges", json={"source": a["id"], "target": "ghost"})

        assert response.status_code == 404

    def test_delete_node(self, client):
        node = _drop(client)

        assert client.delete(f"/canvas/nodes/{node['id']}").json() == {"success": True}
        assert client.delete(f"/canvas/nodes/{node['id']}").status_code == 404

    def test_delete_asset_nodes(self, client):
        node = _drop(client, assetId="asset-9")
        _drop(client, assetId="asset-10")

        response = client.delete("/canvas/assets/asset-9")

        assert response.json() == {"removed": [node["id"]]}
        assert len(client.get("/canvas").json()["nodes"]) == 1

    def test_command_creates_course_node(self, client):
        source = _drop(client, content="Notes on rivers")

        response = client.post(
            "/canvas/commands",
            json={"kind": "create-course-from-content", "sourceNodeId": source["id"], "content": "Notes on rivers"},
        )

        node_id = response.json()["nodeId"]
        nodes = {n["id"]: n for n in client.get("/canvas").json()["nodes"]}
        assert nodes[node_id]["type"] == "course"
        assert nodes[node_id]["data"]["label"] == "New Course"

    def test_unknown_command_kind(self, client):
        response = client.post("/canvas/commands", json={"kind": "teleport"})

        assert response.status_code == 422

    def test_agent_input_for_selection(self, client):
        a = _drop(client, content="alpha", label="A")
        _drop(client, content="beta")

        body = client.post(
            "/canvas/agent-input", json={"nodeIds": [a["id"], "unknown"], "userPrompt": "Make a course"}
        ).json()

        assert [n["id"] for n in body["nodes"]] == [a["id"]]
        assert body["nodes"][0]["data"]["content"] == "alpha"
        assert body["userPrompt"] == "Make a course"
