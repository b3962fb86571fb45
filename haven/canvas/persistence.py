"""Persistence ports for the canvas store.

One writer per canvas: whoever saves last wins, and nothing coordinates two
sessions editing the same files. Saved payloads carry no schema version.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from haven.canvas.models import Edge, Node
from haven.utils.logging import get_logger

logger = get_logger(__name__)

NODES_FILE = "haven-nodes.json"
EDGES_FILE = "haven-edges.json"


class CanvasPersistence(Protocol):
    def load(self) -> tuple[list[Node], list[Edge]]: ...

    def save(self, nodes: list[Node], edges: list[Edge]) -> None: ...


class InMemoryPersistence:
    """Keeps the last saved snapshot as JSON text, so a reload goes through parsing."""

    def __init__(self) -> None:
        self.nodes_json: str | None = None
        self.edges_json: str | None = None
        self.saves = 0

    def load(self) -> tuple[list[Node], list[Edge]]:
        nodes = [Node.model_validate(n) for n in json.loads(self.nodes_json or "[]")]
        edges = [Edge.model_validate(e) for e in json.loads(self.edges_json or "[]")]
        return nodes, edges

    def save(self, nodes: list[Node], edges: list[Edge]) -> None:
        self.nodes_json = json.dumps([n.model_dump(mode="json") for n in nodes])
        self.edges_json = json.dumps([e.model_dump(mode="json") for e in edges])
        self.saves += 1


class JsonFilePersistence:
    """Two JSON files in one directory: the node array and the edge array."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    @property
    def nodes_path(self) -> Path:
        return self.directory / NODES_FILE

    @property
    def edges_path(self) -> Path:
        return self.directory / EDGES_FILE

    def load(self) -> tuple[list[Node], list[Edge]]:
        """Read both files. Missing or unreadable files yield an empty canvas."""
        try:
            nodes = [Node.model_validate(n) for n in self._read_array(self.nodes_path)]
            edges = [Edge.model_validate(e) for e in self._read_array(self.edges_path)]
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("canvas_load_failed", directory=str(self.directory), error=str(e))
            return [], []
        return nodes, edges

    def save(self, nodes: list[Node], edges: list[Edge]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._write_atomic(self.nodes_path, [n.model_dump(mode="json") for n in nodes])
        self._write_atomic(self.edges_path, [e.model_dump(mode="json") for e in edges])

    @staticmethod
    def _read_array(path: Path) -> list:
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8") or "[]")
        if not isinstance(data, list):
            raise ValueError(f"{path.name} does not hold a JSON array")
        return data

    def _write_atomic(self, path: Path, data: list) -> None:
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
