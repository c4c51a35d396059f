"""Stack graph persistence interface and implementations.

The graph lives in one JSON file per repository, inside the `.git` directory
so it never shows up in the working tree. Only `stacks` is written; the
branch -> stack index is rebuilt on every load.

There is no locking. A command loads the graph once, mutates it in memory and
saves it once; two commands running at the same time race and the later save
wins.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any

from branchstack.core.errors import GraphIOError, GraphSerdeError
from branchstack.core.identifiers import BranchName, CommitId
from branchstack.core.stack_graph import Stack, StackGraph
from branchstack.core.stack_types import BranchNode, BranchStatus

logger = logging.getLogger(__name__)

DEFAULT_STACK_FILE = "branchstack.json"


def graph_to_dict(graph: StackGraph) -> dict[str, Any]:
    """Encode the persisted part of a graph as JSON-compatible data."""
    stacks: dict[str, Any] = {}
    for name, stack in graph.stacks.items():
        stacks[name] = {
            "name": stack.name,
            "root": str(stack.root),
            "branches": {
                str(branch): _node_to_dict(node) for branch, node in stack.branches.items()
            },
            "children": {
                str(parent): [str(child) for child in kids]
                for parent, kids in stack.children.items()
            },
        }
    return {"stacks": stacks}


def _node_to_dict(node: BranchNode) -> dict[str, Any]:
    return {
        "name": str(node.name),
        "tip": str(node.tip) if node.tip is not None else None,
        "parent": str(node.parent) if node.parent is not None else None,
        "status": node.status.value,
        "author": node.author,
        "created_at": node.created_at.isoformat(),
        "updated_at": node.updated_at.isoformat(),
    }


def graph_from_dict(data: dict[str, Any]) -> StackGraph:
    """Decode data produced by `graph_to_dict` and rebuild the index.

    Raises:
        GraphSerdeError: If the data is malformed or breaks a tree invariant
        BranchExistsError: If one branch appears in two stacks
    """
    try:
        stacks = [_stack_from_dict(name, raw) for name, raw in data.get("stacks", {}).items()]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise GraphSerdeError(f"malformed stack data: {e}") from e

    for stack in stacks:
        problems = stack.invariant_violations()
        if problems:
            raise GraphSerdeError(f'stack "{stack.name}" is inconsistent: ' + "; ".join(problems))

    return StackGraph.from_stacks(stacks)


def _stack_from_dict(key: str, raw: dict[str, Any]) -> Stack:
    name = raw["name"]
    if name != key:
        raise ValueError(f'stack stored under "{key}" is named "{name}"')

    branches: dict[BranchName, BranchNode] = {}
    for branch_key, node_raw in raw["branches"].items():
        node = _node_from_dict(node_raw)
        branches[BranchName(branch_key)] = node

    children: dict[BranchName, list[BranchName]] = {}
    for parent_key, kids in raw["children"].items():
        children[BranchName(parent_key)] = [BranchName(kid) for kid in kids]

    return Stack(
        name=name,
        root=BranchName(raw["root"]),
        branches=branches,
        children=children,
    )


def _node_from_dict(raw: dict[str, Any]) -> BranchNode:
    tip = raw.get("tip")
    parent = raw["parent"]
    return BranchNode(
        name=BranchName(raw["name"]),
        tip=CommitId(tip) if tip is not None else None,
        parent=BranchName(parent) if parent is not None else None,
        status=BranchStatus(raw["status"]),
        author=raw["author"],
        created_at=datetime.fromisoformat(raw["created_at"]),
        updated_at=datetime.fromisoformat(raw["updated_at"]),
    )


class GraphStore(ABC):
    """Interface for loading and saving a repository's stack graph."""

    @abstractmethod
    def path(self, repo_root: Path) -> Path:
        """Location of the persisted graph for `repo_root`."""
        ...

    @abstractmethod
    def load_or_default(self, repo_root: Path) -> StackGraph:
        """Load the graph, or return an empty one if nothing was saved yet.

        The returned graph is already reindexed.
        """
        ...

    @abstractmethod
    def save(self, graph: StackGraph, repo_root: Path) -> None:
        """Persist `graph`, replacing whatever was saved before."""
        ...


class JsonGraphStore(GraphStore):
    """Filesystem store writing `<repo_root>/.git/<stack_file>`."""

    def __init__(self, stack_file: str = DEFAULT_STACK_FILE) -> None:
        self.stack_file = stack_file

    def path(self, repo_root: Path) -> Path:
        return repo_root / ".git" / self.stack_file

    def load_or_default(self, repo_root: Path) -> StackGraph:
        graph_path = self.path(repo_root)
        if not graph_path.exists():
            logger.debug("No stack graph at %s, starting empty", graph_path)
            return StackGraph()

        try:
            raw = graph_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise GraphSerdeError(f"{graph_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise GraphIOError(f"cannot read {graph_path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise GraphSerdeError(f"{graph_path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise GraphSerdeError(f"{graph_path} does not contain a JSON object")

        graph = graph_from_dict(data)
        logger.debug("Loaded %d stacks from %s", len(graph.stacks), graph_path)
        return graph

    def save(self, graph: StackGraph, repo_root: Path) -> None:
        graph_path = self.path(repo_root)
        content = json.dumps(graph_to_dict(graph), indent=2) + "\n"

        try:
            graph_path.parent.mkdir(parents=True, exist_ok=True)
            graph_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise GraphIOError(f"cannot write {graph_path}: {e}") from e

        logger.debug("Saved %d stacks to %s", len(graph.stacks), graph_path)


class FakeGraphStore(GraphStore):
    """In-memory store for tests.

    Saved graphs go through the same encoding as the JSON store, so a load
    returns a fresh, reindexed copy rather than the saved object.
    """

    def __init__(self, graphs: dict[Path, StackGraph] | None = None) -> None:
        self._data: dict[Path, dict[str, Any]] = {}
        self._save_count = 0
        if graphs is not None:
            for repo_root, graph in graphs.items():
                self._data[repo_root] = graph_to_dict(graph)

    @property
    def save_count(self) -> int:
        """Number of save() calls, for test assertions."""
        return self._save_count

    def path(self, repo_root: Path) -> Path:
        return repo_root / ".git" / DEFAULT_STACK_FILE

    def load_or_default(self, repo_root: Path) -> StackGraph:
        data = self._data.get(repo_root)
        if data is None:
            return StackGraph()
        return graph_from_dict(data)

    def save(self, graph: StackGraph, repo_root: Path) -> None:
        self._data[repo_root] = graph_to_dict(graph)
        self._save_count += 1
