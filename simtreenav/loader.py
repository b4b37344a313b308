"""Load a process-tree dataset (manifest, nodes, diff) from JSON files.

A dataset path is either a nodes JSON file or a directory. Directories are
searched for ``manifest.json`` (also under ``data/``); the manifest names the
nodes and diff documents, which resolve under ``<basePath>/data/``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import DatasetError
from .tree_model.types import Node, NodeId, nodes_from_document

logger = logging.getLogger(__name__)

MANIFEST_CANDIDATES = ("manifest.json", "data/manifest.json")
DEFAULT_NODES_FILE = "nodes.json"
DEFAULT_MANIFEST: dict[str, Any] = {
    "schemaVersion": "0.6.0",
    "viewer": {"basePath": ""},
    "files": {},
}


@dataclass
class Dataset:
    roots: list[Node]
    changed_ids: frozenset[NodeId] = frozenset()
    manifest: dict[str, Any] = field(default_factory=dict)


def read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise DatasetError(f"cannot read {path}: {exc.strerror or exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"invalid JSON in {path}: {exc}") from exc


def load_manifest(directory: Path) -> dict[str, Any]:
    """Return the first manifest found in ``directory``, or the default one."""
    for candidate in MANIFEST_CANDIDATES:
        path = directory / candidate
        if not path.is_file():
            continue
        manifest = read_json(path)
        if isinstance(manifest, dict):
            return manifest
        logger.warning("ignoring %s: top-level value is not an object", path)
    logger.warning("no manifest.json found in %s, using defaults", directory)
    return dict(DEFAULT_MANIFEST)


def resolve_data_path(directory: Path, manifest: Mapping[str, Any], filename: str) -> Path:
    """Resolve a data file named by the manifest relative to its base path."""
    viewer = manifest.get("viewer")
    base_path = viewer.get("basePath", "") if isinstance(viewer, Mapping) else ""
    base = directory / str(base_path).rstrip("/") if base_path else directory
    return base / "data" / filename


def changed_ids_from_diff(document: Any) -> frozenset[NodeId]:
    """Collect ``changes[].nodeId`` values from a diff document."""
    if not isinstance(document, Mapping):
        return frozenset()
    changes = document.get("changes")
    if not isinstance(changes, list):
        return frozenset()
    changed: set[NodeId] = set()
    for change in changes:
        if not isinstance(change, Mapping):
            continue
        node_id = change.get("nodeId")
        if isinstance(node_id, (str, int)) and not isinstance(node_id, bool) and node_id != "":
            changed.add(node_id)
    return frozenset(changed)


def load_nodes(path: Path) -> list[Node]:
    document = read_json(path)
    if not isinstance(document, (list, dict)):
        raise DatasetError(f"{path} does not contain a node list or object")
    return nodes_from_document(document)


def load_diff(path: Path) -> frozenset[NodeId]:
    """Read a diff document; a missing or broken diff yields no changes."""
    try:
        return changed_ids_from_diff(read_json(path))
    except DatasetError as exc:
        logger.warning("diff not loaded: %s", exc)
        return frozenset()


def load_dataset(path: Path, diff_path: Path | None = None) -> Dataset:
    """Load roots and changed ids from a nodes file or a dataset directory.

    ``diff_path`` overrides the manifest's diff entry.
    """
    path = Path(path)
    if path.is_dir():
        manifest = load_manifest(path)
        files = manifest.get("files")
        files = files if isinstance(files, Mapping) else {}
        nodes_path = resolve_data_path(path, manifest, str(files.get("nodes") or DEFAULT_NODES_FILE))
        if not nodes_path.is_file() and (path / DEFAULT_NODES_FILE).is_file():
            nodes_path = path / DEFAULT_NODES_FILE
        if diff_path is None and files.get("diff"):
            diff_path = resolve_data_path(path, manifest, str(files["diff"]))
    elif path.is_file():
        manifest = {}
        nodes_path = path
    else:
        raise DatasetError(f"Path not found: {path}")

    roots = load_nodes(nodes_path)
    changed_ids = load_diff(diff_path) if diff_path is not None else frozenset()
    logger.debug("loaded %d root node(s) and %d changed id(s) from %s", len(roots), len(changed_ids), path)
    return Dataset(roots=roots, changed_ids=changed_ids, manifest=manifest)
