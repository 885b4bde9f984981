"""Name-identity merge of the scene-graph node arrays.

Nodes are not concatenated with a flat offset: a secondary node whose name
already exists in the merged document *is* that node, so every node index
coming from the secondary document is translated through a name map instead.
"""
from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Callable

from pygltflib import GLTF2

from .document import array
from .errors import DocumentStructureError, UnresolvedReferenceError
from .logging import get_logger
from .offsets import OffsetTable
from .report import DroppedChild, DroppedNode, MergeReport

logger = get_logger(__name__)


def build_name_index(
    nodes: list, normalize: Callable[[str], str] | None = None
) -> dict[str, int]:
    """Map node name to node index, keeping the first node for a repeated name.

    Args:
        nodes: Node records in document order.
        normalize: Optional key transform (e.g. ``str.lower``) for lookups
            that should ignore case.
    """
    index: dict[str, int] = {}
    for i, node in enumerate(nodes):
        name = node.name
        if name is None:
            continue
        key = normalize(name) if normalize else name
        if key in index:
            logger.warning(
                f"Node name '{name}' appears more than once; "
                f"using node {index[key]} and ignoring node {i}"
            )
            continue
        index[key] = i
    return index


@dataclass
class NodeMap:
    """Where each secondary node ended up in the merged document."""

    names: dict[str, int]
    secondary_names: list[str | None]
    added: list[int] = field(default_factory=list)
    existing: list[int] = field(default_factory=list)

    def resolve(self, secondary_index: int) -> int | None:
        """Merged index of a secondary node, or ``None`` if it was dropped."""
        if not 0 <= secondary_index < len(self.secondary_names):
            raise DocumentStructureError(
                f"node index {secondary_index} out of range for secondary "
                f"document with {len(self.secondary_names)} nodes"
            )
        name = self.secondary_names[secondary_index]
        if name is None:
            return None
        return self.names.get(name)


def _remap_children(
    parent: str,
    children: list[int],
    node_map: NodeMap,
    report: MergeReport,
    strict: bool,
) -> list[int]:
    remapped = []
    for child in children:
        target = node_map.resolve(child)
        if target is None:
            reason = "child node has no name"
            if strict:
                raise UnresolvedReferenceError(
                    "child", child, f"{reason} (parent '{parent}')"
                )
            logger.warning(f"Dropping child {child} of '{parent}': {reason}")
            report.dropped_children.append(DroppedChild(parent, child, reason))
            continue
        remapped.append(target)
    return remapped


def merge_nodes(
    result: GLTF2,
    secondary: GLTF2,
    offsets: OffsetTable,
    report: MergeReport,
    strict: bool = False,
) -> NodeMap:
    """
    Folds the secondary document's nodes into ``result`` by name.

    * unnamed secondary nodes are dropped (``strict`` raises instead),
    * nodes with a new name are appended, with their ``mesh``, ``skin`` and
      ``camera`` fields rebased by ``offsets``,
    * nodes whose name is already present are folded into the existing node:
      their children are added to its child list, skipping indices it
      already has.

    Child lists of appended nodes are translated to merged indices.

    Args:
        result: Merged document being built; its node list is extended in place.
        secondary: Document the nodes come from. Not modified.
        offsets: Offset table taken from the primary document before merging.
        report: Receives the dropped nodes and child references.
        strict: Raise :class:`UnresolvedReferenceError` instead of dropping.

    Returns:
        The identity map used to translate any other secondary node index.
    """
    nodes = array(result, "nodes")
    secondary_nodes = secondary.nodes or []
    node_map = NodeMap(
        names=build_name_index(nodes),
        secondary_names=[n.name for n in secondary_nodes],
    )

    appended = []
    for i, node in enumerate(secondary_nodes):
        if node.name is None:
            reason = "node has no name"
            if strict:
                raise UnresolvedReferenceError("node", i, reason)
            logger.warning(f"Dropping secondary node {i}: {reason}")
            report.dropped_nodes.append(DroppedNode(i, reason))
            continue
        if node.name in node_map.names:
            node_map.existing.append(i)
            continue

        new_node = copy.deepcopy(node)
        new_node.mesh = offsets.shift("meshes", new_node.mesh)
        new_node.skin = offsets.shift("skins", new_node.skin)
        new_node.camera = offsets.shift("cameras", new_node.camera)
        node_map.names[node.name] = len(nodes)
        nodes.append(new_node)
        node_map.added.append(i)
        appended.append(new_node)

    for new_node in appended:
        if new_node.children:
            new_node.children = _remap_children(
                new_node.name, new_node.children, node_map, report, strict
            )

    for i in node_map.existing:
        node = secondary_nodes[i]
        if not node.children:
            continue
        real_node = nodes[node_map.names[node.name]]
        if real_node.children is None:
            real_node.children = []
        for child in _remap_children(
            node.name, node.children, node_map, report, strict
        ):
            if child not in real_node.children:
                real_node.children.append(child)

    report.count("nodes", len(appended))
    logger.debug(
        f"Nodes: {len(node_map.added)} added, {len(node_map.existing)} merged "
        f"into existing, {len(report.dropped_nodes)} dropped"
    )
    return node_map
