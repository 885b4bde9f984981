from __future__ import annotations

from pygltflib import GLTF2, Node

from .document import array
from .errors import DocumentStructureError
from .logging import get_logger
from .offsets import OffsetTable
from .report import MergeReport

logger = get_logger(__name__)


def add_attachment_root(
    result: GLTF2,
    offsets: OffsetTable,
    report: MergeReport,
    scene_index: int = 0,
    name: str | None = None,
) -> int | None:
    """
    Instantiates the attached mesh with one new root node.

    The node points at the first mesh and skin the secondary document
    contributed (their indices are the pre-merge counts in ``offsets``) and
    is registered as a root of ``scenes[scene_index]``. When no skin was
    contributed the node carries the mesh only.

    Returns:
        Index of the new node, or ``None`` if the secondary document brought
        no mesh to attach.
    """
    scenes = array(result, "scenes")
    if not 0 <= scene_index < len(scenes):
        raise DocumentStructureError(
            f"scene {scene_index} does not exist (document has {len(scenes)})"
        )

    if len(array(result, "meshes")) <= offsets.meshes:
        logger.warning("Secondary document has no mesh; no attachment node added")
        return None

    skin = offsets.skins
    if len(array(result, "skins")) <= skin:
        logger.warning("Secondary document has no skin; attaching the mesh unskinned")
        skin = None

    nodes = array(result, "nodes")
    index = len(nodes)
    nodes.append(Node(name=name, mesh=offsets.meshes, skin=skin))

    scene = scenes[scene_index]
    if scene.nodes is None:
        scene.nodes = []
    scene.nodes.append(index)

    report.attachment_node = index
    logger.debug(f"Attachment node {index} added to scene {scene_index}")
    return index
