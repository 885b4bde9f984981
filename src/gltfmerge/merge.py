"""Top-level merge operations.

Both operations take two parsed documents and return a new merged document;
neither input is modified. The offset table is captured from the primary
document once, before anything is appended, and every pass reads from it.
"""
from __future__ import annotations
import copy
from dataclasses import dataclass

from pygltflib import GLTF2

from .animation import retarget_animations
from .attach import add_attachment_root
from .concat import concat_geometry, concat_resources, concat_skins
from .config import MergeConfig
from .logging import get_logger
from .nodes import merge_nodes
from .offsets import OffsetTable, build_offset_table
from .profiler import Profiler
from .report import MergeReport

logger = get_logger(__name__)


@dataclass
class MergeResult:
    document: GLTF2
    report: MergeReport
    offsets: OffsetTable


def merge_meshes(
    primary: GLTF2, secondary: GLTF2, config: MergeConfig | None = None
) -> MergeResult:
    """
    Attaches the mesh document ``secondary`` to ``primary``.

    Every resource array is concatenated with its references rebased, nodes
    are merged by name, skins are rebound to the merged joints, and one new
    node instantiating the first attached mesh is added to the configured
    scene.
    """
    config = config or MergeConfig()
    profiler = Profiler()
    report = MergeReport()

    offsets = build_offset_table(primary)
    logger.debug(f"Offsets: {offsets.as_dict()}")
    result = copy.deepcopy(primary)

    with profiler.record("resources"):
        concat_resources(result, secondary, offsets, report)
    with profiler.record("nodes"):
        node_map = merge_nodes(result, secondary, offsets, report, config.strict)
    with profiler.record("skins"):
        concat_skins(result, secondary, offsets, report, node_map)
    with profiler.record("attach"):
        add_attachment_root(
            result, offsets, report, config.scene_index, config.attachment_name
        )

    logger.info(f"Mesh merge: {report.summary()}")
    profiler.log_stats()
    report.timings = profiler.get_timings()
    return MergeResult(result, report, offsets)


def merge_animation(
    primary: GLTF2, secondary: GLTF2, config: MergeConfig | None = None
) -> MergeResult:
    """
    Adds the animations of the animation-only document ``secondary`` to the
    mesh document ``primary``.

    The animation data (buffers, bufferViews, accessors) is concatenated and
    each channel is bound to the primary node whose name matches its
    name-hint, ignoring case. Nodes of ``secondary`` are not merged.
    """
    config = config or MergeConfig()
    profiler = Profiler()
    report = MergeReport()

    offsets = build_offset_table(primary)
    logger.debug(f"Offsets: {offsets.as_dict()}")
    result = copy.deepcopy(primary)

    with profiler.record("geometry"):
        concat_geometry(result, secondary, offsets, report)
    with profiler.record("animations"):
        retarget_animations(result, secondary, offsets, report, config.strict)

    logger.info(f"Animation merge: {report.summary()}")
    profiler.log_stats()
    report.timings = profiler.get_timings()
    return MergeResult(result, report, offsets)


MERGERS = {
    "mesh": merge_meshes,
    "anim": merge_animation,
}
