"""Rebase animation samplers and retarget channels onto bones by name."""
from __future__ import annotations
import copy

from pygltflib import GLTF2

from .document import array, name_hint
from .errors import UnresolvedReferenceError
from .logging import get_logger
from .nodes import build_name_index
from .offsets import OffsetTable
from .report import DroppedChannel, MergeReport

logger = get_logger(__name__)


def _normalize(name: str) -> str:
    return name.lower()


def rebase_sampler(sampler, offsets: OffsetTable) -> None:
    sampler.input = offsets.shift("accessors", sampler.input)
    sampler.output = offsets.shift("accessors", sampler.output)


def retarget_animations(
    result: GLTF2,
    secondary: GLTF2,
    offsets: OffsetTable,
    report: MergeReport,
    strict: bool = False,
    target_nodes: list | None = None,
) -> list:
    """
    Appends the secondary animations, bound to the merged document's nodes.

    Sampler accessors are rebased by the accessors offset. Each channel's
    target is looked up by its name-hint, case-insensitively, among
    ``target_nodes`` (the result's nodes by default); the first node with a
    matching name wins. Channels that find no node are dropped and reported,
    or raise when ``strict`` is set. Their samplers stay in the sampler list.

    Returns:
        The animations that were appended.
    """
    nodes = target_nodes if target_nodes is not None else array(result, "nodes")
    bones = build_name_index(nodes, normalize=_normalize)

    animations = copy.deepcopy(secondary.animations or [])
    for a, animation in enumerate(animations):
        for sampler in animation.samplers or []:
            rebase_sampler(sampler, offsets)

        kept = []
        for c, channel in enumerate(animation.channels or []):
            hint = name_hint(channel.target)
            node = bones.get(_normalize(hint)) if hint is not None else None
            if node is None:
                reason = (
                    "channel target has no name hint"
                    if hint is None
                    else f"no node named '{hint}'"
                )
                if strict:
                    raise UnresolvedReferenceError(
                        "channel", c, f"animation {a}: {reason}"
                    )
                logger.warning(f"Dropping channel {c} of animation {a}: {reason}")
                report.dropped_channels.append(DroppedChannel(a, c, hint, reason))
                continue
            channel.target.node = node
            kept.append(channel)
        animation.channels = kept

        name = animation.name or f"#{a}"
        logger.info(
            f"Animation {name}: {len(kept)} channel(s) bound, "
            f"{len(animation.samplers or [])} sampler(s)"
        )

    array(result, "animations").extend(animations)
    report.count("animations", len(animations))
    return animations
