from __future__ import annotations
from dataclasses import asdict, dataclass

from pygltflib import GLTF2

from .document import CATEGORIES


@dataclass(frozen=True)
class OffsetTable:
    """Pre-merge lengths of the primary document's arrays.

    Every index contributed by the secondary document is rebased by the
    entry for its category. The table is taken once, before any append.
    """

    buffers: int = 0
    bufferViews: int = 0
    accessors: int = 0
    images: int = 0
    samplers: int = 0
    cameras: int = 0
    textures: int = 0
    materials: int = 0
    meshes: int = 0
    skins: int = 0

    def shift(self, category: str, index: int | None) -> int | None:
        if index is None:
            return None
        return index + getattr(self, category)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def build_offset_table(primary: GLTF2) -> OffsetTable:
    return OffsetTable(
        **{c: len(getattr(primary, c, None) or []) for c in CATEGORIES}
    )
