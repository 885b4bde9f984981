"""Append the secondary document's arrays to the merged document.

Each ``concat_*`` function deep-copies the secondary elements of one
category, rewrites the references they own using the offset table and
appends them to ``result``. The secondary document is never modified.
"""
from __future__ import annotations
import copy

from pygltflib import GLTF2

from .document import array, get_field, iter_int_fields, set_field
from .errors import DocumentStructureError, UnresolvedReferenceError
from .logging import get_logger
from .nodes import NodeMap
from .offsets import OffsetTable
from .report import MergeReport

logger = get_logger(__name__)

# Texture slots a material may carry, as (container, slot) pairs. ``None``
# means the slot sits directly on the material.
MATERIAL_TEXTURE_SLOTS = (
    ("pbrMetallicRoughness", "baseColorTexture"),
    ("pbrMetallicRoughness", "metallicRoughnessTexture"),
    (None, "normalTexture"),
    (None, "occlusionTexture"),
    (None, "emissiveTexture"),
)


def _append(
    result: GLTF2, category: str, items: list, report: MergeReport
) -> list:
    array(result, category).extend(items)
    report.count(category, len(items))
    return items


def _copy(secondary: GLTF2, category: str) -> list:
    return copy.deepcopy(getattr(secondary, category, None) or [])


def _required(value, what: str, index: int):
    if value is None:
        raise DocumentStructureError(f"{what} #{index} has no index")
    return value


def concat_buffers(result, secondary, offsets, report):
    return _append(result, "buffers", _copy(secondary, "buffers"), report)


def concat_buffer_views(result, secondary, offsets, report):
    views = _copy(secondary, "bufferViews")
    for i, view in enumerate(views):
        view.buffer = offsets.shift(
            "buffers", _required(view.buffer, "bufferView.buffer", i)
        )
    return _append(result, "bufferViews", views, report)


def _shift_sparse(sparse, offsets: OffsetTable) -> None:
    for part in ("indices", "values"):
        section = get_field(sparse, part)
        view = get_field(section, "bufferView")
        if view is not None:
            set_field(section, "bufferView", offsets.shift("bufferViews", view))


def concat_accessors(result, secondary, offsets, report):
    accessors = _copy(secondary, "accessors")
    for accessor in accessors:
        # Accessors without a bufferView are zero-filled and legal.
        accessor.bufferView = offsets.shift("bufferViews", accessor.bufferView)
        if accessor.sparse is not None:
            _shift_sparse(accessor.sparse, offsets)
    return _append(result, "accessors", accessors, report)


def concat_images(result, secondary, offsets, report):
    images = _copy(secondary, "images")
    for image in images:
        image.bufferView = offsets.shift("bufferViews", image.bufferView)
    return _append(result, "images", images, report)


def concat_samplers(result, secondary, offsets, report):
    return _append(result, "samplers", _copy(secondary, "samplers"), report)


def concat_cameras(result, secondary, offsets, report):
    return _append(result, "cameras", _copy(secondary, "cameras"), report)


def concat_textures(result, secondary, offsets, report):
    textures = _copy(secondary, "textures")
    for texture in textures:
        texture.source = offsets.shift("images", texture.source)
        texture.sampler = offsets.shift("samplers", texture.sampler)
    return _append(result, "textures", textures, report)


def shift_material_textures(material, offsets: OffsetTable) -> None:
    """Rebase every texture slot present on ``material``."""
    for container, slot in MATERIAL_TEXTURE_SLOTS:
        owner = get_field(material, container) if container else material
        info = get_field(owner, slot)
        index = get_field(info, "index")
        if index is not None:
            set_field(info, "index", offsets.shift("textures", index))


def concat_materials(result, secondary, offsets, report):
    materials = _copy(secondary, "materials")
    for material in materials:
        shift_material_textures(material, offsets)
    return _append(result, "materials", materials, report)


def _shift_attribute_map(attributes, offsets: OffsetTable) -> None:
    for key, value in iter_int_fields(attributes):
        set_field(attributes, key, offsets.shift("accessors", value))


def shift_primitive(primitive, offsets: OffsetTable) -> None:
    primitive.indices = offsets.shift("accessors", primitive.indices)
    primitive.material = offsets.shift("materials", primitive.material)
    _shift_attribute_map(primitive.attributes, offsets)
    for target in primitive.targets or []:
        _shift_attribute_map(target, offsets)


def concat_meshes(result, secondary, offsets, report):
    meshes = _copy(secondary, "meshes")
    for mesh in meshes:
        for primitive in mesh.primitives or []:
            shift_primitive(primitive, offsets)
    return _append(result, "meshes", meshes, report)


def _resolve_joint(node_map: NodeMap, skin: int, joint: int) -> int:
    merged = node_map.resolve(joint)
    if merged is None:
        raise UnresolvedReferenceError(
            "joint",
            joint,
            f"skin {skin} uses a node with no name as a joint; "
            "it cannot be matched in the merged document",
        )
    return merged


def concat_skins(result, secondary, offsets, report, node_map: NodeMap):
    """
    Appends the secondary skins.

    Joints and the optional skeleton root are node indices, so they go
    through ``node_map`` rather than an offset. A joint that cannot be
    resolved always raises: dropping it would misalign the joint list with
    the inverse bind matrices.
    """
    skins = _copy(secondary, "skins")
    for i, skin in enumerate(skins):
        skin.inverseBindMatrices = offsets.shift(
            "accessors", skin.inverseBindMatrices
        )
        skin.joints = [_resolve_joint(node_map, i, j) for j in skin.joints or []]
        if skin.skeleton is not None:
            skin.skeleton = _resolve_joint(node_map, i, skin.skeleton)
    return _append(result, "skins", skins, report)


def concat_geometry(result, secondary, offsets, report):
    """Buffers, bufferViews and accessors: the data every other category sits on."""
    concat_buffers(result, secondary, offsets, report)
    concat_buffer_views(result, secondary, offsets, report)
    concat_accessors(result, secondary, offsets, report)


def concat_resources(result, secondary, offsets, report):
    """Everything node-independent that a mesh document contributes."""
    concat_geometry(result, secondary, offsets, report)
    concat_images(result, secondary, offsets, report)
    concat_samplers(result, secondary, offsets, report)
    concat_cameras(result, secondary, offsets, report)
    concat_textures(result, secondary, offsets, report)
    concat_materials(result, secondary, offsets, report)
    concat_meshes(result, secondary, offsets, report)
