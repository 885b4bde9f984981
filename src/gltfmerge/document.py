"""Loading, saving and field access for glTF documents.

The in-memory document is a ``pygltflib.GLTF2``. Nested records coming out of
pygltflib are usually dataclasses, but documents built by hand or decoded from
unusual JSON can carry plain dicts in the same places, so field access goes
through :func:`get_field` / :func:`set_field`, which accept either.

Primitive attribute maps are the common case: a document read by
:func:`load_document` carries them as plain dicts, while one built in code
with ``pygltflib.Attributes`` carries that dataclass. Read them with
:func:`get_field` or :func:`iter_int_fields`, never by attribute access.

Bare-string channel name-hints are rewritten to ``{"name": ...}`` on load
(:func:`normalize_name_hints`), so merged output always carries the object
form.
"""
from __future__ import annotations
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterator

from pygltflib import GLTF2, BufferFormat

from .errors import DocumentStructureError
from .logging import get_logger

logger = get_logger(__name__)

# Array categories rebased with a flat offset, in the order they are merged.
CATEGORIES = (
    "buffers",
    "bufferViews",
    "accessors",
    "images",
    "samplers",
    "cameras",
    "textures",
    "materials",
    "meshes",
    "skins",
)

# Key under which a channel target's name-hint is stored once normalized.
NAME_HINT_KEY = "name"


def get_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a pygltflib record or a dict-like record."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def set_field(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, dict):
        obj[name] = value
    else:
        setattr(obj, name, value)


def iter_int_fields(obj: Any) -> Iterator[tuple[str, int]]:
    """Yield ``(key, value)`` for every integer-valued entry of a mapping record.

    Used for primitive attribute maps, which pygltflib exposes as an
    ``Attributes`` dataclass (with ``None`` for unused semantics) and plain
    JSON exposes as a dict.
    """
    if obj is None:
        return
    items = obj.items() if isinstance(obj, dict) else vars(obj).items()
    for key, value in list(items):
        if isinstance(value, int) and not isinstance(value, bool):
            yield key, value


def array(doc: GLTF2, category: str) -> list:
    """Return the list for ``category``, creating an empty one if absent."""
    values = getattr(doc, category, None)
    if values is None:
        values = []
        setattr(doc, category, values)
    return values


def name_hint(target: Any) -> str | None:
    """Return the symbolic bone name a channel target was authored against.

    Exporters write the hint either as a bare string in ``extras`` or as
    ``{"name": ...}``; both are understood.
    """
    extras = get_field(target, "extras")
    if isinstance(extras, str):
        return extras
    hint = get_field(extras, NAME_HINT_KEY) if isinstance(extras, dict) else None
    return hint if isinstance(hint, str) else None


def normalize_name_hints(data: dict) -> int:
    """Rewrite bare-string channel ``extras`` into ``{"name": ...}`` in raw JSON.

    pygltflib types ``extras`` as an object, so this runs before decoding.
    Returns the number of targets rewritten.
    """
    rewritten = 0
    for animation in data.get("animations") or []:
        for channel in animation.get("channels") or []:
            target = channel.get("target")
            if isinstance(target, dict) and isinstance(target.get("extras"), str):
                target["extras"] = {NAME_HINT_KEY: target["extras"]}
                rewritten += 1
    return rewritten


def document_from_dict(data: dict) -> GLTF2:
    if not isinstance(data, dict):
        raise DocumentStructureError(
            f"expected a JSON object at the top level, got {type(data).__name__}"
        )
    normalize_name_hints(data)
    return GLTF2.from_dict(data, infer_missing=True)


def load_document(path: str | os.PathLike) -> GLTF2:
    """
    Reads a glTF document from disk.

    ``.glb`` files are loaded through pygltflib and their binary chunk is
    turned into a data-URI buffer, so every buffer can be concatenated as an
    opaque blob. Anything else is parsed as JSON glTF. Buffer and image URIs
    are kept exactly as written.

    Args:
        path: Location of the ``.gltf`` or ``.glb`` file.

    Returns:
        The parsed document.

    Raises:
        OSError: The file cannot be read.
        DocumentStructureError: The file is not a JSON glTF document.
    """
    path = Path(path)
    if path.suffix.lower() == ".glb":
        logger.debug(f"Loading binary glTF {path}")
        doc = GLTF2().load_binary(str(path))
        doc.convert_buffers(BufferFormat.DATAURI)
        return doc

    logger.debug(f"Loading JSON glTF {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise DocumentStructureError(f"{path}: invalid JSON ({e})") from e
    return document_from_dict(data)


def save_document(doc: GLTF2, path: str | os.PathLike) -> Path:
    """
    Writes ``doc`` as JSON glTF in one step.

    The document is serialized to a temporary file next to ``path`` and then
    moved over it, so a failure never leaves a partially written output.
    """
    path = Path(path)
    directory = path.parent if str(path.parent) else Path(".")
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=directory
    )
    os.close(fd)
    try:
        doc.save_json(tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
    logger.info(f"Document written to {path}")
    return path
