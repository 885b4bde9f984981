import json

import pytest

from gltfmerge import app
from gltfmerge.document import save_document


@pytest.fixture
def inputs(tmp_path, base_doc, attachment_doc, anim_doc):
    paths = {
        "base": tmp_path / "base.gltf",
        "tail": tmp_path / "tail.gltf",
        "walk": tmp_path / "walk.gltf",
    }
    save_document(base_doc, paths["base"])
    save_document(attachment_doc, paths["tail"])
    save_document(anim_doc, paths["walk"])
    return paths


@pytest.fixture(autouse=True)
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_mesh_merge_writes_default_output(tmp_path, inputs):
    assert app.mesh_main([str(inputs["base"]), str(inputs["tail"])]) == 0
    merged = _read(tmp_path / "merged.gltf")
    assert len(merged["meshes"]) == 2
    assert len(merged["nodes"]) == 6
    assert merged["scenes"][0]["nodes"] == [0, 5]


def test_anim_merge_with_output_option(tmp_path, inputs):
    out = tmp_path / "rigged.gltf"
    args = [str(inputs["base"]), str(inputs["walk"]), "-o", str(out)]
    assert app.anim_main(args) == 0
    merged = _read(out)
    channels = merged["animations"][0]["channels"]
    assert [c["target"]["node"] for c in channels] == [1, 2]


def test_subcommand_form(tmp_path, inputs):
    assert app.main(["anim", str(inputs["base"]), str(inputs["walk"])]) == 0
    assert (tmp_path / "merged.gltf").exists()


def test_strict_failure_writes_nothing(tmp_path, inputs):
    args = [str(inputs["base"]), str(inputs["tail"]), "--strict"]
    assert app.mesh_main(args) == 1
    assert not (tmp_path / "merged.gltf").exists()


def test_missing_input_fails(tmp_path, inputs):
    assert app.mesh_main([str(inputs["base"]), str(tmp_path / "nope.gltf")]) == 1
    assert not (tmp_path / "merged.gltf").exists()


def test_missing_positional_exits(inputs):
    with pytest.raises(SystemExit) as exc:
        app.mesh_main([str(inputs["base"])])
    assert exc.value.code != 0
