import pytest
from pygltflib import (
    GLTF2,
    Accessor,
    Animation,
    AnimationChannel,
    AnimationChannelTarget,
    AnimationSampler,
    Attributes,
    Buffer,
    BufferView,
    Image,
    Material,
    Mesh,
    Node,
    PbrMetallicRoughness,
    Primitive,
    Sampler,
    Scene,
    Skin,
    Texture,
    TextureInfo,
)

from gltfmerge.config import MergeConfig


def accessor(view=0, count=3, type_="VEC3"):
    return Accessor(bufferView=view, componentType=5126, count=count, type=type_)


def channel(sampler, hint, path="rotation"):
    extras = {"name": hint} if hint is not None else {}
    return AnimationChannel(
        sampler=sampler, target=AnimationChannelTarget(path=path, extras=extras)
    )


@pytest.fixture
def base_doc():
    """Skinned base mesh: Root -> Hips -> Spine."""
    return GLTF2(
        scene=0,
        scenes=[Scene(nodes=[0])],
        nodes=[
            Node(name="Root", children=[1], mesh=0, skin=0),
            Node(name="Hips", children=[2]),
            Node(name="Spine"),
        ],
        buffers=[Buffer(byteLength=256, uri="base.bin")],
        bufferViews=[
            BufferView(buffer=0, byteOffset=0, byteLength=128),
            BufferView(buffer=0, byteOffset=128, byteLength=128),
        ],
        accessors=[accessor(0), accessor(0), accessor(1, type_="MAT4", count=2)],
        images=[Image(uri="base.png")],
        samplers=[Sampler(magFilter=9729)],
        textures=[Texture(source=0, sampler=0)],
        materials=[
            Material(
                name="base",
                pbrMetallicRoughness=PbrMetallicRoughness(
                    baseColorTexture=TextureInfo(index=0)
                ),
                normalTexture=TextureInfo(index=0),
            )
        ],
        meshes=[
            Mesh(
                name="body",
                primitives=[
                    Primitive(
                        attributes=Attributes(POSITION=0, NORMAL=1),
                        indices=2,
                        material=0,
                    )
                ],
            )
        ],
        skins=[Skin(joints=[1, 2], inverseBindMatrices=2)],
    )


@pytest.fixture
def attachment_doc():
    """
    Second skinned mesh sharing Root, Hips and Spine with the base.

    Node 4 has no name; Tail lists it as a child.
    """
    return GLTF2(
        scene=0,
        scenes=[Scene(nodes=[0])],
        nodes=[
            Node(name="Root", children=[1]),
            Node(name="Hips", children=[2, 3]),
            Node(name="Spine"),
            Node(name="Tail", children=[4, 5]),
            Node(),
            Node(name="TailTip"),
        ],
        buffers=[Buffer(byteLength=64, uri="tail.bin")],
        bufferViews=[BufferView(buffer=0, byteOffset=0, byteLength=64)],
        accessors=[accessor(0), accessor(0), accessor(0), accessor(0, type_="MAT4")],
        images=[Image(uri="tail.png")],
        samplers=[Sampler(magFilter=9728)],
        textures=[Texture(source=0, sampler=0)],
        materials=[
            Material(
                name="fur",
                pbrMetallicRoughness=PbrMetallicRoughness(
                    baseColorTexture=TextureInfo(index=0)
                ),
                normalTexture=TextureInfo(index=0),
                emissiveTexture=TextureInfo(index=0),
            )
        ],
        meshes=[
            Mesh(
                name="tail",
                primitives=[
                    Primitive(
                        attributes=Attributes(POSITION=0, NORMAL=1, TEXCOORD_0=2),
                        indices=2,
                        material=0,
                    )
                ],
            )
        ],
        skins=[Skin(joints=[1, 3, 5], inverseBindMatrices=3)],
    )


@pytest.fixture
def anim_doc():
    """Animation-only document with bone names carried in channel extras."""
    return GLTF2(
        buffers=[Buffer(byteLength=96, uri="walk.bin")],
        bufferViews=[
            BufferView(buffer=0, byteOffset=0, byteLength=32),
            BufferView(buffer=0, byteOffset=32, byteLength=64),
        ],
        accessors=[
            accessor(0, count=4, type_="SCALAR"),
            accessor(1, count=4, type_="VEC4"),
            accessor(1, count=4, type_="VEC3"),
        ],
        animations=[
            Animation(
                name="walk",
                samplers=[
                    AnimationSampler(input=0, output=1, interpolation="LINEAR"),
                    AnimationSampler(input=0, output=2, interpolation="STEP"),
                ],
                channels=[
                    channel(0, "hips"),
                    channel(1, "SPINE", path="translation"),
                    channel(0, "Tail"),
                ],
            )
        ],
    )


@pytest.fixture
def config():
    """Provides a default MergeConfig."""
    return MergeConfig()
