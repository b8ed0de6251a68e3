"""
In-memory scene graph, shaped like the objects three.js GLTFLoader returns.

The generated component references these objects by name at runtime, so the
model keeps three.js type strings and property names (as snake_case fields).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from notso_jsx.utils.numbers import vector_length

MESH_TYPES: frozenset[str] = frozenset({"Mesh", "SkinnedMesh", "InstancedMesh"})
CAMERA_TYPES: frozenset[str] = frozenset({"PerspectiveCamera", "OrthographicCamera"})
LIGHT_TYPES: frozenset[str] = frozenset({
    "AmbientLight",
    "DirectionalLight",
    "HemisphereLight",
    "PointLight",
    "RectAreaLight",
    "SpotLight",
})
LINE_TYPES: frozenset[str] = frozenset({"Line", "LineLoop", "LineSegments"})
GROUP_TYPES: frozenset[str] = frozenset({"Group", "Object3D", "Scene"})

NODE_TYPES: frozenset[str] = (
    MESH_TYPES
    | CAMERA_TYPES
    | LIGHT_TYPES
    | LINE_TYPES
    | GROUP_TYPES
    | frozenset({"Bone", "Points"})
)


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def length(self) -> float:
        return vector_length(self.x, self.y, self.z)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def set(self, x: float, y: float, z: float) -> Vector3:
        self.x, self.y, self.z = x, y, z
        return self

    def copy(self, other: Vector3 | Euler) -> Vector3:
        return self.set(other.x, other.y, other.z)


@dataclass
class Euler(Vector3):
    """Euler angles in radians, XYZ order."""

    order: str = "XYZ"


@dataclass(eq=False)
class Geometry:
    """Buffer geometry, shared by every node that draws it."""

    uuid: str
    name: str = ""


@dataclass(eq=False)
class Material:
    uuid: str
    name: str = ""
    type: str = "MeshStandardMaterial"


@dataclass(eq=False)
class Skeleton:
    bones: list[SceneNode] = field(default_factory=list)


@dataclass(eq=False)
class SceneNode:
    """
    One object in the scene graph.

    Compared and hashed by identity: two nodes with equal fields are still
    distinct objects in the tree.
    """

    name: str = ""
    type: str = "Object3D"
    position: Vector3 = field(default_factory=Vector3)
    rotation: Euler = field(default_factory=Euler)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    up: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    geometry: Geometry | None = None
    material: Material | None = None
    skeleton: Skeleton | None = None
    children: list[SceneNode] = field(default_factory=list)
    parent: SceneNode | None = field(default=None, repr=False)
    visible: bool = True
    cast_shadow: bool = False
    receive_shadow: bool = False
    morph_target_dictionary: dict[str, int] | None = None
    morph_target_influences: list[float] | None = None
    user_data: dict[str, Any] = field(default_factory=dict)
    # Lights
    color: str | None = None  # hex without '#'
    intensity: float | None = None
    angle: float | None = None
    penumbra: float | None = None
    decay: float | None = None
    distance: float | None = None
    # Cameras
    zoom: float | None = None
    near: float | None = None
    far: float | None = None
    fov: float | None = None
    # InstancedMesh
    count: int | None = None

    @property
    def is_mesh(self) -> bool:
        return self.type in MESH_TYPES

    @property
    def is_bone(self) -> bool:
        return self.type == "Bone"

    @property
    def is_camera(self) -> bool:
        return self.type in CAMERA_TYPES

    @property
    def is_light(self) -> bool:
        return self.type in LIGHT_TYPES

    def add(self, *nodes: SceneNode) -> SceneNode:
        """Append children, detaching them from any previous parent."""
        for node in nodes:
            if node.parent is not None:
                node.parent.remove(node)
            node.parent = self
            self.children.append(node)
        return self

    def remove(self, node: SceneNode) -> None:
        self.children = [c for c in self.children if c is not node]
        if node.parent is self:
            node.parent = None

    def traverse(self) -> Iterator[SceneNode]:
        """Depth-first, pre-order, self included."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def __repr__(self) -> str:
        return f"SceneNode({self.type} {self.name!r}, children={len(self.children)})"


@dataclass
class AnimationClip:
    name: str
    targets: list[SceneNode] = field(default_factory=list)


@dataclass
class Gltf:
    """A loaded asset: the scene root plus the data the generator needs."""

    scene: SceneNode
    animations: list[AnimationClip] = field(default_factory=list)
    extras: dict[str, Any] | None = None
    uses_draco: bool = False

    def objects(self) -> list[SceneNode]:
        return list(self.scene.traverse())
