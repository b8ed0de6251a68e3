"""
Build the scene graph model from a glTF/GLB file.

Objects are created the way three.js GLTFLoader creates them (types, names,
default values), so that ``nodes.Foo`` and ``materials.Bar`` references in
the generated component resolve against the runtime loader's tables.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from pygltflib import GLTF2

from notso_jsx.scene.model import (
    AnimationClip,
    Euler,
    Geometry,
    Gltf,
    Material,
    SceneNode,
    Skeleton,
    Vector3,
)
from notso_jsx.utils.naming import sanitize_node_name

DRACO_EXTENSION = "KHR_draco_mesh_compression"
LIGHTS_EXTENSION = "KHR_lights_punctual"
INSTANCING_EXTENSION = "EXT_mesh_gpu_instancing"
UNLIT_EXTENSION = "KHR_materials_unlit"

# Any of these turns a MeshStandardMaterial into a MeshPhysicalMaterial
PHYSICAL_EXTENSIONS: frozenset[str] = frozenset({
    "KHR_materials_clearcoat",
    "KHR_materials_ior",
    "KHR_materials_iridescence",
    "KHR_materials_sheen",
    "KHR_materials_specular",
    "KHR_materials_transmission",
    "KHR_materials_volume",
})

# glTF primitive modes
POINTS, LINES, LINE_LOOP, LINE_STRIP = 0, 1, 2, 3
TRIANGLES, TRIANGLE_STRIP, TRIANGLE_FAN = 4, 5, 6


def load_gltf(filepath: str | Path) -> Gltf:
    """Read a .glb/.gltf file and build its scene graph."""
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    ext = path.suffix.lower()
    if ext not in (".glb", ".gltf"):
        raise ValueError(f"Unsupported format: {ext}")

    gltf = GLTF2().load(str(path))
    if gltf is None:
        raise ValueError(f"Could not parse glTF file: {path}")
    return build_scene(gltf)


def build_scene(gltf: GLTF2) -> Gltf:
    """Build the scene graph from an already parsed pygltflib document."""
    return _SceneBuilder(gltf).build()


def uses_draco(gltf: GLTF2) -> bool:
    """True if the document declares Draco mesh compression."""
    used = gltf.extensionsUsed or []
    required = gltf.extensionsRequired or []
    return DRACO_EXTENSION in used or DRACO_EXTENSION in required


def quaternion_to_euler(x: float, y: float, z: float, w: float) -> Euler:
    """Quaternion to XYZ Euler angles (three.js Euler.setFromQuaternion)."""
    m11 = 1 - 2 * (y * y + z * z)
    m12 = 2 * (x * y - z * w)
    m13 = 2 * (x * z + y * w)
    m22 = 1 - 2 * (x * x + z * z)
    m23 = 2 * (y * z - x * w)
    m32 = 2 * (y * z + x * w)
    m33 = 1 - 2 * (x * x + y * y)
    return _euler_from_rotation(m11, m12, m13, m22, m23, m32, m33)


def _euler_from_rotation(
    m11: float, m12: float, m13: float, m22: float, m23: float, m32: float, m33: float
) -> Euler:
    ry = math.asin(max(-1.0, min(1.0, m13)))
    if abs(m13) < 0.9999999:
        return Euler(math.atan2(-m23, m33), ry, math.atan2(-m12, m11))
    # Gimbal lock
    return Euler(math.atan2(m32, m22), ry, 0.0)


def decompose_matrix(matrix: list[float]) -> tuple[Vector3, Euler, Vector3]:
    """Split a column-major 4x4 matrix into position, rotation and scale."""
    m = [float(v) for v in matrix]
    sx = math.sqrt(m[0] ** 2 + m[1] ** 2 + m[2] ** 2)
    sy = math.sqrt(m[4] ** 2 + m[5] ** 2 + m[6] ** 2)
    sz = math.sqrt(m[8] ** 2 + m[9] ** 2 + m[10] ** 2)

    det = (
        m[0] * (m[5] * m[10] - m[9] * m[6])
        - m[4] * (m[1] * m[10] - m[9] * m[2])
        + m[8] * (m[1] * m[6] - m[5] * m[2])
    )
    if det < 0:
        sx = -sx

    position = Vector3(m[12], m[13], m[14])
    scale = Vector3(sx, sy, sz)
    if 0 in (sx, sy, sz):
        return position, Euler(), scale

    rotation = _euler_from_rotation(
        m[0] / sx,
        m[4] / sy,
        m[8] / sz,
        m[5] / sy,
        m[9] / sz,
        m[6] / sy,
        m[10] / sz,
    )
    return position, rotation, scale


def linear_to_srgb_hex(rgb: list[float]) -> str:
    """Linear RGB floats to the sRGB hex string three.js reports."""

    def channel(c: float) -> int:
        c = max(0.0, min(1.0, float(c)))
        srgb = c * 12.92 if c < 0.0031308 else 1.055 * (c ** (1 / 2.4)) - 0.055
        return round(max(0.0, min(1.0, srgb)) * 255)

    r, g, b = (list(rgb) + [1.0, 1.0, 1.0])[:3]
    return f"{channel(r):02x}{channel(g):02x}{channel(b):02x}"


class _SceneBuilder:
    """Single-use builder; holds the per-document caches."""

    def __init__(self, gltf: GLTF2) -> None:
        self.gltf = gltf
        self.names_used: dict[str, int] = {}
        self.nodes: dict[int, SceneNode] = {}
        self.geometries: dict[str, Geometry] = {}
        self.materials: dict[str, Material] = {}
        self.pending_skins: list[tuple[SceneNode, int]] = []
        self.joints: set[int] = {
            joint for skin in (gltf.skins or []) for joint in (skin.joints or [])
        }

    def unique_name(self, original: str) -> str:
        """GLTFLoader.createUniqueName: repeat names get _1, _2, ..."""
        name = sanitize_node_name(original or "")
        if name in self.names_used:
            self.names_used[name] += 1
            return f"{name}_{self.names_used[name]}"
        self.names_used[name] = 0
        return name

    def build(self) -> Gltf:
        gltf = self.gltf
        if not gltf.scenes:
            raise ValueError("glTF document contains no scene")
        scene_index = gltf.scene if gltf.scene is not None else 0
        scene_def = gltf.scenes[scene_index]

        root = SceneNode(type="Group")
        if scene_def.name:
            root.name = self.unique_name(scene_def.name)
        if scene_def.extras:
            root.user_data.update(scene_def.extras)
        for node_index in scene_def.nodes or []:
            root.add(self._build_node(node_index))

        self._bind_skeletons()

        extras = gltf.asset.extras if gltf.asset is not None else None
        return Gltf(
            scene=root,
            animations=self._build_animations(),
            extras=dict(extras) if extras else None,
            uses_draco=uses_draco(gltf),
        )

    def _build_node(self, index: int) -> SceneNode:
        node_def = self.gltf.nodes[index]
        # Claimed before the mesh so primitives get the suffixed names
        name = self.unique_name(node_def.name) if node_def.name else ""

        objects: list[SceneNode] = []
        if node_def.mesh is not None:
            objects.append(self._build_mesh(node_def))
        if node_def.camera is not None:
            objects.append(self._build_camera(node_def.camera))
        light_index = _extension(node_def, LIGHTS_EXTENSION).get("light")
        if light_index is not None:
            objects.append(self._build_light(light_index))

        if len(objects) == 1:
            node = objects[0]
        elif objects:
            node = SceneNode(type="Group").add(*objects)
        elif index in self.joints:
            node = SceneNode(type="Bone")
        else:
            node = SceneNode(type="Object3D")

        if name:
            node.name = name
        if node_def.extras:
            node.user_data.update(node_def.extras)
        self._apply_transform(node, node_def)
        if node_def.skin is not None:
            self.pending_skins.append((node, node_def.skin))

        self.nodes[index] = node
        for child_index in node_def.children or []:
            node.add(self._build_node(child_index))
        return node

    def _apply_transform(self, node: SceneNode, node_def: Any) -> None:
        if node_def.matrix:
            position, rotation, scale = decompose_matrix(node_def.matrix)
            node.position, node.rotation, node.scale = position, rotation, scale
            return
        if node_def.translation:
            node.position = Vector3(*node_def.translation)
        if node_def.rotation:
            node.rotation = quaternion_to_euler(*node_def.rotation)
        if node_def.scale:
            node.scale = Vector3(*node_def.scale)

    def _build_mesh(self, node_def: Any) -> SceneNode:
        mesh_index = node_def.mesh
        mesh_def = self.gltf.meshes[mesh_index]
        skinned = node_def.skin is not None
        count = self._instance_count(node_def)

        meshes: list[SceneNode] = []
        for prim_index, primitive in enumerate(mesh_def.primitives):
            mode = primitive.mode if primitive.mode is not None else TRIANGLES
            mesh = SceneNode(
                name=self.unique_name(mesh_def.name or f"mesh_{mesh_index}"),
                type=_primitive_type(mode, skinned, count is not None),
                geometry=self._geometry(mesh_def, primitive),
                material=self._material(primitive.material, mode),
            )
            if mesh_def.extras:
                mesh.user_data.update(mesh_def.extras)
            if primitive.targets:
                self._apply_morph_targets(mesh, mesh_def, len(primitive.targets))
            if mesh.type == "InstancedMesh":
                mesh.count = count
            meshes.append(mesh)

        if len(meshes) == 1:
            return meshes[0]
        return SceneNode(type="Group").add(*meshes)

    def _apply_morph_targets(self, mesh: SceneNode, mesh_def: Any, count: int) -> None:
        weights = list(mesh_def.weights or [])
        mesh.morph_target_influences = (
            [float(w) for w in weights] if len(weights) == count else [0.0] * count
        )
        names = (mesh_def.extras or {}).get("targetNames")
        if isinstance(names, list) and len(names) == count:
            mesh.morph_target_dictionary = {str(n): i for i, n in enumerate(names)}
        else:
            mesh.morph_target_dictionary = {str(i): i for i in range(count)}

    def _geometry(self, mesh_def: Any, primitive: Any) -> Geometry:
        """Primitives with identical accessors share one geometry."""
        attributes = {
            key: value
            for key, value in vars(primitive.attributes).items()
            if value is not None
        }
        draco = _extension(primitive, DRACO_EXTENSION)
        key = repr((
            sorted(attributes.items()),
            primitive.indices,
            draco.get("bufferView"),
            repr(primitive.targets or []),
        ))
        geometry = self.geometries.get(key)
        if geometry is None:
            geometry = Geometry(
                uuid=f"geometry-{len(self.geometries)}", name=mesh_def.name or ""
            )
            self.geometries[key] = geometry
        return geometry

    def _material(self, index: int | None, mode: int) -> Material:
        if mode == POINTS:
            variant = "PointsMaterial"
        elif mode in (LINES, LINE_LOOP, LINE_STRIP):
            variant = "LineBasicMaterial"
        else:
            variant = None

        key = f"material-{'default' if index is None else index}"
        if variant:
            key = f"{key}-{variant}"
        material = self.materials.get(key)
        if material is not None:
            return material

        name = ""
        material_type = "MeshStandardMaterial"
        if index is not None:
            material_def = self.gltf.materials[index]
            name = material_def.name or ""
            extensions = material_def.extensions or {}
            if UNLIT_EXTENSION in extensions:
                material_type = "MeshBasicMaterial"
            elif PHYSICAL_EXTENSIONS.intersection(extensions):
                material_type = "MeshPhysicalMaterial"
        material = Material(uuid=key, name=name, type=variant or material_type)
        self.materials[key] = material
        return material

    def _build_camera(self, index: int) -> SceneNode:
        camera_def = self.gltf.cameras[index]
        if camera_def.type == "perspective" and camera_def.perspective is not None:
            params = camera_def.perspective
            camera = SceneNode(
                type="PerspectiveCamera",
                fov=math.degrees(params.yfov),
                near=params.znear or 1,
                far=params.zfar or 2e6,
                zoom=1,
            )
        elif camera_def.type == "orthographic" and camera_def.orthographic is not None:
            params = camera_def.orthographic
            camera = SceneNode(
                type="OrthographicCamera",
                near=params.znear,
                far=params.zfar,
                zoom=1,
            )
        else:
            raise ValueError(f"Unsupported camera type: {camera_def.type!r}")
        if camera_def.name:
            camera.name = self.unique_name(camera_def.name)
        return camera

    def _build_light(self, index: int) -> SceneNode:
        lights = _extension(self.gltf, LIGHTS_EXTENSION).get("lights", [])
        light_def = lights[index]
        light_type = light_def.get("type")
        color = linear_to_srgb_hex(light_def.get("color", [1.0, 1.0, 1.0]))
        intensity = light_def.get("intensity", 1.0)
        distance = light_def.get("range", 0.0)

        if light_type == "directional":
            light = SceneNode(type="DirectionalLight", color=color, intensity=intensity)
        elif light_type == "point":
            light = SceneNode(
                type="PointLight",
                color=color,
                intensity=intensity,
                distance=distance,
                decay=2,
            )
        elif light_type == "spot":
            spot = light_def.get("spot", {})
            inner = spot.get("innerConeAngle", 0.0)
            outer = spot.get("outerConeAngle", math.pi / 4)
            light = SceneNode(
                type="SpotLight",
                color=color,
                intensity=intensity,
                distance=distance,
                angle=outer,
                penumbra=1.0 - inner / outer if outer else 0.0,
                decay=2,
            )
        else:
            raise ValueError(f"Unexpected light type: {light_type!r}")

        light.name = self.unique_name(light_def.get("name") or f"light_{index}")
        return light

    def _instance_count(self, node_def: Any) -> int | None:
        attributes = _extension(node_def, INSTANCING_EXTENSION).get("attributes")
        if not attributes:
            return None
        accessor_index = next(iter(attributes.values()))
        return int(self.gltf.accessors[accessor_index].count)

    def _bind_skeletons(self) -> None:
        for node, skin_index in self.pending_skins:
            skin = self.gltf.skins[skin_index]
            bones = [self.nodes[j] for j in (skin.joints or []) if j in self.nodes]
            for target in node.traverse():
                if target.type == "SkinnedMesh":
                    target.skeleton = Skeleton(bones=bones)

    def _build_animations(self) -> list[AnimationClip]:
        clips: list[AnimationClip] = []
        for index, animation_def in enumerate(self.gltf.animations or []):
            clip = AnimationClip(name=animation_def.name or f"animation_{index}")
            for channel in animation_def.channels or []:
                target = self.nodes.get(channel.target.node)
                if target is not None and target not in clip.targets:
                    clip.targets.append(target)
            clips.append(clip)
        return clips


def _extension(owner: Any, name: str) -> dict[str, Any]:
    extensions = getattr(owner, "extensions", None) or {}
    return extensions.get(name) or {}


def _primitive_type(mode: int, skinned: bool, instanced: bool) -> str:
    if mode in (TRIANGLES, TRIANGLE_STRIP, TRIANGLE_FAN):
        if instanced:
            return "InstancedMesh"
        return "SkinnedMesh" if skinned else "Mesh"
    if mode == POINTS:
        return "Points"
    if mode == LINES:
        return "LineSegments"
    if mode == LINE_LOOP:
        return "LineLoop"
    if mode == LINE_STRIP:
        return "Line"
    raise ValueError(f"Unsupported primitive mode: {mode}")
