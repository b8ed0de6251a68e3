"""Scene graph model and glTF loading."""

from notso_jsx.scene.loader import build_scene, load_gltf
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

__all__ = [
    "AnimationClip",
    "Euler",
    "Geometry",
    "Gltf",
    "Material",
    "SceneNode",
    "Skeleton",
    "Vector3",
    "build_scene",
    "load_gltf",
]
