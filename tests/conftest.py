"""
Pytest fixtures for notso-jsx tests.

Scenes are built in memory from the model classes; no asset files needed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from notso_jsx.analyzers.nodes import ParseContext, build_context
from notso_jsx.scene.model import (
    AnimationClip,
    Geometry,
    Gltf,
    Material,
    SceneNode,
)
from notso_jsx.utils.constants import JsxConfig


@pytest.fixture
def geometry() -> Geometry:
    return Geometry(uuid="geometry-0", name="Cube")


@pytest.fixture
def material() -> Material:
    return Material(uuid="material-0", name="Paint")


@pytest.fixture
def make_mesh(
    geometry: Geometry, material: Material
) -> Callable[..., SceneNode]:
    """Factory for meshes sharing the default geometry and material."""

    def factory(name: str = "Cube", **fields: Any) -> SceneNode:
        fields.setdefault("geometry", geometry)
        fields.setdefault("material", material)
        fields.setdefault("type", "Mesh")
        return SceneNode(name=name, **fields)

    return factory


@pytest.fixture
def make_group() -> Callable[..., SceneNode]:
    """Factory for groups: make_group('Wrapper', child, rotation=Euler(...))."""

    def factory(name: str = "", *children: SceneNode, **fields: Any) -> SceneNode:
        group = SceneNode(name=name, type="Group", **fields)
        group.add(*children)
        return group

    return factory


@pytest.fixture
def make_gltf() -> Callable[..., Gltf]:
    """Factory wrapping nodes in a root group the way the loader does."""

    def factory(
        *children: SceneNode,
        animations: list[AnimationClip] | None = None,
        extras: dict[str, Any] | None = None,
    ) -> Gltf:
        root = SceneNode(name="Scene", type="Group")
        root.add(*children)
        return Gltf(scene=root, animations=animations or [], extras=extras)

    return factory


@pytest.fixture
def make_ctx() -> Callable[..., ParseContext]:
    """Factory for a parse context: make_ctx(gltf, aggressive=True)."""

    def factory(gltf: Gltf, **options: Any) -> ParseContext:
        return build_context(gltf, JsxConfig(**options))

    return factory
