"""Tests for node classification and parse context."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from notso_jsx.analyzers.nodes import ParseContext
from notso_jsx.scene.model import AnimationClip, Gltf, SceneNode


class TestGetType:
    """Tests for get_type function."""

    @pytest.mark.parametrize(
        ("three_type", "kind"),
        [
            ("Mesh", "mesh"),
            ("SkinnedMesh", "skinnedMesh"),
            ("Object3D", "group"),
            ("Group", "group"),
            ("Bone", "bone"),
            ("PointLight", "pointLight"),
            ("PerspectiveCamera", "PerspectiveCamera"),
            ("OrthographicCamera", "OrthographicCamera"),
        ],
    )
    def test_kinds(self, three_type: str, kind: str) -> None:
        from notso_jsx.analyzers.nodes import get_type

        assert get_type(SceneNode(type=three_type)) == kind

    def test_unknown_type_raises(self) -> None:
        """Unsupported object types are fatal."""
        from notso_jsx.analyzers.nodes import UnsupportedNodeError, get_type

        with pytest.raises(UnsupportedNodeError, match="Sprite"):
            get_type(SceneNode(name="Label", type="Sprite"))

    def test_unsupported_is_value_error(self) -> None:
        from notso_jsx.analyzers.nodes import UnsupportedNodeError

        assert issubclass(UnsupportedNodeError, ValueError)


class TestGetInfo:
    """Tests for get_info function."""

    def test_plain_mesh(
        self,
        make_mesh: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.analyzers.nodes import get_info

        mesh = make_mesh("Cube")
        ctx = make_ctx(make_gltf(mesh))

        info = get_info(mesh, ctx)

        assert info.type == "mesh"
        assert info.node == "nodes.Cube"
        assert info.instanced is False
        assert info.duplicate is None

    def test_instanced_when_shared(
        self,
        make_mesh: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.analyzers.nodes import get_info

        a, b = make_mesh("A"), make_mesh("B")
        ctx = make_ctx(make_gltf(a, b), instance=True)

        info = get_info(b, ctx)

        assert info.instanced is True
        assert info.duplicate is not None
        assert info.duplicate.node == "nodes.A"

    def test_not_instanced_without_flag(
        self,
        make_mesh: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.analyzers.nodes import get_info

        a, b = make_mesh("A"), make_mesh("B")
        ctx = make_ctx(make_gltf(a, b))

        assert get_info(a, ctx).instanced is False
        assert ctx.duplicates

    def test_instanceall_instances_single_use(
        self,
        make_mesh: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.analyzers.nodes import get_info

        solo = make_mesh("Solo")
        ctx = make_ctx(make_gltf(solo), instanceall=True)

        assert get_info(solo, ctx).instanced is True

    def test_animated_flag(
        self,
        make_mesh: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.analyzers.nodes import get_info

        mesh = make_mesh("Cube")
        ctx = make_ctx(make_gltf(mesh, animations=[AnimationClip("Spin", [mesh])]))

        assert ctx.animated is True
        assert get_info(mesh, ctx).animated is True


class TestNameAnimationTargets:
    """Tests for name_animation_targets function."""

    def test_unnamed_targets_get_unique_names(
        self, make_gltf: Callable[..., Gltf]
    ) -> None:
        from notso_jsx.analyzers.nodes import name_animation_targets

        taken = SceneNode(name="group_0", type="Group")
        first = SceneNode(type="Group")
        second = SceneNode(type="Group")
        gltf = make_gltf(
            taken, first, second, animations=[AnimationClip("Move", [first, second])]
        )

        renamed = name_animation_targets(gltf)

        assert renamed == [first, second]
        assert first.name == "group_1"
        assert second.name == "group_2"

    def test_named_targets_untouched(
        self, make_mesh: Callable[..., SceneNode], make_gltf: Callable[..., Gltf]
    ) -> None:
        from notso_jsx.analyzers.nodes import name_animation_targets

        mesh = make_mesh("Door")
        gltf = make_gltf(mesh, animations=[AnimationClip("Open", [mesh])])

        assert name_animation_targets(gltf) == []
        assert mesh.name == "Door"
