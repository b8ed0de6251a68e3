"""Tests for group pruning and reparenting."""

from __future__ import annotations

import math
from collections.abc import Callable

from notso_jsx.analyzers.nodes import ParseContext
from notso_jsx.scene.model import AnimationClip, Euler, Gltf, SceneNode, Vector3

HALF_PI = math.pi / 2


class TestRemoveEmpty:
    """Tests for the always-on empty group rule."""

    def test_wrapper_without_props_is_removed(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """A prop-less wrapper disappears and its child moves up."""
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube")
        wrapper = make_group("Wrapper", mesh)
        gltf = make_gltf(wrapper)
        ctx = make_ctx(gltf)

        prune(gltf.scene, ctx)

        assert wrapper in ctx.removed
        assert gltf.scene.children == [mesh]
        assert mesh.parent is gltf.scene

    def test_childless_group_with_props_is_removed(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        lonely = make_group("Lonely", position=Vector3(1.0, 0.0, 0.0))
        mesh = make_mesh("Cube")
        gltf = make_gltf(lonely, mesh)
        ctx = make_ctx(gltf)

        prune(gltf.scene, ctx)

        assert gltf.scene.children == [mesh]

    def test_group_with_props_and_children_survives(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        group = make_group("Offset", make_mesh("Cube"), position=Vector3(1.0, 0.0, 0.0))
        gltf = make_gltf(group)
        ctx = make_ctx(gltf)

        prune(gltf.scene, ctx)

        assert group not in ctx.removed
        assert gltf.scene.children == [group]

    def test_reparenting_preserves_sibling_order(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """Lifted children take the removed node's slot."""
        from notso_jsx.cleaners import prune

        a, b, c, d = (make_mesh(name) for name in "ABCD")
        inner = make_group("Inner", c)
        wrapper = make_group("Wrapper", b, inner)
        gltf = make_gltf(a, wrapper, d)
        ctx = make_ctx(gltf)

        removed = prune(gltf.scene, ctx)

        assert removed >= 2
        assert gltf.scene.children == [a, b, c, d]
        assert all(child.parent is gltf.scene for child in gltf.scene.children)
        assert wrapper.parent is None

    def test_idempotent(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """A second pass over the same context removes nothing."""
        from notso_jsx.cleaners import prune_groups

        gltf = make_gltf(make_group("Wrapper", make_group("Inner", make_mesh("Cube"))))
        ctx = make_ctx(gltf)

        first = prune_groups(gltf.scene, ctx)
        second = prune_groups(gltf.scene, ctx)

        assert first > 0
        assert second == 0

    def test_idempotent_after_sibling_removal(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """An empty sibling going away lets the cancelling pair collapse in one pass."""
        from notso_jsx.cleaners import prune

        first_mesh = make_mesh("A1", position=Vector3(1.0, 0.0, 0.0))
        second_mesh = make_mesh("A2", position=Vector3(2.0, 0.0, 0.0))
        inner = make_group(
            "B", first_mesh, second_mesh, rotation=Euler(HALF_PI, 0.0, 0.0)
        )
        empty = make_group("E")
        outer = make_group("A", inner, empty, rotation=Euler(-HALF_PI, 0.0, 0.0))
        gltf = make_gltf(outer)
        ctx = make_ctx(gltf, aggressive=True)

        first = prune(gltf.scene, ctx)
        second = prune(gltf.scene, ctx)

        assert {outer, inner, empty} <= ctx.removed
        assert first > 0
        assert second == 0
        assert gltf.scene.children == [first_mesh, second_mesh]
        assert first_mesh.position.to_tuple() == (1.0, 0.0, 0.0)
        assert first_mesh.rotation.to_tuple() == (0.0, 0.0, 0.0)


class TestPruneGuards:
    """Tests for conditions that block pruning."""

    def test_keepgroups(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        wrapper = make_group("Wrapper", make_mesh("Cube"))
        gltf = make_gltf(wrapper)
        ctx = make_ctx(gltf, keepgroups=True)

        assert prune(gltf.scene, ctx) == 0
        assert gltf.scene.children == [wrapper]

    def test_animated_scene(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """Animation tracks bind by name and hierarchy, nothing is pruned."""
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube")
        wrapper = make_group("", mesh)
        gltf = make_gltf(wrapper, animations=[AnimationClip("Spin", [wrapper])])
        ctx = make_ctx(gltf)

        assert prune(gltf.scene, ctx) == 0
        assert wrapper.name == "group_0"
        assert gltf.scene.children == [wrapper]


class TestAggressiveRules:
    """Tests for aggressive pruning."""

    def test_double_negative_collapses_to_bare_mesh(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """group(-pi/2) > group(pi/2) > mesh leaves the mesh unrotated."""
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube")
        inner = make_group("Inner", mesh, rotation=Euler(HALF_PI, 0.0, 0.0))
        outer = make_group("Outer", inner, rotation=Euler(-HALF_PI, 0.0, 0.0))
        gltf = make_gltf(outer)
        ctx = make_ctx(gltf, aggressive=True)

        prune(gltf.scene, ctx)

        assert {outer, inner} <= ctx.removed
        assert gltf.scene.children == [mesh]
        assert mesh.rotation.to_tuple() == (0.0, 0.0, 0.0)

    def test_double_negative_needs_aggressive(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        inner = make_group("Inner", make_mesh("Cube"), rotation=Euler(HALF_PI, 0.0, 0.0))
        outer = make_group("Outer", inner, rotation=Euler(-HALF_PI, 0.0, 0.0))
        gltf = make_gltf(outer)
        ctx = make_ctx(gltf)

        prune(gltf.scene, ctx)

        assert gltf.scene.children == [outer]
        assert outer.children == [inner]

    def test_double_negative_keeps_child_props(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """The child's other props survive while its rotation is zeroed."""
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube")
        inner = make_group(
            "Inner",
            mesh,
            rotation=Euler(HALF_PI, 0.0, 0.0),
            position=Vector3(0.0, 2.0, 0.0),
        )
        outer = make_group("Outer", inner, rotation=Euler(-HALF_PI, 0.0, 0.0))
        gltf = make_gltf(outer)
        ctx = make_ctx(gltf, aggressive=True)

        prune(gltf.scene, ctx)

        assert outer in ctx.removed
        assert inner.rotation.to_tuple() == (0.0, 0.0, 0.0)
        # The transform-only inner group then hands its position to the mesh
        assert gltf.scene.children == [mesh]
        assert mesh.position.to_tuple() == (0.0, 2.0, 0.0)
        assert mesh.rotation.to_tuple() == (0.0, 0.0, 0.0)

    def test_transform_overlap_moves_transform_to_child(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube")
        group = make_group(
            "Mover",
            mesh,
            position=Vector3(10.0, 0.0, 0.0),
            scale=Vector3(2.0, 2.0, 2.0),
        )
        gltf = make_gltf(group)
        ctx = make_ctx(gltf, aggressive=True)

        prune(gltf.scene, ctx)

        assert gltf.scene.children == [mesh]
        assert mesh.position.to_tuple() == (10.0, 0.0, 0.0)
        assert mesh.scale.to_tuple() == (2.0, 2.0, 2.0)

    def test_transform_overlap_skipped_for_transformed_child(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import prune

        mesh = make_mesh("Cube", position=Vector3(0.0, 1.0, 0.0))
        group = make_group("Mover", mesh, position=Vector3(10.0, 0.0, 0.0))
        gltf = make_gltf(group)
        ctx = make_ctx(gltf, aggressive=True)

        prune(gltf.scene, ctx)

        assert gltf.scene.children == [group]
        assert mesh.position.to_tuple() == (0.0, 1.0, 0.0)

    def test_transform_overlap_skipped_for_bone(
        self,
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """Bones cannot inherit a transform; the group stays."""
        from notso_jsx.cleaners import prune

        bone = SceneNode(name="Hips", type="Bone")
        armature = make_group("Armature", bone, rotation=Euler(HALF_PI, 0.0, 0.0))
        gltf = make_gltf(armature)
        ctx = make_ctx(gltf, aggressive=True, debug=True)

        prune(gltf.scene, ctx)

        assert armature not in ctx.removed
        assert bone.rotation.to_tuple() == (0.0, 0.0, 0.0)

    def test_lack_of_content(
        self,
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        """A subtree made only of groups is dropped as a whole."""
        from notso_jsx.analyzers.nodes import get_info
        from notso_jsx.cleaners.groups import remove_lack_of_content
        from notso_jsx.exporters.props import handle_props

        leaf = make_group("Leaf", rotation=Euler(HALF_PI, 0.0, 0.0))
        middle = make_group("Middle", leaf, scale=Vector3(2.0, 2.0, 2.0))
        top = make_group("Top", middle, position=Vector3(1.0, 0.0, 0.0))
        ctx = make_ctx(make_gltf(top), aggressive=True)
        info = get_info(top, ctx)

        reason = remove_lack_of_content(
            top, info, handle_props(top, info, ctx), [middle], ctx
        )

        assert reason == "lack of content"
        assert {top, middle, leaf} <= ctx.removed


class TestSurvivingChildren:
    """Tests for surviving_children function."""

    def test_looks_through_removed(
        self,
        make_mesh: Callable[..., SceneNode],
        make_group: Callable[..., SceneNode],
        make_gltf: Callable[..., Gltf],
        make_ctx: Callable[..., ParseContext],
    ) -> None:
        from notso_jsx.cleaners import surviving_children

        mesh = make_mesh("Cube")
        removed = make_group("Gone", mesh)
        parent = make_group("Parent", removed)
        ctx = make_ctx(make_gltf(parent))
        ctx.removed.add(removed)

        assert surviving_children(parent, ctx) == [mesh]
