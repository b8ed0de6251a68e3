"""Tests for the scene graph model."""

from __future__ import annotations


class TestSceneNode:
    """Tests for SceneNode tree operations."""

    def test_add_sets_parent(self) -> None:
        from notso_jsx.scene.model import SceneNode

        parent = SceneNode(name="Parent", type="Group")
        child = SceneNode(name="Child")

        parent.add(child)

        assert child.parent is parent
        assert parent.children == [child]

    def test_add_detaches_from_previous_parent(self) -> None:
        """Adding a node elsewhere removes it from its old parent."""
        from notso_jsx.scene.model import SceneNode

        a = SceneNode(name="A", type="Group")
        b = SceneNode(name="B", type="Group")
        child = SceneNode(name="Child")
        a.add(child)

        b.add(child)

        assert a.children == []
        assert b.children == [child]
        assert child.parent is b

    def test_traverse_is_pre_order(self) -> None:
        from notso_jsx.scene.model import SceneNode

        root = SceneNode(name="Root", type="Group")
        left = SceneNode(name="Left", type="Group")
        leaf = SceneNode(name="Leaf")
        right = SceneNode(name="Right")
        root.add(left.add(leaf), right)

        assert [n.name for n in root.traverse()] == ["Root", "Left", "Leaf", "Right"]

    def test_identity_equality(self) -> None:
        """Nodes with equal fields are still distinct."""
        from notso_jsx.scene.model import SceneNode

        assert SceneNode(name="Same") != SceneNode(name="Same")

    def test_kind_properties(self) -> None:
        from notso_jsx.scene.model import SceneNode

        assert SceneNode(type="SkinnedMesh").is_mesh
        assert SceneNode(type="Bone").is_bone
        assert SceneNode(type="OrthographicCamera").is_camera
        assert SceneNode(type="SpotLight").is_light
        assert not SceneNode(type="Group").is_mesh


class TestVector3:
    """Tests for Vector3 helpers."""

    def test_copy_and_length(self) -> None:
        from notso_jsx.scene.model import Euler, Vector3

        v = Vector3()
        v.copy(Euler(3.0, 4.0, 0.0))

        assert v.to_tuple() == (3.0, 4.0, 0.0)
        assert v.length() == 5.0


class TestGltf:
    """Tests for the Gltf container."""

    def test_objects_includes_root(self) -> None:
        from notso_jsx.scene.model import Gltf, SceneNode

        root = SceneNode(name="Scene", type="Group")
        root.add(SceneNode(name="Cube", type="Mesh"))

        assert [o.name for o in Gltf(scene=root).objects()] == ["Scene", "Cube"]
