"""Node classification and per-conversion parse state."""

from dataclasses import dataclass, field

from notso_jsx.analyzers.duplicates import (
    DuplicateEntry,
    DuplicateIndex,
    analyze_duplicates,
    duplicate_key,
)
from notso_jsx.scene.model import NODE_TYPES, Gltf, SceneNode
from notso_jsx.utils.constants import JsxConfig
from notso_jsx.utils.naming import node_reference

# Element kinds that differ from the lower-camel-cased three.js type
KIND_OVERRIDES: dict[str, str] = {
    # object3D and group behave the same; group is the conventional element
    "object3D": "group",
    "perspectiveCamera": "PerspectiveCamera",
    "orthographicCamera": "OrthographicCamera",
}


class UnsupportedNodeError(ValueError):
    """The scene contains an object type the emitter cannot express."""


@dataclass
class ParseContext:
    """State shared by the analysis, pruning and emission of one scene."""

    config: JsxConfig
    duplicates: DuplicateIndex = field(default_factory=dict)
    animated: bool = False
    removed: set[SceneNode] = field(default_factory=set)

    @property
    def has_instances(self) -> bool:
        return self.config.instancing and bool(self.duplicates)

    def is_removed(self, node: SceneNode) -> bool:
        return node in self.removed


@dataclass(frozen=True)
class NodeInfo:
    type: str  # JSX element kind
    node: str  # nodes-table expression
    instanced: bool
    animated: bool
    duplicate: DuplicateEntry | None = None


def get_type(node: SceneNode) -> str:
    """JSX element kind for a node: 'Mesh' -> 'mesh', 'Object3D' -> 'group'."""
    if node.type not in NODE_TYPES:
        raise UnsupportedNodeError(
            f"Unsupported object type {node.type!r} (node {node.name!r})"
        )
    kind = node.type[0].lower() + node.type[1:]
    return KIND_OVERRIDES.get(kind, kind)


def get_info(node: SceneNode, ctx: ParseContext) -> NodeInfo:
    """Classify a node against the duplicate index and scene flags."""
    kind = get_type(node)
    duplicate = None
    instanced = False
    if ctx.config.instancing and node.type != "InstancedMesh":
        key = duplicate_key(node)
        duplicate = ctx.duplicates.get(key) if key is not None else None
        threshold = 0 if ctx.config.instanceall else 1
        instanced = duplicate is not None and duplicate.count > threshold
    return NodeInfo(
        type=kind,
        node=node_reference(node.name),
        instanced=instanced,
        animated=ctx.animated,
        duplicate=duplicate if instanced else None,
    )


def name_animation_targets(gltf: Gltf) -> list[SceneNode]:
    """
    Give unnamed animation targets a unique name.

    Animations bind tracks by node name, so a target must keep one. Returns
    the nodes that were renamed.
    """
    taken = {obj.name for obj in gltf.objects() if obj.name}
    renamed: list[SceneNode] = []
    for clip in gltf.animations:
        for target in clip.targets:
            if target.name:
                continue
            base = get_type(target)
            index = 0
            while f"{base}_{index}" in taken:
                index += 1
            target.name = f"{base}_{index}"
            taken.add(target.name)
            renamed.append(target)
    return renamed


def build_context(gltf: Gltf, config: JsxConfig) -> ParseContext:
    """Run the scene-wide analysis once, before pruning and emission."""
    name_animation_targets(gltf)
    return ParseContext(
        config=config,
        duplicates=analyze_duplicates(gltf.objects(), config.instanceall),
        animated=bool(gltf.animations),
    )
