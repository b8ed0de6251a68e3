"""Prune redundant wrapper groups from the scene graph."""

from collections.abc import Callable

from rich.markup import escape

from notso_jsx.analyzers.nodes import NodeInfo, ParseContext, get_info, get_type
from notso_jsx.exporters.props import (
    Prop,
    handle_props,
    has_transforms,
    only_transforms,
    prop_keys,
)
from notso_jsx.scene.model import SceneNode
from notso_jsx.utils.constants import GROUP_KINDS
from notso_jsx.utils.logging import log_debug
from notso_jsx.utils.numbers import round_number


class RewriteSkipped(Exception):
    """A rule matched structurally but cannot be applied to this node."""


# (node, info, props, surviving children, ctx) -> removal reason or None
PruneRule = Callable[
    [SceneNode, NodeInfo, list[Prop], list[SceneNode], ParseContext], str | None
]


def is_prunable(node: SceneNode, info: NodeInfo, ctx: ParseContext) -> bool:
    """Only plain groups may go; animation tracks bind to names and hierarchy."""
    if ctx.animated or ctx.config.keepgroups:
        return False
    if node.morph_target_dictionary:
        return False
    return info.type in GROUP_KINDS


def surviving_children(node: SceneNode, ctx: ParseContext) -> list[SceneNode]:
    """Children as they will be rendered, looking through removed nodes."""
    result: list[SceneNode] = []
    for child in node.children:
        if ctx.is_removed(child):
            result.extend(surviving_children(child, ctx))
        else:
            result.append(child)
    return result


def _rotations_cancel(a: SceneNode, b: SceneNode, precision: int) -> bool:
    return all(
        round_number(x, precision) == -round_number(y, precision)
        for x, y in zip(a.rotation.to_tuple(), b.rotation.to_tuple())
    )


def remove_empty(
    node: SceneNode,
    info: NodeInfo,
    props: list[Prop],
    children: list[SceneNode],
    ctx: ParseContext,
) -> str | None:
    """
    <group>
      <mesh geometry={nodes.foo.geometry} material={materials.bar} />
    """
    if props and children:
        return None
    ctx.removed.add(node)
    return "empty"


def remove_double_negative(
    node: SceneNode,
    info: NodeInfo,
    props: list[Prop],
    children: list[SceneNode],
    ctx: ParseContext,
) -> str | None:
    """
    <group rotation={[-Math.PI / 2, 0, 0]}>
      <group rotation={[Math.PI / 2, 0, 0]}>
        <mesh geometry={nodes.foo.geometry} material={materials.bar} />
    """
    if len(children) != 1 or prop_keys(props) != ["rotation"]:
        return None
    child = children[0]
    child_info = get_info(child, ctx)
    if child_info.type != info.type:
        return None
    if not _rotations_cancel(node, child, ctx.config.precision):
        return None

    child_keys = prop_keys(handle_props(child, child_info, ctx))
    if child_keys == ["rotation"]:
        ctx.removed.update((node, child))
        return "double negative rotation"
    if "rotation" in child_keys:
        # Child keeps its other props, only the cancelled rotation goes
        child.rotation.set(0.0, 0.0, 0.0)
        ctx.removed.add(node)
        return "double negative rotation, child props kept"
    return None


def remove_transform_overlap(
    node: SceneNode,
    info: NodeInfo,
    props: list[Prop],
    children: list[SceneNode],
    ctx: ParseContext,
) -> str | None:
    """
    <group position={[10, 0, 0]} scale={2} rotation={[-Math.PI / 2, 0, 0]}>
      <mesh geometry={nodes.foo.geometry} material={materials.bar} />
    """
    if len(children) != 1 or not only_transforms(props):
        return None
    child = children[0]
    child_info = get_info(child, ctx)
    if has_transforms(handle_props(child, child_info, ctx)):
        return None
    if child_info.type == "bone":
        raise RewriteSkipped(
            f"bone {child.name!r} is rendered as a primitive and cannot inherit a transform"
        )

    child.position.copy(node.position)
    child.rotation.copy(node.rotation)
    child.scale.copy(node.scale)
    ctx.removed.add(node)
    return f"{' '.join(prop_keys(props))} overlap"


def remove_lack_of_content(
    node: SceneNode,
    info: NodeInfo,
    props: list[Prop],
    children: list[SceneNode],
    ctx: ParseContext,
) -> str | None:
    """
    <group position={[10, 0, 0]}>
      <group scale={2}>
        <group rotation={[-Math.PI / 2, 0, 0]} />
    """
    subtree = list(node.traverse())
    if any(get_type(obj) not in GROUP_KINDS for obj in subtree):
        return None
    ctx.removed.update(subtree)
    return "lack of content"


BASIC_RULES: tuple[PruneRule, ...] = (remove_empty,)
# Pairs of cancelling rotations are matched before the inner group is rewritten
TOP_DOWN_RULES: tuple[PruneRule, ...] = (remove_double_negative,)
AGGRESSIVE_RULES: tuple[PruneRule, ...] = (
    remove_transform_overlap,
    remove_lack_of_content,
)


def _apply_rules(
    node: SceneNode,
    info: NodeInfo,
    rules: tuple[PruneRule, ...],
    ctx: ParseContext,
) -> bool:
    """Try rules in order until one removes the node."""
    props = handle_props(node, info, ctx)
    children = surviving_children(node, ctx)
    for rule in rules:
        try:
            reason = rule(node, info, props, children, ctx)
        except RewriteSkipped as e:
            if ctx.config.debug:
                log_debug(f"{rule.__name__} skipped: {escape(str(e))}")
            continue
        if reason is not None:
            if ctx.config.debug:
                log_debug(f"{info.type} {escape(node.name)} removed ({reason})")
            return True
    return False


def _prune_node(node: SceneNode, ctx: ParseContext) -> None:
    if ctx.is_removed(node):
        # Only the root stays attached once removed; keep walking below it
        for child in list(node.children):
            _prune_node(child, ctx)
        return
    info = get_info(node, ctx)
    # Bones mount their whole subtree through <primitive>
    if info.type == "bone":
        return

    prunable = is_prunable(node, info, ctx)
    if prunable and ctx.config.aggressive:
        if _apply_rules(node, info, TOP_DOWN_RULES, ctx):
            _prune_node(node, ctx)
            return

    # Children first: a group's fate depends on what survives below it
    for child in list(node.children):
        _prune_node(child, ctx)

    if not prunable:
        return
    rules = BASIC_RULES + (AGGRESSIVE_RULES if ctx.config.aggressive else ())
    _apply_rules(node, info, rules, ctx)


def prune_groups(root: SceneNode, ctx: ParseContext) -> int:
    """
    Dry-run pass: mark removable groups in ``ctx.removed``.

    Only transforms of surviving nodes are touched; the tree shape is left
    alone until reparent_removed(). A removal can expose another one higher
    up (a sibling goes, leaving a lone cancelling child), so the walk repeats
    until nothing new is marked. Returns the number of nodes marked.
    """
    before = len(ctx.removed)
    while True:
        marked = len(ctx.removed)
        _prune_node(root, ctx)
        if len(ctx.removed) == marked:
            break
    return len(ctx.removed) - before


def _lift_children(removed: SceneNode, ctx: ParseContext) -> list[SceneNode]:
    """Detach a removed node's surviving descendants, in sibling order."""
    lifted: list[SceneNode] = []
    for child in removed.children:
        if ctx.is_removed(child):
            lifted.extend(_lift_children(child, ctx))
        else:
            lifted.append(child)
    removed.children = []
    removed.parent = None
    return lifted


def reparent_removed(node: SceneNode, ctx: ParseContext) -> None:
    """
    Move children of removed nodes to their nearest surviving ancestor.

    Lifted children take the removed node's slot among its siblings. The
    root is the anchor of last resort and keeps its children even when it
    is marked removed itself.
    """
    if node.is_bone:
        return
    children: list[SceneNode] = []
    for child in node.children:
        if ctx.is_removed(child):
            children.extend(_lift_children(child, ctx))
        else:
            children.append(child)
    for child in children:
        child.parent = node
    node.children = children
    for child in children:
        reparent_removed(child, ctx)


def prune(root: SceneNode, ctx: ParseContext) -> int:
    """Mark removals, then reparent orphans. Returns the number removed."""
    removed = prune_groups(root, ctx)
    reparent_removed(root, ctx)
    return removed
