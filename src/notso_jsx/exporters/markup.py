"""Render the pruned scene graph as nested JSX elements."""

from notso_jsx.analyzers.nodes import NodeInfo, ParseContext, get_info
from notso_jsx.exporters.props import expression, handle_props, string_attribute
from notso_jsx.scene.model import SceneNode
from notso_jsx.utils.naming import material_reference

INDENT = "  "


def get_tag(node: SceneNode, info: NodeInfo) -> str:
    """Element name: the instance component, instancedMesh, or the kind."""
    if info.instanced and info.duplicate is not None:
        return f"instances.{info.duplicate.name}"
    if node.type == "InstancedMesh":
        return "instancedMesh"
    return info.type


def _instanced_mesh_args(node: SceneNode, info: NodeInfo) -> list[str]:
    """<instancedMesh args={[geometry, material, count]} ...>"""
    if node.material is not None and node.material.name:
        material = material_reference(node.material.name)
    else:
        material = f"{info.node}.material"
    args = f"[{info.node}.geometry, {material}, {node.count or 0}]"
    return [
        f"args={expression(args)}",
        f"instanceMatrix={expression(f'{info.node}.instanceMatrix')}",
    ]


def _keeps_name(node: SceneNode, info: NodeInfo, ctx: ParseContext) -> bool:
    if not node.name:
        return False
    return bool(
        ctx.config.keepnames or node.morph_target_dictionary or info.animated
    )


def print_node(node: SceneNode, ctx: ParseContext, depth: int = 0) -> str:
    """
    Render a node and its children, one element per line.

    Removed nodes render their children in their place, bones render as an
    opaque <primitive> handle without descending (the primitive mounts the
    bone's own subtree at runtime).
    """
    if ctx.is_removed(node):
        return "".join(print_node(child, ctx, depth) for child in node.children)

    info = get_info(node, ctx)
    pad = INDENT * depth

    if info.type == "bone":
        return f"{pad}<primitive object={expression(info.node)} />\n"

    children = "".join(print_node(child, ctx, depth + 1) for child in node.children)

    tag = get_tag(node, info)
    attributes: list[str] = []
    if node.type == "InstancedMesh" and not info.instanced:
        attributes.extend(_instanced_mesh_args(node, info))
    if _keeps_name(node, info, ctx):
        attributes.append(f"name={string_attribute(node.name)}")
    attributes.extend(prop.render() for prop in handle_props(node, info, ctx))

    opening = " ".join([f"<{tag}", *attributes])
    if not children:
        return f"{pad}{opening} />\n"
    return f"{pad}{opening}>\n{children}{pad}</{tag}>\n"
