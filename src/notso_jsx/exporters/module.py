"""Wrap emitted JSX in an importable React component module."""

import json
from collections.abc import Iterable
from typing import Any

from notso_jsx.analyzers.nodes import ParseContext
from notso_jsx.scene.model import Gltf, SceneNode
from notso_jsx.utils.naming import is_var_name

ATTRIBUTION = "Auto-generated by: notso-jsx"
GROUP_PROPS_TYPE = "JSX.IntrinsicElements['group']"


def resolve_url(file_name: str) -> str:
    """Public URL of the asset: served from the site root unless remote."""
    prefix = "" if file_name.lower().startswith("http") else "/"
    return prefix + file_name


def _quote(value: str) -> str:
    """Single-quoted JS string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _type_key(name: str) -> str:
    return name if is_var_name(name) else _quote(name)


def _comment_safe(text: str) -> str:
    return text.replace("*/", "* /")


def _extra_value(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def print_header(gltf: Gltf, ctx: ParseContext, version: str) -> str:
    """Block comment: attribution, free-form header, size report, asset extras."""
    config = ctx.config
    lines = [f"{ATTRIBUTION} {version}".rstrip()]
    if config.header:
        lines.append(config.header)
    if config.size:
        lines.append(f"Files: {config.size}")
    for key, value in (gltf.extras or {}).items():
        lines.append(f"{key}: {_extra_value(value)}")
    body = "\n".join(_comment_safe(line) for line in lines)
    return f"/*\n{body}\n*/\n"


def print_imports(scene: str, gltf: Gltf, ctx: ParseContext) -> str:
    """Imports for exactly the symbols the generated module uses."""
    config = ctx.config
    react = ["useRef"]
    if ctx.has_instances:
        react.append("useMemo")

    drei = ["useGLTF"]
    if ctx.has_instances:
        drei.append("Merged")
    for camera in ("PerspectiveCamera", "OrthographicCamera"):
        if f"<{camera}" in scene:
            drei.append(camera)
    if gltf.animations:
        drei.append("useAnimations")

    lines: list[str] = []
    if config.types:
        lines.append("import * as THREE from 'three'")
    lines.append(f"import React, {{ {', '.join(react)} }} from 'react'")
    lines.append(f"import {{ {', '.join(drei)} }} from '@react-three/drei'")
    if config.types:
        lines.append("import { GLTF } from 'three-stdlib'")
    return "\n".join(lines) + "\n"


def _typed_entries(items: Iterable[tuple[str, str]]) -> list[str]:
    seen: dict[str, str] = {}
    for name, type_name in items:
        if name and name not in seen:
            seen[name] = type_name
    return [f"    {_type_key(name)}: THREE.{t}" for name, t in seen.items()]


def print_types(gltf: Gltf, ctx: ParseContext) -> str:
    """GLTFResult (and GLTFActions) type declarations for TSX output."""
    objects = [o for o in gltf.objects() if not ctx.is_removed(o)]
    referenced: list[SceneNode] = [o for o in objects if o.geometry is not None]
    # Nested bones are reached through their root bone's primitive
    referenced += [
        o for o in objects if o.is_bone and not (o.parent and o.parent.is_bone)
    ]
    materials: dict[str, str] = {}
    for obj in objects:
        material = obj.material
        if material is not None and material.name and material.name not in materials:
            materials[material.name] = material.type

    node_lines = _typed_entries((o.name, o.type) for o in referenced)
    material_lines = _typed_entries(materials.items())
    result = (
        "\ntype GLTFResult = GLTF & {\n"
        "  nodes: {\n"
        + "".join(f"{line}\n" for line in node_lines)
        + "  }\n"
        "  materials: {\n"
        + "".join(f"{line}\n" for line in material_lines)
        + "  }\n"
        "}\n"
    )
    if gltf.animations:
        names = " | ".join(_quote(clip.name) for clip in gltf.animations)
        result += (
            f"\ntype ActionName = {names}\n"
            "type GLTFActions = Record<ActionName, THREE.AnimationAction>\n"
        )
    return result


def _use_gltf(url: str, ctx: ParseContext) -> str:
    args = [_quote(url)]
    if ctx.config.draco:
        args.append(json.dumps(ctx.config.draco))
    cast = " as GLTFResult" if ctx.config.types else ""
    return f"useGLTF({', '.join(args)}){cast}"


def print_instances(url: str, ctx: ParseContext) -> str:
    """Default export that builds the instances map and hands it to Model."""
    params = f"props: {GROUP_PROPS_TYPE}" if ctx.config.types else "props"
    entries = "".join(
        f"    {entry.name}: {entry.node},\n" for entry in ctx.duplicates.values()
    )
    return (
        f"\nexport default function InstancedModel({params}) {{\n"
        f"  const {{ nodes }} = {_use_gltf(url, ctx)}\n"
        "  const instances = useMemo(\n"
        "    () => ({\n"
        f"{entries}"
        "    }),\n"
        "    [nodes]\n"
        "  )\n"
        "  return (\n"
        "    <Merged meshes={instances} {...props}>\n"
        "      {(instances) => <Model instances={instances} />}\n"
        "    </Merged>\n"
        "  )\n"
        "}\n"
    )


def print_model(scene: str, url: str, gltf: Gltf, ctx: ParseContext) -> str:
    config = ctx.config
    animated = bool(gltf.animations)

    params = "{ instances, ...props }" if ctx.has_instances else "props"
    if config.types:
        props_type = GROUP_PROPS_TYPE
        if ctx.has_instances:
            props_type += " & { instances: Record<string, React.FC<any>> }"
        params += f": {props_type}"
    export = "" if ctx.has_instances else "export default "
    ref = "useRef<THREE.Group>(null)" if config.types else "useRef()"
    tables = "nodes, materials" + (", animations" if animated else "")

    body = (
        f"\n{export}function Model({params}) {{\n"
        f"  const group = {ref}\n"
        f"  const {{ {tables} }} = {_use_gltf(url, ctx)}\n"
    )
    if animated:
        generic = "<GLTFActions>" if config.types else ""
        body += f"  const {{ actions }} = useAnimations{generic}(animations, group)\n"
    body += (
        "  return (\n"
        "    <group ref={group} {...props} dispose={null}>\n"
        f"{scene}"
        "    </group>\n"
        "  )\n"
        "}\n"
    )
    return body


def assemble_module(
    file_name: str, gltf: Gltf, ctx: ParseContext, scene: str, version: str = ""
) -> str:
    """
    Full module text: header, imports, optional types, components, preload.

    ``scene`` is the emitted markup, already indented for the group body.
    """
    url = resolve_url(file_name)
    parts = [print_header(gltf, ctx, version), "\n", print_imports(scene, gltf, ctx)]
    if ctx.config.types:
        parts.append(print_types(gltf, ctx))
    if ctx.has_instances:
        parts.append(print_instances(url, ctx))
    parts.append(print_model(scene, url, gltf, ctx))
    parts.append(f"\nuseGLTF.preload({_quote(url)})\n")
    return "".join(parts)
