"""Serialize a node's visual state into an ordered JSX attribute list."""

import json
import math
from collections.abc import Iterable
from typing import NamedTuple

from notso_jsx.analyzers.nodes import NodeInfo, ParseContext
from notso_jsx.scene.model import SceneNode
from notso_jsx.utils.constants import (
    CAMERA_DEFAULTS,
    DEFAULT_UP,
    LIGHT_DEFAULTS,
    TRANSFORM_KEYS,
)
from notso_jsx.utils.naming import material_reference
from notso_jsx.utils.numbers import format_angle, format_number, round_number


class Prop(NamedTuple):
    """
    One JSX attribute.

    ``value`` is the rendered right-hand side including braces or quotes
    (``{[0, 1, 0]}``, ``"#ff0000"``); None renders a bare boolean attribute.
    """

    key: str
    value: str | None = None

    def render(self) -> str:
        if self.value is None:
            return self.key
        return f"{self.key}={self.value}"


def expression(source: str) -> str:
    return "{" + source + "}"


def string_attribute(value: str) -> str:
    """Quoted attribute value, falling back to a JS string expression."""
    if '"' in value or "\\" in value or "\n" in value:
        return expression(json.dumps(value))
    return f'"{value}"'


def prop_keys(props: Iterable[Prop]) -> list[str]:
    return [prop.key for prop in props]


def only_transforms(props: list[Prop]) -> bool:
    """True for a non-empty list made of position/rotation/scale only."""
    return bool(props) and all(p.key in TRANSFORM_KEYS for p in props)


def has_transforms(props: Iterable[Prop]) -> bool:
    return any(p.key in TRANSFORM_KEYS for p in props)


def _number(value: float, precision: int) -> str:
    return expression(format_number(round_number(value, precision)))


def _vector(values: Iterable[float], precision: int) -> str:
    items = ", ".join(format_number(round_number(v, precision)) for v in values)
    return expression(f"[{items}]")


def _differs(value: float | None, default: float, precision: int) -> bool:
    if value is None:
        return False
    return round_number(value, precision) != round_number(default, precision)


def _camera_props(node: SceneNode, kind: str, precision: int) -> list[Prop]:
    props = [Prop("makeDefault", "{false}")]
    for key in ("zoom", "far", "near"):
        value = getattr(node, key)
        if _differs(value, CAMERA_DEFAULTS[key], precision):
            props.append(Prop(key, _number(value, precision)))
    if kind == "PerspectiveCamera" and _differs(
        node.fov, CAMERA_DEFAULTS["fov"], precision
    ):
        props.append(Prop("fov", _number(node.fov, precision)))
    return props


def _light_props(node: SceneNode, precision: int) -> list[Prop]:
    props: list[Prop] = []
    if node.intensity is not None and round_number(node.intensity, precision):
        props.append(Prop("intensity", _number(node.intensity, precision)))
    if node.angle and _differs(node.angle, LIGHT_DEFAULTS["angle"], precision):
        props.append(Prop("angle", expression(format_angle(node.angle, precision))))
    for key in ("penumbra", "decay", "distance"):
        value = getattr(node, key)
        if _differs(value, LIGHT_DEFAULTS[key], precision):
            props.append(Prop(key, _number(value, precision)))
    return props


def _source_props(node: SceneNode, info: NodeInfo, emitted: set[str]) -> list[Prop]:
    """References into the loaded nodes/materials tables."""
    props: list[Prop] = []
    # InstancedMesh passes geometry and material through args instead
    if node.type != "InstancedMesh":
        if node.geometry is not None:
            props.append(Prop("geometry", expression(f"{info.node}.geometry")))
        if node.material is not None:
            if node.material.name:
                source = material_reference(node.material.name)
            else:
                source = f"{info.node}.material"
            props.append(Prop("material", expression(source)))
    if node.skeleton is not None:
        props.append(Prop("skeleton", expression(f"{info.node}.skeleton")))
    if node.visible is False:
        props.append(Prop("visible", "{false}"))
    if node.cast_shadow and "castShadow" not in emitted:
        props.append(Prop("castShadow"))
    if node.receive_shadow and "receiveShadow" not in emitted:
        props.append(Prop("receiveShadow"))
    if node.morph_target_dictionary:
        props.append(
            Prop("morphTargetDictionary", expression(f"{info.node}.morphTargetDictionary"))
        )
    if node.morph_target_influences:
        props.append(
            Prop("morphTargetInfluences", expression(f"{info.node}.morphTargetInfluences"))
        )
    return props


def _transform_props(node: SceneNode, precision: int) -> list[Prop]:
    props: list[Prop] = []

    position = node.position.to_tuple()
    if round_number(math.sqrt(sum(v * v for v in position)), precision):
        props.append(Prop("position", _vector(position, precision)))

    rotation = node.rotation.to_tuple()
    if round_number(math.sqrt(sum(v * v for v in rotation)), precision):
        angles = ", ".join(format_angle(v, precision) for v in rotation)
        props.append(Prop("rotation", expression(f"[{angles}]")))

    scale = [round_number(v, precision) for v in node.scale.to_tuple()]
    if scale != [1, 1, 1]:
        if scale[0] == scale[1] == scale[2]:
            props.append(Prop("scale", expression(format_number(scale[0]))))
        else:
            props.append(Prop("scale", _vector(scale, precision)))
    return props


def handle_props(node: SceneNode, info: NodeInfo, ctx: ParseContext) -> list[Prop]:
    """
    Ordered attribute list that reconstructs a node's visual state.

    Instanced nodes skip everything the instance already carries (geometry,
    material, skeleton, flags, light settings). The order is fixed so that
    output is reproducible.
    """
    config = ctx.config
    precision = config.precision
    props: list[Prop] = []

    if info.type in ("PerspectiveCamera", "OrthographicCamera"):
        props.extend(_camera_props(node, info.type, precision))

    # Blanket policy, independent of the node's own flags
    if config.shadows and info.type == "mesh":
        props.extend([Prop("castShadow"), Prop("receiveShadow")])

    if not info.instanced:
        props.extend(_source_props(node, info, set(prop_keys(props))))
        props.extend(_light_props(node, precision))
        up = [round_number(v, precision) for v in node.up.to_tuple()]
        if up != list(DEFAULT_UP):
            props.append(Prop("up", _vector(up, precision)))

    if node.color and node.color.lower() != "ffffff":
        props.append(Prop("color", f'"#{node.color.lower()}"'))

    props.extend(_transform_props(node, precision))

    if config.meta and node.user_data:
        props.append(
            Prop("userData", expression(json.dumps(node.user_data, separators=(",", ":"))))
        )

    return props
