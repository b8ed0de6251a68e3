"""Shared helpers for naming, numbers and configuration."""

from notso_jsx.utils.constants import DEFAULT_CONFIG, JsxConfig
from notso_jsx.utils.naming import (
    component_name,
    instance_base_name,
    is_var_name,
    material_reference,
    node_reference,
    property_accessor,
    sanitize_node_name,
)
from notso_jsx.utils.numbers import (
    format_angle,
    format_number,
    format_rounded,
    round_number,
    vector_length,
)

__all__ = [
    "DEFAULT_CONFIG",
    "JsxConfig",
    "component_name",
    "format_angle",
    "format_number",
    "format_rounded",
    "instance_base_name",
    "is_var_name",
    "material_reference",
    "node_reference",
    "property_accessor",
    "round_number",
    "sanitize_node_name",
    "vector_length",
]
