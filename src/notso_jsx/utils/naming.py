"""Naming and string utility functions."""

import re

# ES2015 reserved words plus literals that cannot be used as identifiers
JS_RESERVED: frozenset[str] = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const",
    "continue", "debugger", "default", "delete", "do", "else", "enum", "eval",
    "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new",
    "null", "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "undefined",
    "var", "void", "while", "with", "yield",
})  # fmt: skip

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Characters three.js PropertyBinding strips from node names
_RESERVED_NODE_CHARS_RE = re.compile(r"[\[\]\.:/]")


def is_var_name(name: str) -> bool:
    """True if ``name`` can be used as a bare JS property/identifier."""
    return bool(_IDENTIFIER_RE.match(name)) and name not in JS_RESERVED


def property_accessor(name: str) -> str:
    """
    Accessor suffix for a lookup table key.

    'Cube' -> '.Cube', 'my node' -> "['my node']"
    """
    if is_var_name(name):
        return f".{name}"
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"['{escaped}']"


def node_reference(name: str) -> str:
    """Expression that fetches a node from the loaded ``nodes`` table."""
    return "nodes" + property_accessor(name)


def material_reference(name: str) -> str:
    """Expression that fetches a material from the ``materials`` table."""
    return "materials" + property_accessor(name)


def instance_base_name(name: str) -> str:
    """
    Component-style name for an instance: letters only, capitalized.

    Falls back to 'Part' when nothing usable is left.
    """
    letters = re.sub(r"[^a-zA-Z]", "", name or "")
    if not letters:
        return "Part"
    return letters[0].upper() + letters[1:]


def sanitize_node_name(name: str) -> str:
    """
    Simulate how three.js sanitizes glTF node names for property bindings.
    Whitespace becomes underscores, ``[]`` ``.`` ``:`` ``/`` are removed.
    """
    return _RESERVED_NODE_CHARS_RE.sub("", re.sub(r"\s", "_", name))


def component_name(stem: str) -> str:
    """Capitalized file stem used for generated component files."""
    if not stem:
        return "Model"
    return stem[0].upper() + stem[1:]
