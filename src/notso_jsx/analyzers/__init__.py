"""Analyzers for re-occurring geometry and node classification."""

from notso_jsx.analyzers.duplicates import (
    DuplicateEntry,
    DuplicateIndex,
    analyze_duplicates,
    duplicate_key,
)
from notso_jsx.analyzers.nodes import (
    NodeInfo,
    ParseContext,
    UnsupportedNodeError,
    build_context,
    get_info,
    get_type,
    name_animation_targets,
)

__all__ = [
    "DuplicateEntry",
    "DuplicateIndex",
    "NodeInfo",
    "ParseContext",
    "UnsupportedNodeError",
    "analyze_duplicates",
    "build_context",
    "duplicate_key",
    "get_info",
    "get_type",
    "name_animation_targets",
]
