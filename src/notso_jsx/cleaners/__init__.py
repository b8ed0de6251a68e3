"""Scene graph rewriting before emission."""

from notso_jsx.cleaners.groups import (
    RewriteSkipped,
    is_prunable,
    prune,
    prune_groups,
    reparent_removed,
    surviving_children,
)

__all__ = [
    "RewriteSkipped",
    "is_prunable",
    "prune",
    "prune_groups",
    "reparent_removed",
    "surviving_children",
]
