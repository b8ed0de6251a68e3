"""
JSX rendering: element props, markup and the component module.

The file pipeline lives in exporters.jsx and exporters.batch, imported
directly so the cleaners can depend on props without a cycle.
"""

from notso_jsx.exporters.markup import get_tag, print_node
from notso_jsx.exporters.module import assemble_module, resolve_url
from notso_jsx.exporters.props import Prop, handle_props

__all__ = [
    "Prop",
    "assemble_module",
    "get_tag",
    "handle_props",
    "print_node",
    "resolve_url",
]
