"""
notso-jsx: GLB/glTF to React Three Fiber
========================================
Turns a glTF scene graph into a reusable, declarative JSX component.

Features:
- Prunes empty and transform-only wrapper groups
- Instances re-occurring geometry through drei's <Merged>
- Emits rounded transforms and symbolic angles (Math.PI / 2)
- Optional TypeScript types for nodes, materials and animations
- Optional gltfpack transform and prettier formatting

Usage:
    CLI:
        notso-jsx model.glb
        notso-jsx model.glb --types --instance -o src/Model.tsx
        notso-jsx batch assets.json

    Python:
        from notso_jsx import convert
        convert("model.glb")
"""

from importlib.metadata import PackageNotFoundError, version

from notso_jsx.cli import main
from notso_jsx.exporters.jsx import ConvertConfig, convert, parse
from notso_jsx.utils.constants import JsxConfig

try:
    __version__ = version("notso-jsx")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["ConvertConfig", "JsxConfig", "convert", "main", "parse"]
