"""Scene to React component conversion: the parse core and the file pipeline."""

import os
import tempfile
from dataclasses import dataclass, field, replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from rich.markup import escape

from notso_jsx.analyzers.nodes import ParseContext, build_context, get_type
from notso_jsx.cleaners import prune
from notso_jsx.exporters.markup import print_node
from notso_jsx.exporters.module import assemble_module
from notso_jsx.scene import Gltf, SceneNode, load_gltf
from notso_jsx.utils.constants import DEFAULT_CONFIG, JsxConfig
from notso_jsx.utils.gltfpack import run_gltfpack
from notso_jsx.utils.logging import (
    StepTimer,
    bold,
    bright_cyan,
    bright_green,
    cyan,
    dim,
    format_bytes,
    format_duration,
    format_size_report,
    log_debug,
    log_detail,
    log_ok,
    log_warn,
    print_header,
    timed,
)
from notso_jsx.utils.naming import component_name
from notso_jsx.utils.prettier import format_source

try:
    __version__ = version("notso-jsx")
except PackageNotFoundError:
    __version__ = ""

# Markup sits inside `return ( <group ...>` of the Model component
BODY_DEPTH = 3


@dataclass
class ConvertConfig:
    """Options for the file pipeline around parse()."""

    jsx: JsxConfig = field(default_factory=JsxConfig)
    root: Path | None = None  # Directory the asset is served from
    transform: bool = False  # Run gltfpack before generating
    resolution: int = 1024  # gltfpack texture limit (px)
    simplify: bool = False  # gltfpack mesh simplification
    ratio: float = 0.75  # Simplification ratio
    format: bool = True  # Run prettier over the result
    print_width: int = 1000


def _dump_tree(node: SceneNode, depth: int = 0) -> None:
    name = escape(node.name) if node.name else dim("(unnamed)")
    log_debug(f"{'  ' * depth}{get_type(node)} {name}")
    for child in node.children:
        _dump_tree(child, depth + 1)


def parse(file_name: str, gltf: Gltf, config: JsxConfig | None = None) -> str:
    """
    Generate the component module for a loaded asset.

    Args:
        file_name: Asset path as the browser will request it
        gltf: Loaded scene; pruning rewrites its graph in place
        config: Generation options (defaults to DEFAULT_CONFIG)

    Returns:
        The module source text
    """
    config = config or DEFAULT_CONFIG
    ctx: ParseContext = build_context(gltf, config)

    if config.debug:
        log_debug("Scene tree before pruning:")
        _dump_tree(gltf.scene)

    if not config.keepgroups:
        removed = prune(gltf.scene, ctx)
        if config.debug:
            log_debug(f"Pruned {removed} node(s)")

    scene = print_node(gltf.scene, ctx, BODY_DEPTH)
    return assemble_module(file_name, gltf, ctx, scene, __version__)


def default_output_path(input_path: Path, types: bool) -> Path:
    """<Component>.jsx (or .tsx) next to the input asset."""
    suffix = ".tsx" if types else ".jsx"
    return input_path.parent / f"{component_name(input_path.stem)}{suffix}"


def relative_file_name(asset: Path, root: Path | None) -> str:
    """Asset path relative to the serving root, with forward slashes."""
    base = root if root is not None else asset.parent
    relative = os.path.relpath(asset.resolve(), Path(base).resolve())
    return relative.replace(os.sep, "/")


def write_atomic(path: Path, text: str) -> None:
    """Write through a temp file in the target directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _transform(step: StepTimer, input_path: Path, config: ConvertConfig) -> Path:
    step.step("Transforming with gltfpack...")
    with timed("gltfpack", print_on_exit=False) as t:
        success, output, message = run_gltfpack(
            input_path,
            mesh_compress=True,
            simplify_ratio=config.ratio if config.simplify else None,
            texture_limit=config.resolution,
        )
    if not success:
        raise RuntimeError(f"Transform failed: {message}")

    size = format_size_report(
        input_path.name,
        input_path.stat().st_size,
        output.name,
        output.stat().st_size,
    )
    log_detail(f"{escape(size)} {dim(f'({format_duration(t.elapsed)})')}")
    config.jsx = replace(config.jsx, size=size)
    return output


def convert(
    input_path: str | Path,
    output_path: str | Path | None = None,
    config: ConvertConfig | None = None,
) -> Path:
    """
    Turn a .glb/.gltf file into a React component file.

    Args:
        input_path: Source asset
        output_path: Target file (default: <Component>.jsx next to the input)
        config: Pipeline options; config.jsx drives generation

    Returns:
        Path of the written component

    Raises:
        FileNotFoundError: input missing
        ValueError: unsupported file or scene content
        RuntimeError: gltfpack transform failed
    """
    config = replace(config) if config is not None else ConvertConfig()
    input_path = Path(input_path)
    if not input_path.is_file():
        raise FileNotFoundError(f"File not found: {input_path}")
    if output_path is None:
        output_path = default_output_path(input_path, config.jsx.types)
    output_path = Path(output_path)

    total_steps = 3 + int(config.transform) + int(config.format)
    step = StepTimer(total_steps=total_steps)
    print_header("NOTSO JSX")

    asset = input_path
    if config.transform:
        asset = _transform(step, input_path, config)

    step.step("Loading scene...")
    log_detail(dim(asset.name))
    with timed("glTF load", print_on_exit=False) as t:
        gltf = load_gltf(asset)
    log_detail(
        f"Loaded {bright_cyan(str(len(gltf.objects())))} objects, "
        f"{bright_cyan(str(len(gltf.animations)))} animations "
        f"{dim(f'({format_duration(t.elapsed)})')}"
    )
    if gltf.uses_draco and not config.jsx.draco:
        log_warn(
            f"Asset is Draco compressed; pass {cyan('--draco')} "
            "to set a decoder path"
        )

    step.step("Generating component...")
    file_name = relative_file_name(asset, config.root)
    with timed("Code generation", print_on_exit=False) as t:
        source = parse(file_name, gltf, config.jsx)
    log_detail(f"{escape(file_name)} {dim(f'({format_duration(t.elapsed)})')}")

    if config.format:
        step.step("Formatting with prettier...")
        source = format_source(
            source, types=config.jsx.types, print_width=config.print_width
        )

    step.step("Writing output...")
    write_atomic(output_path, source)
    step.finish()

    size = output_path.stat().st_size
    log_ok(
        f"{bold('OUTPUT')}: {bright_green(output_path.name)} "
        f"{dim(f'({format_bytes(size)})')}"
    )
    step.print_summary()
    return output_path
