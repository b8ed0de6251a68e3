"""Command-line interface for the glTF to JSX converter."""

import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

try:
    __version__ = version("notso-jsx")
except PackageNotFoundError:
    __version__ = "unknown"

app = typer.Typer(
    name="notso-jsx",
    help="Turn GLB/glTF assets into declarative React Three Fiber components",
    add_completion=False,
    rich_markup_mode="rich",
    suggest_commands=True,
    no_args_is_help=True,
)
console = Console()

COMMANDS = ("convert", "batch")


def version_callback(value: bool) -> None:
    if value:
        print(f"notso-jsx {__version__}")
        raise typer.Exit()


@app.callback()
def common(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """
    Turn GLB/glTF assets into declarative React Three Fiber components.
    """


@app.command()
def convert(
    input_path: Annotated[
        Path,
        typer.Argument(
            help="Input file ([bold green].glb[/] or [bold green].gltf[/])",
            metavar="INPUT",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file (default: [italic]Model.\\[jsx|tsx][/] next to input)",
            rich_help_panel="Core Options",
        ),
    ] = None,
    types: Annotated[
        bool,
        typer.Option(
            "--types",
            "-t",
            help="Emit TypeScript (.tsx) with GLTFResult types",
            rich_help_panel="Core Options",
        ),
    ] = False,
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Directory the asset is served from (default: its own)",
            rich_help_panel="Core Options",
        ),
    ] = None,
    precision: Annotated[
        int,
        typer.Option(
            "--precision",
            "-p",
            min=0,
            help="Fractional digits for numbers",
            rich_help_panel="Core Options",
        ),
    ] = 2,
    header: Annotated[
        str | None,
        typer.Option(
            "--header",
            "-h",
            help="Extra line for the header comment",
            rich_help_panel="Core Options",
        ),
    ] = None,
    keepnames: Annotated[
        bool,
        typer.Option(
            "--keepnames",
            "-k",
            help="Keep original names",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    keepgroups: Annotated[
        bool,
        typer.Option(
            "--keepgroups",
            "-K",
            help="Keep (empty) groups, disable pruning",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Shorthand for --keepnames --keepgroups",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    aggressive: Annotated[
        bool,
        typer.Option(
            "--aggressive",
            "-a",
            help="Aggressive pruning: collapse transform-only groups",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    meta: Annotated[
        bool,
        typer.Option(
            "--meta",
            "-m",
            help="Include userData as meta data",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    shadows: Annotated[
        bool,
        typer.Option(
            "--shadows",
            "-s",
            help="Let meshes cast and receive shadows",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    instance: Annotated[
        bool,
        typer.Option(
            "--instance",
            "-i",
            help="Instance re-occurring geometry",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    instanceall: Annotated[
        bool,
        typer.Option(
            "--instanceall",
            "-I",
            help="Instance every geometry (for cheaper re-use)",
            rich_help_panel="Scene Graph",
        ),
    ] = False,
    draco: Annotated[
        str | None,
        typer.Option(
            "--draco",
            "-d",
            help="Draco decoder path passed to useGLTF",
            rich_help_panel="Loading",
        ),
    ] = None,
    transform: Annotated[
        bool,
        typer.Option(
            "--transform",
            "-T",
            help="Optimize the asset with gltfpack first ([italic]-transformed.glb[/])",
            rich_help_panel="Transform (gltfpack)",
        ),
    ] = False,
    resolution: Annotated[
        int,
        typer.Option(
            "--resolution",
            "-R",
            min=1,
            help="Max texture size when transforming",
            rich_help_panel="Transform (gltfpack)",
        ),
    ] = 1024,
    simplify: Annotated[
        bool,
        typer.Option(
            "--simplify",
            "-S",
            help="Simplify meshes when transforming",
            rich_help_panel="Transform (gltfpack)",
        ),
    ] = False,
    ratio: Annotated[
        float,
        typer.Option(
            "--ratio",
            min=0.0,
            max=1.0,
            help="Simplification ratio",
            rich_help_panel="Transform (gltfpack)",
        ),
    ] = 0.75,
    format_output: Annotated[
        bool,
        typer.Option(
            "--format/--no-format",
            help="Format the result with prettier (when on PATH)",
            rich_help_panel="Output",
        ),
    ] = True,
    print_width: Annotated[
        int,
        typer.Option(
            "--printwidth",
            min=1,
            help="Prettier print width",
            rich_help_panel="Output",
        ),
    ] = 1000,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-D",
            help="Dump the scene tree and pruning decisions",
            rich_help_panel="Output",
        ),
    ] = False,
) -> None:
    """
    Convert one asset into a React component.
    """
    if not input_path.is_file():
        console.print(f"[bold red][ERROR][/] File not found: {escape(str(input_path))}")
        raise typer.Exit(code=1)

    ext = input_path.suffix.lower()
    if ext not in (".glb", ".gltf"):
        console.print(f"[bold red][ERROR][/] Unsupported format: {escape(ext)}")
        console.print("        Supported: .glb, .gltf")
        raise typer.Exit(code=1)

    # Lazy import to keep --help snappy
    from notso_jsx.exporters.jsx import ConvertConfig
    from notso_jsx.exporters.jsx import convert as run_convert
    from notso_jsx.utils.constants import JsxConfig

    config = ConvertConfig(
        jsx=JsxConfig(
            precision=precision,
            keepnames=keepnames or verbose,
            keepgroups=keepgroups or verbose,
            shadows=shadows,
            meta=meta,
            types=types,
            draco=draco,
            instance=instance,
            instanceall=instanceall,
            aggressive=aggressive,
            debug=debug,
            header=header,
        ),
        root=root,
        transform=transform,
        resolution=resolution,
        simplify=simplify,
        ratio=ratio,
        format=format_output,
        print_width=print_width,
    )

    try:
        run_convert(input_path, output, config)
    except (OSError, ValueError, RuntimeError) as e:
        console.print(f"[bold red][ERROR][/] {escape(str(e))}")
        raise typer.Exit(code=1) from e


@app.command()
def batch(
    settings: Annotated[
        Path,
        typer.Argument(
            help="Batch settings ([bold green].json[/])",
            metavar="SETTINGS",
        ),
    ],
    keep_going: Annotated[
        bool,
        typer.Option(
            "--keep-going",
            help="Continue with the next asset after a failure",
        ),
    ] = False,
) -> None:
    """
    Convert every asset listed in a settings file.
    """
    if not settings.is_file():
        console.print(f"[bold red][ERROR][/] File not found: {escape(str(settings))}")
        raise typer.Exit(code=1)

    from notso_jsx.exporters.batch import run_batch

    try:
        result = run_batch(settings, keep_going=keep_going)
    except (OSError, ValueError, RuntimeError) as e:
        console.print(f"[bold red][ERROR][/] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not result.ok:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point; `notso-jsx model.glb` runs the convert command."""
    args = sys.argv[1:]

    if not args:
        # Show the convert options rather than the bare command list
        old_stdout = sys.stdout
        sys.stdout = sys.stderr
        try:
            app(args=["convert", "--help"], standalone_mode=False)
        except (SystemExit, typer.Exit):
            pass
        finally:
            sys.stdout = old_stdout
        sys.exit(1)

    if args[0] not in (*COMMANDS, "--help", "--version", "-v"):
        args = ["convert", *args]
    app(args=args, standalone_mode=True)


if __name__ == "__main__":
    main()
