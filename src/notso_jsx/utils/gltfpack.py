"""Wrapper for the gltfpack asset optimizer (the --transform pipeline)."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import TypeAlias

# Override the executable lookup (for pinned or vendored binaries)
ENV_GLTFPACK_PATH: str = "NOTSO_JSX_GLTFPACK"

TRANSFORMED_SUFFIX = "-transformed"
TIMEOUT = 300  # seconds

# Result type alias for clarity
GltfpackResult: TypeAlias = tuple[bool, Path, str]


def find_gltfpack() -> str | None:
    """Find gltfpack executable, honoring the override env var first."""
    override = os.environ.get(ENV_GLTFPACK_PATH, "").strip()
    if override:
        return shutil.which(override)
    return shutil.which("gltfpack")


def resolve_output_path(input_path: Path, output_path: str | Path | None) -> Path:
    """Resolve output path, defaulting to <stem>-transformed.glb."""
    if output_path is not None:
        return Path(output_path)
    stem = input_path.stem
    if stem.endswith(TRANSFORMED_SUFFIX):
        stem = stem[: -len(TRANSFORMED_SUFFIX)]
    return input_path.parent / f"{stem}{TRANSFORMED_SUFFIX}.glb"


def build_command(
    gltfpack: str,
    input_path: Path,
    output_path: Path,
    *,
    texture_compress: bool,
    mesh_compress: bool,
    simplify_ratio: float | None,
    texture_limit: int | None,
    keep_names: bool,
) -> list[str]:
    """
    Assemble the gltfpack argument list.

    Raises:
        ValueError: simplify_ratio outside [0, 1] or a non-positive texture_limit
    """
    cmd: list[str] = [gltfpack, "-i", str(input_path), "-o", str(output_path)]
    if keep_names:
        # Generated components look nodes and materials up by name
        cmd.extend(["-kn", "-km"])
    if texture_compress:
        cmd.append("-tc")
    if mesh_compress:
        cmd.append("-cc")

    if simplify_ratio is not None:
        if isinstance(simplify_ratio, bool) or not isinstance(simplify_ratio, (int, float)):
            raise ValueError(
                f"simplify_ratio must be a number, got {type(simplify_ratio).__name__}"
            )
        if not 0.0 <= simplify_ratio <= 1.0:
            raise ValueError(f"simplify_ratio must be in [0.0, 1.0], got {simplify_ratio}")
        cmd.extend(["-si", str(float(simplify_ratio))])

    if texture_limit is not None:
        # bool is a subclass of int
        if isinstance(texture_limit, bool) or not isinstance(texture_limit, int):
            raise ValueError(
                f"texture_limit must be an integer, got {type(texture_limit).__name__}"
            )
        if texture_limit <= 0:
            raise ValueError(f"texture_limit must be positive, got {texture_limit}")
        cmd.extend(["-tl", str(texture_limit)])
    return cmd


def run_gltfpack(
    input_path: str | Path,
    output_path: str | Path | None = None,
    *,
    texture_compress: bool = False,
    mesh_compress: bool = True,
    simplify_ratio: float | None = None,
    texture_limit: int | None = 1024,
    keep_names: bool = True,
) -> GltfpackResult:
    """
    Optimize a GLB/glTF file before code generation.

    Args:
        input_path: Input GLB/glTF file
        output_path: Output path (default: <stem>-transformed.glb next to input)
        texture_compress: Enable KTX2 texture compression (-tc)
        mesh_compress: Enable meshopt compression (-cc)
        simplify_ratio: Simplify meshes to ratio (0.0-1.0), None = no simplify
        texture_limit: Max texture dimension (-tl), None = keep size
        keep_names: Keep named nodes and materials (-kn -km)

    Returns:
        Tuple of (success, output_path, message)
    """
    input_path = Path(input_path)
    gltfpack = find_gltfpack()
    if gltfpack is None:
        return False, input_path, "gltfpack not found in PATH"
    if not input_path.is_file():
        return False, input_path, f"Input file not found or is not a file: {input_path}"

    output_path = resolve_output_path(input_path, output_path)
    try:
        cmd = build_command(
            gltfpack,
            input_path,
            output_path,
            texture_compress=texture_compress,
            mesh_compress=mesh_compress,
            simplify_ratio=simplify_ratio,
            texture_limit=texture_limit,
            keep_names=keep_names,
        )
    except ValueError as e:
        return False, input_path, str(e)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=TIMEOUT)
    except subprocess.TimeoutExpired:
        return False, output_path, f"gltfpack timed out after {TIMEOUT}s"
    except (subprocess.SubprocessError, OSError) as e:
        return False, output_path, f"gltfpack could not run {input_path.name}: {e}"

    if result.returncode != 0:
        stderr = result.stderr.strip() or result.stdout.strip() or "Unknown error"
        return False, output_path, f"gltfpack exited with {result.returncode}: {stderr}"
    if not output_path.exists():
        return False, output_path, f"gltfpack wrote no output to {output_path}"
    return True, output_path, "Success"
