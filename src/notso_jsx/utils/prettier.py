"""Wrapper for the prettier code formatter."""

from __future__ import annotations

import shutil
import subprocess

from rich.markup import escape

from notso_jsx.utils.logging import log_warn


def find_prettier() -> str | None:
    """Find prettier executable in PATH."""
    return shutil.which("prettier")


def prettier_command(prettier: str, types: bool, print_width: int) -> list[str]:
    """Arguments matching the gltfjsx formatting style."""
    return [
        prettier,
        "--stdin-filepath",
        "Model.tsx" if types else "Model.jsx",
        "--parser",
        "babel-ts" if types else "babel",
        "--no-semi",
        "--single-quote",
        "--bracket-same-line",
        "--print-width",
        str(print_width),
    ]


def format_source(source: str, *, types: bool = False, print_width: int = 1000) -> str:
    """
    Pipe generated source through prettier.

    Returns the input unchanged when prettier is unavailable or fails; the
    emitter output is already indented, so this only affects style.
    """
    prettier = find_prettier()
    if prettier is None:
        log_warn("prettier not found in PATH, writing unformatted output")
        return source

    cmd = prettier_command(prettier, types, print_width)
    try:
        result = subprocess.run(
            cmd,
            input=source,
            capture_output=True,
            text=True,
            timeout=60,
        )
    except subprocess.TimeoutExpired:
        log_warn("prettier timed out, writing unformatted output")
        return source
    except OSError as e:
        log_warn(f"prettier could not be started: {escape(str(e))}")
        return source

    if result.returncode != 0:
        error_msg = result.stderr.strip() or "Unknown error"
        log_warn(f"prettier failed, writing unformatted output: {escape(error_msg)}")
        return source
    return result.stdout
