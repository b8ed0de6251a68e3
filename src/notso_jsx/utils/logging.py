"""Colored logging and timing utilities for notso-jsx."""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)


def _c(style: str, text: str) -> str:
    """Wrap text in rich markup, escaping anything that looks like a tag."""
    return f"[{style}]{escape(text)}[/]"


def bold(text: str) -> str:
    return _c("bold", text)


def dim(text: str) -> str:
    return _c("dim", text)


def cyan(text: str) -> str:
    return _c("cyan", text)


def bright_green(text: str) -> str:
    return _c("bright_green", text)


def bright_cyan(text: str) -> str:
    return _c("bright_cyan", text)


# Log level formatting. Messages are rich markup; escape() raw user text.
def log_info(msg: str) -> None:
    """Print info message."""
    console.print(f"  [cyan]INFO[/]  {msg}")


def log_ok(msg: str) -> None:
    """Print success message."""
    console.print(f"    [bright_green]OK[/]  {msg}")


def log_warn(msg: str) -> None:
    """Print warning message."""
    console.print(f"  [bright_yellow]WARN[/]  {msg}")


def log_error(msg: str) -> None:
    """Print error message."""
    console.print(f" [bright_red]ERROR[/]  {msg}")


def log_debug(msg: str) -> None:
    """Print debug message (dimmed)."""
    console.print(f" [dim]DEBUG[/]  [dim]{msg}[/]")


def log_step(current: int, total: int, msg: str) -> None:
    """Print step progress message."""
    console.print(f"\n[cyan]\\[{current}/{total}][/] {msg}")


def log_detail(msg: str, indent: int = 6) -> None:
    console.print(f"{' ' * indent}{msg}")


def log_timing(msg: str, seconds: float) -> None:
    console.print(f"  [dim]TIME[/]  {msg}: {bright_cyan(format_duration(seconds))}")


def print_header(title: str, char: str = "=", width: int = 60) -> None:
    """Print a header with decorative borders."""
    border = char * width
    console.print(f"\n{cyan(border)}")
    console.print(f"  {bold(title)}")
    console.print(cyan(border))


def format_duration(seconds: float) -> str:
    """Format seconds into human-readable duration."""
    if seconds < 0.001:
        return f"{seconds * 1000000:.0f}μs"
    elif seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    mins = int(seconds // 60)
    return f"{mins}m {seconds % 60:.1f}s"


def format_bytes(size: int) -> str:
    """Format byte size in human-readable form."""
    if size < 1024:
        return f"{size}B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f}KB"
    return f"{size / 1024 / 1024:.2f}MB"


def format_size_report(
    before_name: str, before: int, after_name: str, after: int
) -> str:
    """
    One-line size delta for the generated header.

    'model.glb [1.2MB] > model-transformed.glb [300.0KB] (75%)'
    """
    saved = round(100 - (after / before) * 100) if before else 0
    return (
        f"{before_name} [{format_bytes(before)}] > "
        f"{after_name} [{format_bytes(after)}] ({saved}%)"
    )


@dataclass
class TimingResult:
    """Result from a timed operation."""

    elapsed: float
    message: str


@contextmanager
def timed(description: str, print_on_exit: bool = True) -> Iterator[TimingResult]:
    """Context manager for timing operations.

    Usage:
        with timed("Pruning groups") as t:
            do_work()
        # Prints timing on exit unless print_on_exit=False
    """
    result = TimingResult(elapsed=0.0, message=description)
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start
        if print_on_exit:
            log_timing(description, result.elapsed)


class StepTimer:
    """Track timing for the steps of one conversion job."""

    def __init__(self, total_steps: int) -> None:
        self.total = total_steps
        self.current = 0
        self.timings: list[tuple[str, float]] = []
        self._step_start: float = 0.0
        self._total_start: float = time.perf_counter()

    def _close_step(self, now: float) -> None:
        if self._step_start > 0 and self.timings:
            name, _ = self.timings[-1]
            self.timings[-1] = (name, now - self._step_start)

    def step(self, message: str) -> None:
        """Start a new step, recording timing for previous step."""
        now = time.perf_counter()
        self._close_step(now)
        self.current += 1
        self._step_start = now
        self.timings.append((message, 0.0))
        log_step(self.current, self.total, message)

    def finish(self) -> None:
        self._close_step(time.perf_counter())

    def total_elapsed(self) -> float:
        return time.perf_counter() - self._total_start

    def print_summary(self) -> None:
        """Print timing summary for all steps."""
        console.print(f"\n{dim('-' * 50)}")
        for name, elapsed in self.timings:
            padding = max(1, 40 - len(name))
            console.print(
                f"  {escape(name)}{' ' * padding}{bright_cyan(format_duration(elapsed))}"
            )
        console.print(dim("-" * 50))
        total = format_duration(self.total_elapsed())
        console.print(f"  {bold('Total')}{' ' * 33}{bright_green(total)}")
