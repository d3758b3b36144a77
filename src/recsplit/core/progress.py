"""Progress rendering for TTY and CLI output separation with Rich."""

import os
import sys
import time
from datetime import datetime
from typing import TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .units import format_size


def is_tty() -> bool:
    """Check if stdout is a TTY (interactive terminal)."""
    return sys.stdout.isatty()


def is_ci() -> bool:
    """Check if running in CI environment."""
    ci_vars = ["CI", "CONTINUOUS_INTEGRATION", "GITHUB_ACTIONS", "JENKINS_URL"]
    return any(os.environ.get(var) for var in ci_vars)


def should_use_pretty() -> bool:
    """Determine if pretty output should be used based on TTY and CI detection."""
    return is_tty() and not is_ci()


class ProgressRenderer:
    """Banners and per-piece lines for split runs."""

    def __init__(
        self,
        enabled: bool | None = None,
        quiet_pretty: bool = False,
        file: TextIO | None = None,
        no_color: bool = False,
    ):
        """
        Initialize progress renderer.

        Args:
            enabled: Whether to show pretty output. Auto-detected if None.
            quiet_pretty: Suppress banners but keep piece lines.
            file: Output file, defaults to stderr.
            no_color: Disable color output for Rich console.
        """
        self.enabled = enabled if enabled is not None else should_use_pretty()
        self.quiet_pretty = quiet_pretty
        self.file = file or sys.stderr
        self.no_color = no_color

        self.console = Console(
            file=self.file,
            color_system=None if no_color else "auto",
            force_terminal=self.enabled,
        )

        self.start_time: float | None = None
        self.pieces_written = 0
        self.bytes_written = 0
        self.num_pieces = 0
        self.input_size = 0

    def start_banner(
        self,
        run_id: str,
        input_path: str,
        input_size: int,
        num_pieces: int,
        chunk_size: int,
        format_name: str,
    ):
        """Print start banner with Rich formatting."""
        self.start_time = time.time()
        self.num_pieces = num_pieces
        self.input_size = input_size

        if not self.enabled or self.quiet_pretty:
            return

        banner_content = [
            f"[bold blue]✂️  Starting split run:[/bold blue] [cyan]{run_id}[/cyan]",
            f"[bold]Input:[/bold] {input_path} ({format_size(input_size)})",
            f"[bold]Pieces:[/bold] {num_pieces}",
            f"[bold]Chunk size:[/bold] {format_size(chunk_size)}",
            f"[bold]Format:[/bold] {format_name}",
            f"[bold]Started:[/bold] {datetime.now().strftime('%H:%M:%S')}",
        ]

        panel = Panel(
            "\n".join(banner_content),
            title="[bold green]Split Configuration[/bold green]",
            border_style="blue",
        )

        self.console.print(panel)
        self.console.print()

    def piece_written(self, index: int, size: int, path: str):
        """Show a line for a finalized piece."""
        self.pieces_written += 1
        self.bytes_written += size

        if not self.enabled:
            return

        done_pct = 100.0 * self.bytes_written / self.input_size if self.input_size else 100.0
        self.console.print(
            f"[cyan]{index + 1}/{self.num_pieces}[/cyan] | "
            f"[white]{path}[/white] | "
            f"[green]{format_size(size)}[/green] "
            f"[dim]({done_pct:.0f}%)[/dim]"
        )

    def finish_banner(self, run_id: str, pieces: list[tuple[int, str, int]], elapsed: float):
        """Print finish banner with a per-piece table."""
        if not self.enabled or self.quiet_pretty:
            return

        total = sum(size for _, _, size in pieces)
        rate = total / elapsed if elapsed > 0 else 0

        summary_lines = [
            f"[bold green]✅ Completed split run:[/bold green] [cyan]{run_id}[/cyan]",
            f"[bold]Elapsed:[/bold] {elapsed:.1f}s",
            f"[bold]Total:[/bold] [green]{len(pieces)}[/green] pieces, {format_size(total)}",
            f"[bold]Rate:[/bold] [cyan]{format_size(int(rate))}[/cyan]/s",
        ]

        panel = Panel(
            "\n".join(summary_lines),
            title="[bold green]🎉 Split Complete[/bold green]",
            border_style="green",
        )

        self.console.print()
        self.console.print(panel)

        table = Table(title="Pieces", show_header=True, header_style="bold blue")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Path", style="cyan")
        table.add_column("Bytes", justify="right", style="green")
        table.add_column("Share", justify="right", style="magenta")

        for index, path, size in pieces:
            share = 100.0 * size / total if total else 0.0
            table.add_row(str(index), path, str(size), f"{share:.1f}%")

        self.console.print(table)

    def one_line_summary(self, run_id: str, pieces: int, total_bytes: int, elapsed: float) -> str:
        """Generate one-line human-readable summary."""
        return f"{run_id}: {pieces} pieces, {format_size(total_bytes)} in {elapsed:.1f}s"


def init_progress(
    enabled: bool | None = None,
    quiet_pretty: bool = False,
    no_color: bool = False,
) -> ProgressRenderer:
    """Create the progress renderer for a CLI run."""
    return ProgressRenderer(enabled=enabled, quiet_pretty=quiet_pretty, no_color=no_color)
