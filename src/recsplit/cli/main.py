import json
from contextlib import nullcontext
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from ..core import config as config_module
from ..core import paths
from ..core.artifacts import new_run_id
from ..core.config import Settings
from ..core.errors import ConfigurationError, SplitError, SplitIOError
from ..core.logging import log, setup_logging
from ..core.progress import init_progress
from ..core.units import format_size, parse_size
from ..formats import FORMATS, get_format
from ..obs.events import EventEmitter
from ..split.engine import split_file
from ..split.verify import discover_pieces, verify_pieces

app = typer.Typer(add_completion=False, help="Split record files into balanced pieces")
console = Console()

# Exit codes
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_IO = 3


@app.callback()
def _init() -> None:
    settings = config_module.SETTINGS
    setup_logging(settings.LOG_FORMAT, settings.LOG_LEVEL)  # type: ignore[arg-type]


def _load_settings(config_file: str | None) -> Settings:
    """Load settings and make them the process-wide defaults."""
    settings = Settings.load_config(config_file)
    config_module.SETTINGS = settings
    setup_logging(settings.LOG_FORMAT, settings.LOG_LEVEL)  # type: ignore[arg-type]
    return settings


def _fail(message: str, code: int, error: Exception) -> NoReturn:
    typer.echo(f"❌ {message}", err=True)
    raise typer.Exit(code) from error


@app.command("split")
def split_cmd(
    input_path: str = typer.Argument(..., help="Path to the file to split"),
    num_pieces: int = typer.Option(
        ...,
        "-n",
        "--pieces",
        help="Number of pieces to produce. Each piece goes to a separate file named "
        '"<file name>.<number>", numbered from 0',
    ),
    output_dir: str | None = typer.Option(
        None, "--od", help="Output directory (default: current directory)"
    ),
    output_name: str | None = typer.Option(
        None, "--of", help="Base name for output files (default: input file name)"
    ),
    chunk_size: str | None = typer.Option(
        None,
        "--cs",
        help="Chunk size for reads and writes: 512B, 4K, 8M, 1G (default: 4M). "
        "Must be bigger than any record",
    ),
    record_format: str | None = typer.Option(None, "--format", help="Record format (default: fasta)"),
    events: bool | None = typer.Option(
        None, "--events/--no-events", help="Write NDJSON events under <workdir>/logs"
    ),
    config_file: str | None = typer.Option(
        None, "--config", help="Config file (.recsplit.yaml auto-discovered)"
    ),
) -> None:
    """
    Split a file into pieces of roughly equal size.

    Each piece holds an integer number of records from the input file.
    """
    settings = _load_settings(config_file)

    try:
        fmt = get_format(record_format or settings.RECSPLIT_FORMAT)
        chunk_bytes = parse_size(chunk_size or settings.RECSPLIT_CHUNK_SIZE)
    except ConfigurationError as e:
        _fail(str(e), EXIT_CONFIG, e)

    if num_pieces < 2:
        typer.echo("❌ Number of pieces should be greater than 1", err=True)
        raise typer.Exit(EXIT_CONFIG)

    run_id = new_run_id()
    out_dir = output_dir or settings.RECSPLIT_OUTPUT_DIR
    progress = init_progress(
        enabled=None if settings.PROGRESS else False,
        quiet_pretty=settings.QUIET_PRETTY,
        no_color=settings.NO_COLOR,
    )

    input_size = Path(input_path).stat().st_size if Path(input_path).is_file() else 0
    progress.start_banner(run_id, input_path, input_size, num_pieces, chunk_bytes, fmt.description)

    def on_piece(piece) -> None:
        typer.echo(f"Piece {piece.index + 1} written. Size: {format_size(piece.size)}")
        progress.piece_written(piece.index, piece.size, piece.path)

    use_events = settings.RECSPLIT_EVENTS if events is None else events
    emitter = EventEmitter(run_id, log_dir=paths.logs()) if use_events else nullcontext()

    try:
        with emitter as emit:
            result = split_file(
                input_path,
                num_pieces,
                output_dir=out_dir,
                output_name=output_name,
                chunk_size=chunk_bytes,
                fmt=fmt,
                emit=emit,
                on_piece=on_piece,
                run_id=run_id,
            )
    except ConfigurationError as e:
        _fail(str(e), EXIT_CONFIG, e)
    except SplitIOError as e:
        _fail(str(e), EXIT_IO, e)
    except SplitError as e:
        _fail(str(e), EXIT_FAILURE, e)

    progress.finish_banner(
        result.run_id,
        [(p.index, p.path, p.size) for p in result.pieces],
        result.elapsed,
    )
    log.info(
        "split.summary",
        summary=progress.one_line_summary(
            result.run_id, len(result.pieces), result.input_size, result.elapsed
        ),
    )


@app.command("verify")
def verify_cmd(
    input_path: str = typer.Argument(..., help="Path to the file that was split"),
    num_pieces: int = typer.Option(..., "-n", "--pieces", help="Number of pieces produced"),
    output_dir: str | None = typer.Option(None, "--od", help="Directory holding the pieces"),
    output_name: str | None = typer.Option(
        None, "--of", help="Base name of the pieces (default: input file name)"
    ),
    record_format: str | None = typer.Option(None, "--format", help="Record format (default: fasta)"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    config_file: str | None = typer.Option(
        None, "--config", help="Config file (.recsplit.yaml auto-discovered)"
    ),
) -> None:
    """Check that pieces reproduce the input and never cut a record in two."""
    settings = _load_settings(config_file)

    try:
        fmt = get_format(record_format or settings.RECSPLIT_FORMAT)
        piece_paths = discover_pieces(
            output_dir or settings.RECSPLIT_OUTPUT_DIR,
            output_name or Path(input_path).name,
            num_pieces,
        )
        report = verify_pieces(input_path, piece_paths, fmt)
    except ConfigurationError as e:
        _fail(str(e), EXIT_CONFIG, e)
    except SplitIOError as e:
        _fail(str(e), EXIT_IO, e)

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "ok": report.ok,
                    "input_path": report.input_path,
                    "input_size": report.input_size,
                    "input_sha256": report.input_sha256,
                    "pieces": [p._asdict() for p in report.pieces],
                    "violations": report.violations,
                },
                indent=2,
            )
        )
    else:
        table = Table(title="Pieces", show_header=True, header_style="bold blue")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Path", style="cyan")
        table.add_column("Bytes", justify="right", style="green")
        table.add_column("Records", justify="right", style="magenta")
        for piece in report.pieces:
            table.add_row(str(piece.index), piece.path, str(piece.size), str(piece.records))
        console.print(table)

        for violation in report.violations:
            console.print(f"[bold red]❌ {violation['reason']}[/bold red] {violation}")

        if report.ok:
            console.print(
                f"[bold green]✅ {len(report.pieces)} pieces reproduce "
                f"{report.input_path} ({format_size(report.input_size)})[/bold green]"
            )

    if not report.ok:
        raise typer.Exit(EXIT_FAILURE)


@app.command("formats")
def formats_cmd() -> None:
    """List supported record formats."""
    for name, fmt in sorted(FORMATS.items()):
        typer.echo(f"{name}\t{fmt.description}")


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def config(
    config_file: str | None = typer.Option(
        None, "--config", help="Config file (.recsplit.yaml auto-discovered)"
    ),
) -> None:
    """Show effective settings as JSON."""
    settings = Settings.load_config(config_file)
    typer.echo(json.dumps(settings.model_dump(), indent=2, sort_keys=True))


if __name__ == "__main__":
    app()
