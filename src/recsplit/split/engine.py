"""
Streaming split of a record file into pieces of roughly equal size.

The input is read and the pieces are written in chunks of a fixed size
(except maybe the last chunk read from the input or written to a piece)
through a buffer of double chunk size:

1) input data first comes to the upper half of the buffer
2) a leading part of the active data is moved to the current piece
3) any residual data left in the upper half is moved to the lower half so
   that it ends at the buffer midpoint
4) the upper half is refilled from the input, which keeps the active data
   a contiguous stretch of the input
5) steps 2)-4) repeat; 3) only happens once the left edge of the active
   data has moved into the upper half

Every piece is cut at a record boundary close to its share of the
remaining bytes, so pieces hold whole records only.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import BinaryIO, Callable, NamedTuple, Optional, Protocol

from ..core.artifacts import new_run_id
from ..core.errors import ConfigurationError, SplitIOError
from ..core.logging import log
from ..formats import FASTA, RecordFormat
from .bounds import compute_transfer_bound
from .buffer import WorkingBuffer
from .pieces import FilePieceSink, PieceResult, open_input

# 4M
DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024

EmitFn = Callable[..., None]
PieceCallback = Callable[[PieceResult], None]


class PieceSink(Protocol):
    """Creates and finalizes output pieces."""

    def create_piece(self, index: int) -> BinaryIO: ...

    def finalize_piece(self, stream: BinaryIO, index: int) -> int: ...

    def path_for(self, index: int) -> Path: ...


class SplitResult(NamedTuple):
    """Summary of a completed split run."""

    run_id: str
    input_path: str
    input_size: int
    chunk_size: int
    num_pieces: int
    pieces: list[PieceResult]
    elapsed: float


def _emit(emit: Optional[EmitFn], event_type: str, **kwargs) -> None:
    if emit is not None:
        emit(event_type, **kwargs)


def _write_output(stream: BinaryIO, data: memoryview) -> int:
    io_size = len(data)
    try:
        bytes_written = stream.write(data)
    except OSError as e:
        raise SplitIOError(f"Cannot write data to output file: {e.strerror or e}") from e

    if bytes_written != io_size:
        raise SplitIOError(
            f"Written {bytes_written} bytes to an output file. {io_size} bytes "
            "were expected. Is it a regular storage device?"
        )
    return bytes_written


def piece_budget(bytes_available: int, pieces_left: int) -> int:
    """Divide the remaining bytes equally between the remaining pieces, rounding up."""
    return -(-bytes_available // pieces_left)


def split_stream(
    source: BinaryIO,
    input_size: int,
    num_pieces: int,
    sink: PieceSink,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    fmt: RecordFormat = FASTA,
    emit: Optional[EmitFn] = None,
    on_piece: Optional[PieceCallback] = None,
) -> list[PieceResult]:
    """
    Split ``input_size`` bytes of ``source`` into ``num_pieces`` pieces.

    Args:
        source: Binary stream positioned at the start of the input
        input_size: Total number of bytes to read from ``source``
        num_pieces: Number of pieces to produce (at least 2)
        sink: Creates and finalizes the output pieces
        chunk_size: Read/write unit; the working buffer holds two chunks
        fmt: Record grammar used to place piece boundaries
        emit: Optional event callback, called as ``emit(event_type, **fields)``
        on_piece: Optional callback invoked with each finalized piece

    Returns:
        The finalized pieces in order.

    Raises:
        ConfigurationError: for an invalid piece count or chunk size, when the
            input runs out before all pieces are produced, or when a record
            doesn't fit in a chunk (BoundaryNotFoundError)
        SplitIOError: on any failed or short read/write/sync
    """
    if num_pieces < 2:
        raise ConfigurationError("Number of pieces should be greater than 1")
    if chunk_size < 1:
        raise ConfigurationError("Chunk size should be at least 1 byte")

    buffer = WorkingBuffer(chunk_size)
    bytes_available = input_size
    bytes_not_read = input_size
    pieces: list[PieceResult] = []

    for piece_num in range(num_pieces):
        to_read = piece_budget(bytes_available, num_pieces - piece_num)

        if not to_read:
            raise ConfigurationError(
                "Couldn't produce the requested number of pieces. "
                f"Only {piece_num} pieces were written"
            )

        is_last_piece = piece_num == num_pieces - 1
        log.info("piece.start", piece=piece_num, projected_size=to_read)

        output = sink.create_piece(piece_num)
        try:
            is_first_block = True

            while to_read:
                buffer.check_invariants()

                if buffer.needs_refill:
                    bytes_read = buffer.fill_upper_half(source, bytes_not_read)
                    bytes_not_read -= bytes_read
                    log.debug("split.refill", bytes_read=bytes_read, bytes_not_read=bytes_not_read)

                assert not buffer.is_empty

                bound = compute_transfer_bound(
                    buffer.data,
                    chunk_size,
                    buffer.data_start,
                    buffer.data_end,
                    to_read,
                    is_first_block,
                    not bytes_not_read,
                    is_last_piece,
                    fmt,
                )

                span = bound - buffer.data_start + 1
                if span <= 0:
                    # The piece already ends on a record bound
                    assert bound == buffer.data_start - 1
                    to_read = 0
                elif span > to_read:
                    to_read = 0
                else:
                    to_read -= span

                _write_output(output, buffer.view(buffer.data_start, bound))
                bytes_available -= span
                is_first_block = False

                buffer.consume(bound, not bytes_available and not bytes_not_read)
        except BaseException:
            output.close()
            raise

        piece_size = sink.finalize_piece(output, piece_num)
        piece = PieceResult(piece_num, str(sink.path_for(piece_num)), piece_size)
        pieces.append(piece)

        log.info("piece.finalized", piece=piece_num, size=piece_size, path=piece.path)
        _emit(emit, "split.piece", piece=piece_num, bytes=piece_size)
        if on_piece is not None:
            on_piece(piece)

    assert bytes_available == 0

    return pieces


def split_file(
    input_path: str | Path,
    num_pieces: int,
    output_dir: str | Path = ".",
    output_name: Optional[str] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    fmt: RecordFormat = FASTA,
    emit: Optional[EmitFn] = None,
    on_piece: Optional[PieceCallback] = None,
    run_id: Optional[str] = None,
) -> SplitResult:
    """
    Split a file into ``num_pieces`` files named ``<output_name>.<number>``.

    ``output_name`` defaults to the base name of the input file. Pieces are
    created exclusively: an existing file with a piece's name aborts the run.
    """
    run_id = run_id or new_run_id()
    if output_name is None:
        output_name = os.path.basename(input_path)

    # Fail on bad arguments before touching the filesystem
    sink = FilePieceSink(output_dir, output_name, num_pieces)
    if chunk_size < 1:
        raise ConfigurationError("Chunk size should be at least 1 byte")

    start_time = time.time()
    source, input_size = open_input(input_path)

    log.info(
        "split.start",
        run_id=run_id,
        input=str(input_path),
        input_size=input_size,
        num_pieces=num_pieces,
        chunk_size=chunk_size,
        format=fmt.name,
    )
    _emit(emit, "split.start", run_id=run_id, bytes=input_size, num_pieces=num_pieces)

    try:
        with source:
            pieces = split_stream(
                source,
                input_size,
                num_pieces,
                sink,
                chunk_size=chunk_size,
                fmt=fmt,
                emit=emit,
                on_piece=on_piece,
            )
    except Exception as e:
        log.error("split.failed", run_id=run_id, error=str(e), error_type=type(e).__name__)
        _emit(emit, "split.error", run_id=run_id, reason=str(e))
        raise

    elapsed = time.time() - start_time
    log.info("split.complete", run_id=run_id, pieces=len(pieces), elapsed=round(elapsed, 3))
    _emit(
        emit,
        "split.complete",
        run_id=run_id,
        bytes=input_size,
        duration_ms=int(elapsed * 1000),
    )

    return SplitResult(
        run_id=run_id,
        input_path=str(input_path),
        input_size=input_size,
        chunk_size=chunk_size,
        num_pieces=num_pieces,
        pieces=pieces,
        elapsed=elapsed,
    )
