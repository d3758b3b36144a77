"""
Input/output file handling for split runs: opening the input, naming,
creating and finalizing output pieces.
"""

import os
from pathlib import Path
from typing import BinaryIO, NamedTuple

from ..core.errors import ConfigurationError, SplitIOError


class PieceResult(NamedTuple):
    """A finalized output piece."""

    index: int
    path: str
    size: int


def piece_number_width(num_pieces: int) -> int:
    """Number of decimal digits needed to write down ``num_pieces - 1``."""
    if num_pieces < 2:
        raise ConfigurationError("Number of pieces should be greater than 1")
    return len(str(num_pieces - 1))


def piece_path(output_dir: str | Path, output_name: str, index: int, width: int) -> Path:
    """Path of piece ``index``: ``<dir>/<name>.<index>`` with a zero-padded index."""
    return Path(output_dir) / f"{output_name}.{index:0{width}d}"


def open_input(path: str | Path) -> tuple[BinaryIO, int]:
    """
    Open the input file and determine its size.

    Returns:
        The open binary handle, positioned at offset 0, and the size in bytes.
    """
    try:
        source = open(path, "rb")
    except OSError as e:
        raise SplitIOError(f'Cannot open file "{path}": {e.strerror or e}') from e

    try:
        input_size = source.seek(0, os.SEEK_END)
        source.seek(0, os.SEEK_SET)
    except OSError as e:
        source.close()
        raise SplitIOError(f"Cannot seek input file: {e.strerror or e}") from e

    return source, input_size


class FilePieceSink:
    """Creates pieces as files in a directory and finalizes them durably."""

    def __init__(self, output_dir: str | Path, output_name: str, num_pieces: int):
        self.output_dir = Path(output_dir)
        self.output_name = output_name
        self.width = piece_number_width(num_pieces)
        self.paths: list[Path] = []

    def path_for(self, index: int) -> Path:
        return piece_path(self.output_dir, self.output_name, index, self.width)

    def create_piece(self, index: int) -> BinaryIO:
        """Create the file for piece ``index``; an existing file is never overwritten."""
        path = self.path_for(index)
        try:
            stream = open(path, "xb")
        except OSError as e:
            raise SplitIOError(f'Cannot create output file "{path}": {e.strerror or e}') from e

        self.paths.append(path)
        return stream

    def finalize_piece(self, stream: BinaryIO, index: int) -> int:
        """Sync the piece to persistent storage, close it and return its size."""
        try:
            piece_size = stream.seek(0, os.SEEK_END)
            stream.flush()
            os.fsync(stream.fileno())
        except OSError as e:
            raise SplitIOError(f"Cannot sync output file: {e.strerror or e}") from e
        finally:
            stream.close()

        return piece_size
