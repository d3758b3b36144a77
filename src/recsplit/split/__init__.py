"""
Record-aware file splitting.

This package provides:
- Boundary search that moves a projected cut to the nearest record bound
- Transfer-bound decisions over a sliding double-chunk buffer
- Streaming split of a file into balanced pieces of whole records
- Verification of produced pieces against the input
"""

from .boundaries import locate_boundary
from .bounds import compute_transfer_bound
from .buffer import WorkingBuffer
from .engine import DEFAULT_CHUNK_SIZE, SplitResult, piece_budget, split_file, split_stream
from .pieces import FilePieceSink, PieceResult, open_input, piece_number_width, piece_path
from .verify import VerifyReport, discover_pieces, verify_pieces

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "FilePieceSink",
    "PieceResult",
    "SplitResult",
    "VerifyReport",
    "WorkingBuffer",
    "compute_transfer_bound",
    "discover_pieces",
    "locate_boundary",
    "open_input",
    "piece_budget",
    "piece_number_width",
    "piece_path",
    "split_file",
    "split_stream",
    "verify_pieces",
]
