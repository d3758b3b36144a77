"""
Verification of split output against its input.
"""

import hashlib
from pathlib import Path
from typing import Dict, List, NamedTuple

from ..core.errors import SplitIOError
from ..formats import FASTA, RecordFormat
from .pieces import piece_number_width, piece_path

READ_SIZE = 1024 * 1024


class PieceReport(NamedTuple):
    index: int
    path: str
    size: int
    records: int
    starts_with_marker: bool


class VerifyReport(NamedTuple):
    input_path: str
    input_size: int
    input_sha256: str
    pieces_sha256: str
    pieces: List[PieceReport]
    violations: List[Dict]

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def total_size(self) -> int:
        return sum(p.size for p in self.pieces)


def discover_pieces(output_dir: str | Path, output_name: str, num_pieces: int) -> List[Path]:
    """Paths of the pieces a split with these parameters produces."""
    width = piece_number_width(num_pieces)
    return [piece_path(output_dir, output_name, i, width) for i in range(num_pieces)]


def _hash_file(path: Path, digest) -> int:
    size = 0
    try:
        with open(path, "rb") as f:
            while block := f.read(READ_SIZE):
                digest.update(block)
                size += len(block)
    except OSError as e:
        raise SplitIOError(f'Cannot read "{path}": {e.strerror or e}') from e
    return size


def _scan_piece(path: Path, digest, fmt: RecordFormat) -> tuple[int, int, bool]:
    """Hash a piece and count the records it holds.

    A record starts at a marker that opens the piece or follows a terminator.
    """
    size = 0
    records = 0
    first_byte = None
    prev = fmt.terminator
    try:
        with open(path, "rb") as f:
            while block := f.read(READ_SIZE):
                digest.update(block)
                if first_byte is None:
                    first_byte = block[0]
                for byte in block:
                    if fmt.is_marker(byte) and fmt.is_terminator(prev):
                        records += 1
                    prev = byte
                size += len(block)
    except OSError as e:
        raise SplitIOError(f'Cannot read "{path}": {e.strerror or e}') from e

    return size, records, first_byte is not None and fmt.is_marker(first_byte)


def verify_pieces(
    input_path: str | Path,
    piece_paths: List[Path],
    fmt: RecordFormat = FASTA,
) -> VerifyReport:
    """
    Check that pieces reproduce the input and hold whole records only.

    Args:
        input_path: The file that was split
        piece_paths: Pieces in order
        fmt: Record grammar the split used

    Returns:
        VerifyReport; ``violations`` is empty when the split is sound.
    """
    violations: List[Dict] = []

    input_digest = hashlib.sha256()
    input_size = _hash_file(Path(input_path), input_digest)

    pieces_digest = hashlib.sha256()
    reports: List[PieceReport] = []

    for index, path in enumerate(piece_paths):
        if not Path(path).exists():
            violations.append({"piece": index, "path": str(path), "reason": "missing"})
            continue

        size, records, starts_with_marker = _scan_piece(Path(path), pieces_digest, fmt)
        reports.append(PieceReport(index, str(path), size, records, starts_with_marker))

        # Every later piece must open with a record so none is cut in two
        if index > 0 and size and not starts_with_marker:
            violations.append({"piece": index, "path": str(path), "reason": "split_record"})

    total_size = sum(r.size for r in reports)
    if total_size != input_size:
        violations.append(
            {
                "reason": "size_mismatch",
                "input_size": input_size,
                "pieces_size": total_size,
            }
        )
    elif pieces_digest.hexdigest() != input_digest.hexdigest():
        violations.append({"reason": "content_mismatch"})

    return VerifyReport(
        input_path=str(input_path),
        input_size=input_size,
        input_sha256=input_digest.hexdigest(),
        pieces_sha256=pieces_digest.hexdigest(),
        pieces=reports,
        violations=violations,
    )
