"""Global test configuration for recsplit tests."""

import io
from pathlib import Path

import pytest

# Two FASTA records, 6 bytes each
TWO_RECORDS = b">a\nAC\n>b\nGT\n"


def _fasta_records(num_records: int) -> bytes:
    """Deterministic FASTA input with records of varying length (at most 28 bytes)."""
    records = []
    for i in range(num_records):
        records.append(f">seq{i}\n{'ACGT' * (i % 5 + 1)}\n")
    return "".join(records).encode("ascii")


class MemoryPieceSink:
    """Piece sink keeping pieces in memory."""

    def __init__(self):
        self.pieces: list[bytes] = []
        self.created: list[int] = []

    def create_piece(self, index: int):
        self.created.append(index)
        return io.BytesIO()

    def finalize_piece(self, stream, index: int) -> int:
        data = stream.getvalue()
        stream.close()
        self.pieces.append(data)
        return len(data)

    def path_for(self, index: int) -> Path:
        return Path(f"memory.{index}")


@pytest.fixture
def make_fasta():
    return _fasta_records


@pytest.fixture
def memory_sink():
    return MemoryPieceSink()


@pytest.fixture
def fasta_file(tmp_path):
    """Write FASTA bytes to ``tmp_path/input.fa`` and return the path."""

    def _write(data: bytes = TWO_RECORDS, name: str = "input.fa") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run in an empty directory and restore global settings afterwards."""
    from recsplit.core import config as config_module

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "SETTINGS", config_module.Settings())
    for var in ["RECSPLIT_CHUNK_SIZE", "RECSPLIT_OUTPUT_DIR", "RECSPLIT_FORMAT", "RECSPLIT_EVENTS"]:
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
