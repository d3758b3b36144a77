"""Tests for piece naming and file handling."""

import pytest

from recsplit.core.errors import ConfigurationError, SplitIOError
from recsplit.split.pieces import FilePieceSink, open_input, piece_number_width, piece_path

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "num_pieces,width",
    [(2, 1), (10, 1), (11, 2), (100, 2), (101, 3)],
)
def test_piece_number_width(num_pieces, width):
    assert piece_number_width(num_pieces) == width


def test_piece_number_width_needs_two_pieces():
    with pytest.raises(ConfigurationError):
        piece_number_width(1)


def test_piece_path_is_zero_padded(tmp_path):
    assert piece_path(tmp_path, "x.fa", 3, 2) == tmp_path / "x.fa.03"
    assert piece_path(".", "x.fa", 12, 2).name == "x.fa.12"


def test_open_input_reports_size(tmp_path):
    path = tmp_path / "in.fa"
    path.write_bytes(b">a\nAC\n")

    source, size = open_input(path)
    with source:
        assert size == 6
        assert source.read() == b">a\nAC\n"


def test_open_input_missing(tmp_path):
    with pytest.raises(SplitIOError, match="Cannot open file"):
        open_input(tmp_path / "nope.fa")


class TestFilePieceSink:
    def test_create_and_finalize(self, tmp_path):
        sink = FilePieceSink(tmp_path, "in.fa", 11)

        stream = sink.create_piece(4)
        stream.write(b">a\nAC\n")
        size = sink.finalize_piece(stream, 4)

        assert size == 6
        assert stream.closed
        assert (tmp_path / "in.fa.04").read_bytes() == b">a\nAC\n"
        assert sink.paths == [tmp_path / "in.fa.04"]

    def test_existing_file_is_never_overwritten(self, tmp_path):
        existing = tmp_path / "in.fa.0"
        existing.write_bytes(b"keep")
        sink = FilePieceSink(tmp_path, "in.fa", 2)

        with pytest.raises(SplitIOError, match="Cannot create output file"):
            sink.create_piece(0)

        assert existing.read_bytes() == b"keep"
        assert sink.paths == []

    def test_missing_output_directory(self, tmp_path):
        sink = FilePieceSink(tmp_path / "absent", "in.fa", 2)
        with pytest.raises(SplitIOError):
            sink.create_piece(0)

    def test_rejects_single_piece(self, tmp_path):
        with pytest.raises(ConfigurationError):
            FilePieceSink(tmp_path, "in.fa", 1)
