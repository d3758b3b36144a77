"""Tests for transfer-bound decisions over the working buffer."""

import pytest

from recsplit.core.errors import BoundaryNotFoundError, ConfigurationError
from recsplit.split import bounds
from recsplit.split.bounds import compute_transfer_bound

pytestmark = pytest.mark.unit

TWO = b">a\nAC\n>b\nGT\n"


def _buffer(chunk_size: int, data: bytes, offset: int) -> bytearray:
    buffer = bytearray(2 * chunk_size)
    buffer[offset : offset + len(data)] = data
    return buffer


class TestNotEnoughData:
    def test_full_chunk_when_window_holds_a_chunk(self):
        buffer = _buffer(5, b">a\nAC", 5)
        assert compute_transfer_bound(buffer, 5, 5, 9, 6, True, False, False) == 9

    def test_one_chunk_out_of_a_larger_window(self):
        # 7 active bytes starting in the lower half, piece wants 10
        buffer = _buffer(5, b"0123456", 3)
        assert compute_transfer_bound(buffer, 5, 3, 9, 10, False, False, False) == 7

    def test_everything_when_less_than_a_chunk(self):
        buffer = _buffer(8, b">a\n", 8)
        assert compute_transfer_bound(buffer, 8, 8, 10, 10, True, True, False) == 10


class TestBoundarySearch:
    def test_boundary_translated_to_buffer_offsets(self):
        buffer = _buffer(16, TWO, 16)
        assert compute_transfer_bound(buffer, 16, 16, 27, 6, True, True, False) == 21

    def test_zero_bytes_when_window_starts_a_record(self):
        buffer = _buffer(16, TWO, 16)
        assert compute_transfer_bound(buffer, 16, 16, 27, 4, False, True, False) == 15

    def test_first_block_takes_at_least_one_record(self):
        buffer = _buffer(16, TWO, 16)
        assert compute_transfer_bound(buffer, 16, 16, 27, 4, True, True, False) == 21

    def test_not_found_at_end_of_input_flushes_window(self):
        buffer = _buffer(8, b"ACGT", 8)
        assert compute_transfer_bound(buffer, 8, 8, 11, 2, False, True, False) == 11

    def test_not_found_with_input_left_is_fatal(self):
        buffer = _buffer(8, b"AAAAAAAA", 8)
        with pytest.raises(BoundaryNotFoundError):
            compute_transfer_bound(buffer, 8, 8, 15, 7, False, False, False)

    def test_not_found_is_a_configuration_error(self):
        assert issubclass(BoundaryNotFoundError, ConfigurationError)


class TestLastPiece:
    def test_last_piece_takes_the_whole_window(self):
        # A balanced cut would land on offset 5; the last piece takes all
        buffer = _buffer(16, TWO, 16)
        assert compute_transfer_bound(buffer, 16, 16, 27, 12, True, True, True) == 27

    def test_last_piece_skips_the_search(self, monkeypatch):
        calls = []

        def fake_locate(*args, **kwargs):
            calls.append(args)
            return 0

        monkeypatch.setattr(bounds, "locate_boundary", fake_locate)
        buffer = _buffer(16, TWO, 16)
        compute_transfer_bound(buffer, 16, 16, 27, 12, False, True, True)
        assert calls == []

    def test_last_piece_budget_must_match_window(self):
        buffer = _buffer(16, TWO, 16)
        with pytest.raises(AssertionError):
            compute_transfer_bound(buffer, 16, 16, 27, 11, False, True, True)


class TestInvariants:
    def test_window_may_fill_the_whole_buffer(self):
        # Left after a zero-byte close compacts a full chunk and refills
        buffer = bytearray(b">a\n\n>b\n\n")
        assert compute_transfer_bound(buffer, 4, 0, 7, 4, False, False, False) == 3

    def test_window_must_fit_the_buffer(self):
        buffer = bytearray(8)
        with pytest.raises(AssertionError):
            compute_transfer_bound(buffer, 4, 0, 8, 9, False, False, False)
