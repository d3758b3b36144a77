"""Tests for Rich progress rendering."""

import io

import pytest

from recsplit.core import progress as progress_module
from recsplit.core.progress import ProgressRenderer, init_progress

pytestmark = pytest.mark.unit


def _renderer(**kwargs):
    buffer = io.StringIO()
    return ProgressRenderer(file=buffer, no_color=True, **kwargs), buffer


def test_banners_when_enabled():
    progress, buffer = _renderer(enabled=True)

    progress.start_banner("run-1", "input.fa", 12, 2, 4096, "FASTA")
    progress.piece_written(0, 6, "input.fa.0")
    progress.finish_banner("run-1", [(0, "input.fa.0", 6), (1, "input.fa.1", 6)], 0.5)

    out = buffer.getvalue()
    assert "run-1" in out
    assert "Split Configuration" in out
    assert "1/2" in out
    assert "50.0%" in out


def test_silent_when_disabled():
    progress, buffer = _renderer(enabled=False)

    progress.start_banner("run-1", "input.fa", 12, 2, 4096, "FASTA")
    progress.piece_written(0, 6, "input.fa.0")
    progress.finish_banner("run-1", [(0, "input.fa.0", 6)], 0.5)

    assert buffer.getvalue() == ""
    assert progress.pieces_written == 1
    assert progress.bytes_written == 6


def test_quiet_pretty_keeps_piece_lines():
    progress, buffer = _renderer(enabled=True, quiet_pretty=True)

    progress.start_banner("run-1", "input.fa", 12, 2, 4096, "FASTA")
    progress.piece_written(0, 6, "input.fa.0")

    out = buffer.getvalue()
    assert "Split Configuration" not in out
    assert "input.fa.0" in out


def test_one_line_summary():
    progress, _ = _renderer(enabled=False)
    assert progress.one_line_summary("run-1", 2, 2048, 1.25) == "run-1: 2 pieces, 2.0K (2048 bytes) in 1.2s"


def test_init_progress_returns_a_new_renderer():
    first = init_progress(enabled=False)
    second = init_progress(enabled=False, quiet_pretty=True)

    assert first is not second
    assert second.quiet_pretty
    assert not hasattr(progress_module, "_progress")
