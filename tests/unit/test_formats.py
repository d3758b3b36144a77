"""Tests for the record format registry."""

import pytest

from recsplit.core.errors import ConfigurationError
from recsplit.formats import FASTA, FORMATS, get_format

pytestmark = pytest.mark.unit


def test_fasta_grammar():
    assert FASTA.is_marker(ord(">"))
    assert FASTA.is_terminator(ord("\n"))
    assert not FASTA.is_marker(ord("A"))
    assert FASTA.terminators_per_record == 2


def test_lookup_is_case_insensitive():
    assert get_format("FASTA") is FASTA
    assert get_format("fasta") is FORMATS["fasta"]


def test_unknown_format_lists_supported():
    with pytest.raises(ConfigurationError, match="Supported: fasta"):
        get_format("genbank")


def test_formats_are_immutable():
    with pytest.raises(AttributeError):
        FASTA.marker = ord("@")
