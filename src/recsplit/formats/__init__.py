"""
Record formats understood by the splitter.

Supporting a new grammar means registering another ``RecordFormat``; the
boundary search itself does not change.
"""

from ..core.errors import ConfigurationError
from .base import RecordFormat
from .fasta import FASTA

FORMATS: dict[str, RecordFormat] = {
    FASTA.name: FASTA,
}


def get_format(name: str) -> RecordFormat:
    """Look up a registered format by name (case-insensitive)."""
    try:
        return FORMATS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(FORMATS))
        raise ConfigurationError(f"Unknown record format {name!r}. Supported: {known}") from None


__all__ = ["FASTA", "FORMATS", "RecordFormat", "get_format"]
