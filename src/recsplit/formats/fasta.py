r"""
FASTA records in their simplest form:

    >IDENTIFIER\n
    SEQUENCE\n

Every record starts with ``>`` and carries exactly two newlines.
"""

from .base import RecordFormat

FASTA = RecordFormat(
    name="fasta",
    description="FASTA (single-line sequences)",
    marker=ord(">"),
    terminator=ord("\n"),
    terminators_per_record=2,
)
