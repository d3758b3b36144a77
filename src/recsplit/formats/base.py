"""Record grammar policy consumed by the boundary search."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RecordFormat:
    """A record grammar: a marker byte opens each record, which holds a
    fixed number of terminator bytes before the next marker."""

    name: str
    description: str
    marker: int
    terminator: int
    terminators_per_record: int

    def is_marker(self, byte: int) -> bool:
        return byte == self.marker

    def is_terminator(self, byte: int) -> bool:
        return byte == self.terminator
