"""Size strings with binary unit suffixes (512B, 4K, 8M, 1G)."""

from .errors import SizeParseError

# The working buffer is twice the chunk size, so a chunk may use half the
# signed 64-bit range.
MAX_CHUNK_SIZE = (2**63 - 1) // 2

UNIT_SHIFTS = {
    "": 0,
    "B": 0,
    "K": 10,
    "M": 20,
    "G": 30,
}


def parse_size(text: str) -> int:
    """
    Convert a size string to a byte count.

    Accepts a non-negative decimal integer with an optional single-letter
    unit: B (bytes), K, M or G (powers of 1024), case-insensitive.
    Leading signs, whitespace and fractional values are rejected.

    Raises:
        SizeParseError: if the string is malformed or the value is too big.
    """
    if not text:
        raise SizeParseError("Integer with units is expected for chunk size")

    unit = ""
    digits = text
    if not text[-1].isdigit():
        unit = text[-1].upper()
        digits = text[:-1]

    if unit not in UNIT_SHIFTS:
        raise SizeParseError(f"Unexpected units identifier for chunk size: {text[-1]!r}")

    if not digits or not digits.isascii() or not digits.isdigit():
        raise SizeParseError("Integer with units is expected for chunk size")

    value = int(digits) << UNIT_SHIFTS[unit]
    if value > MAX_CHUNK_SIZE:
        raise SizeParseError(f"Chunk size is too big. Maximum size is {MAX_CHUNK_SIZE} bytes")

    return value


def format_size(size: int) -> str:
    """Render a byte count the way piece reports show it, e.g. ``1.0K (1024 bytes)``."""
    for unit, shift in (("G", 30), ("M", 20), ("K", 10)):
        if size >> shift:
            return f"{float(size >> shift):.1f}{unit} ({size} bytes)"
    return f"{size} bytes"
