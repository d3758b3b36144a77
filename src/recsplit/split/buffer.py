"""
Double-sized working buffer acting as a sliding window over the input.

Layout rules:
1) input is always read into the upper half of the buffer
2) the active data is the inclusive range [data_start, data_end]
3) once the left edge of the active data moves into the upper half, the
   residual bytes are moved so that their right edge meets the end of the
   lower half, which keeps the active data contiguous with the next read
4) an upper half is only refilled after it has been fully drained
"""

from typing import BinaryIO

from ..core.errors import SplitIOError


class WorkingBuffer:
    """Buffer of ``2 * chunk_size`` bytes with an active data window.

    The window may span the whole buffer: a piece that closes without
    taking any bytes leaves a full chunk to compact before the next refill.
    """

    def __init__(self, chunk_size: int):
        self.chunk_size = chunk_size
        self.data = bytearray(2 * chunk_size)
        self.data_start = chunk_size
        self.data_end = chunk_size - 1

    @property
    def active_size(self) -> int:
        return self.data_end - self.data_start + 1

    @property
    def is_empty(self) -> bool:
        return self.data_start > self.data_end

    @property
    def needs_refill(self) -> bool:
        """True when the upper half holds no active data."""
        return self.data_end == self.chunk_size - 1

    def check_invariants(self) -> None:
        assert self.data_end >= self.chunk_size - 1
        assert self.data_start <= self.chunk_size

    def fill_upper_half(self, source: BinaryIO, bytes_not_read: int) -> int:
        """
        Read the next chunk of input into the upper half.

        Reads ``chunk_size`` bytes, or fewer at the end of the input. Anything
        the current piece doesn't take is used to start the next one.

        Returns:
            Number of bytes read (0 once the input is exhausted).

        Raises:
            SplitIOError: if the read fails or returns fewer bytes than the
                input is known to still hold.
        """
        if not bytes_not_read:
            return 0

        io_size = min(self.chunk_size, bytes_not_read)
        upper = memoryview(self.data)[self.chunk_size : self.chunk_size + io_size]

        try:
            bytes_read = source.readinto(upper)
        except OSError as e:
            raise SplitIOError(f"Cannot read data from the input file: {e}") from e
        finally:
            upper.release()

        if bytes_read != io_size:
            raise SplitIOError(
                f"Read {bytes_read or 0} bytes from the input file. {io_size} bytes "
                "were expected. Is it a regular file?"
            )

        self.data_end += bytes_read
        return bytes_read

    def view(self, start: int, end: int) -> memoryview:
        """Read-only view of the inclusive range [start, end]."""
        return memoryview(self.data)[start : end + 1].toreadonly()

    def consume(self, bound: int, input_exhausted: bool) -> None:
        """
        Drop active bytes up to and including ``bound`` and realign the window.

        Args:
            bound: Last offset that has been transferred (may be
                ``data_start - 1`` when nothing was transferred)
            input_exhausted: All input has been read and assigned to pieces
        """
        self.data_start = bound + 1

        # Move residual data from the upper half to the end of the lower half
        if self.data_start >= self.chunk_size and self.data_end - self.data_start >= 0:
            residual = self.active_size
            self.data[self.chunk_size - residual : self.chunk_size] = self.data[
                self.data_start : self.data_end + 1
            ]
            self.data_start = self.chunk_size - residual
            self.data_end = self.chunk_size - 1

        # No data remains, start over from the canonical empty window
        if self.data_start > self.data_end:
            assert self.data_start == 2 * self.chunk_size or input_exhausted
            assert self.data_end == self.data_start - 1
            self.reset()

    def reset(self) -> None:
        self.data_start = self.chunk_size
        self.data_end = self.chunk_size - 1
