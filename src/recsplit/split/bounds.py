"""
Deciding how much of the active window goes to the current piece.
"""

from ..core.errors import BoundaryNotFoundError
from ..formats import FASTA, RecordFormat
from .boundaries import locate_boundary


def compute_transfer_bound(
    buffer: bytearray | memoryview,
    chunk_size: int,
    data_start: int,
    data_end: int,
    projected_max: int,
    is_first_block: bool,
    is_end_of_input: bool,
    is_last_piece: bool,
    fmt: RecordFormat = FASTA,
) -> int:
    """
    Determine the last buffer offset to transfer to the current piece.

    Args:
        buffer: The double-sized working buffer
        chunk_size: Size of one half of ``buffer``
        data_start: First active offset (inclusive)
        data_end: Last active offset (inclusive)
        projected_max: Bytes the current piece still wants
        is_first_block: Nothing has been written to the piece yet
        is_end_of_input: The whole input has been loaded into the buffer
        is_last_piece: The piece is the final one of the run
        fmt: Record grammar used for the boundary search

    Returns:
        Absolute buffer offset of the last byte to transfer. ``data_start - 1``
        means the piece is complete and takes nothing from the window.

    Raises:
        BoundaryNotFoundError: if the window holds no record bound and more
            input remains, i.e. some record is bigger than the chunk size.
    """
    active_data_size = data_end - data_start + 1

    assert active_data_size <= 2 * chunk_size

    # Not enough buffered data to reach the projected piece end yet
    if projected_max > active_data_size:
        if active_data_size >= chunk_size:
            return data_start + chunk_size - 1
        return data_end

    # The last piece takes whatever remains, no search needed
    if is_last_piece:
        assert projected_max == active_data_size
        return data_end

    window = memoryview(buffer)[data_start : data_end + 1].toreadonly()
    bound = locate_boundary(window, projected_max - 1, active_data_size, is_first_block, fmt)

    if bound is not None:
        assert -1 <= bound < active_data_size
        assert bound != -1 or not is_first_block
        return data_start + bound

    if is_end_of_input:
        # Nothing left to search further; flush the window as is
        return data_end

    assert active_data_size >= chunk_size
    raise BoundaryNotFoundError(
        "No record bound found inside a data chunk. Chunk size should be "
        "bigger than the size of any record"
    )
