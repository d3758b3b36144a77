"""
Record boundary search inside a buffered window.
"""

from typing import Optional

from ..formats import FASTA, RecordFormat


def locate_boundary(
    window: memoryview | bytes,
    projected_bound: int,
    window_size: int,
    is_first_block: bool,
    fmt: RecordFormat = FASTA,
) -> Optional[int]:
    """
    Find the record boundary closest to a projected bound.

    The search walks outward from ``projected_bound`` one byte at a time in
    both directions and stops at the first record bound it meets. The left
    byte is checked before the right one at every radius, so ties resolve
    to a piece that is smaller than projected: the last piece is expected
    to be the smallest, and keeping the others small leaves it more room.

    Args:
        window: Bytes of the active window (indexed as ints)
        projected_bound: Desired offset of the last byte to emit
        window_size: Number of valid bytes in ``window``
        is_first_block: True when the window opens a new output piece, in
            which case at least one byte of it must be emitted
        fmt: Record grammar providing marker/terminator predicates

    Returns:
        Offset of the last byte of a record, from ``-1`` to
        ``window_size - 1``, or None if the window holds no record bound.
        ``-1`` means the window starts with a record and the current piece
        should be closed without taking any of it; it is never returned
        for a first block.
    """
    assert projected_bound >= 0
    assert projected_bound < window_size

    distance_to_l_bound = projected_bound + 1
    distance_to_u_bound = window_size - projected_bound
    num_terminators = 0

    for i in range(max(distance_to_l_bound, distance_to_u_bound)):
        left_in_range = i < distance_to_l_bound
        right_in_range = i < distance_to_u_bound and i != 0

        if left_in_range and fmt.is_marker(window[projected_bound - i]):
            # A marker at offset 0 of a first block would leave the new
            # piece empty
            if i < distance_to_l_bound - 1 or not is_first_block:
                return projected_bound - i - 1

        # At radius 0 the right byte is the left byte
        if right_in_range and fmt.is_marker(window[projected_bound + i]):
            return projected_bound + i - 1

        if left_in_range and fmt.is_terminator(window[projected_bound - i]):
            num_terminators += 1

        if right_in_range and fmt.is_terminator(window[projected_bound + i]):
            num_terminators += 1

        # The scan reached the end of the window and the window ends with
        # the last terminator of a record
        if (
            num_terminators == fmt.terminators_per_record
            and i >= distance_to_u_bound - 1
            and fmt.is_terminator(window[window_size - 1])
        ):
            return window_size - 1

        assert num_terminators <= fmt.terminators_per_record

    return None
