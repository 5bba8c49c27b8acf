"""
Integer position arithmetic for ordered siblings (categories within a menu,
items within a category).

Siblings are kept on a sparse integer grid spaced by POSITION_GAP so a
move only rewrites the moved row. When two neighbours end up adjacent
there is no integer left between them and the group must be rebalanced.
"""
import math
from typing import Any, Optional

POSITION_GAP = 10000
# largest value the INTEGER position columns hold on every backend
MAX_POSITION = 2**31 - 1


def sanitize_position(value: Any) -> int:
    """
    Coerce a client supplied position into a non-negative integer.

    Anything that is not a finite number becomes 0; fractional values are
    floored, negatives clamped to 0 and values past the column range
    clamped to MAX_POSITION.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return min(max(0, math.floor(number)), MAX_POSITION)


def compute_position_between(previous: Optional[Any] = None, next: Optional[Any] = None) -> Optional[int]:
    """
    Midpoint between two neighbours, or None when they are adjacent.

    A missing `previous` means inserting at the head (position 0 acts as
    the lower bound); a missing `next` leaves two gaps of room above
    `previous`, capped at MAX_POSITION. Odd gaps round toward `previous`.
    """
    prev_position = previous.position if previous is not None else 0
    if next is not None:
        next_position = next.position
    else:
        next_position = min(prev_position + POSITION_GAP * 2, MAX_POSITION + 1)
    gap = next_position - prev_position
    if gap <= 1:
        return None
    return prev_position + gap // 2
