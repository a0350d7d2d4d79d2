# pstretch/core/overlap.py

"""
Overlap-add of consecutive processed windows at 50% overlap.
"""

from typing import Optional

import numpy as np
from numpy.typing import NDArray


def overlap_add(
    current: NDArray[np.float32],
    prev: NDArray[np.float32],
    added: Optional[NDArray[np.float32]] = None
) -> NDArray[np.float32]:
    """
    Sums the first half of `current` with the second half of `prev`.

    Args:
        current: The window processed in this iteration (length N).
        prev: The window processed in the previous iteration (length N).
        added: Optional output buffer of length N/2, written in place.

    Returns:
        The N/2-sample output block (`added` itself when it was given).

    Raises:
        ValueError: If the buffer lengths do not line up.
    """
    if len(current) != len(prev):
        raise ValueError(f"Overlap-add buffers differ in length: {len(current)} != {len(prev)}.")
    half = len(current) // 2
    if added is None:
        added = np.empty(half, dtype=np.result_type(current, prev))
    elif len(added) != half:
        raise ValueError(f"Overlap-add output must hold {half} samples, got {len(added)}.")

    np.add(current[:half], prev[len(prev) - half:], out=added)
    return added
