# pstretch/core/phase.py

"""
Spectral phase randomization: keeps the magnitude spectrum of a block and
replaces every bin's phase with a uniformly random angle.
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.fft import irfft, rfft

logger = logging.getLogger(__name__)

_TWO_PI = 2.0 * np.pi


def randomize_phase(
    block: NDArray[np.float32],
    rng: np.random.Generator,
    out: Optional[NDArray[np.float32]] = None
) -> NDArray[np.float32]:
    """
    Re-synthesizes a real block with random phases and its original magnitudes.

    The forward and inverse transforms are both unnormalised; the result is
    scaled by 1/N afterwards.

    Args:
        block: Real time-domain block of even length N.
        rng: Source of the phase angles, one draw per frequency bin.
        out: Optional float32 buffer of length N receiving the result in place.

    Returns:
        The re-synthesized time-domain block (float32, length N).

    Raises:
        ValueError: If the block is not 1D or has odd length, or `out` does not match.
    """
    if block.ndim != 1:
        raise ValueError("Phase randomization expects a 1D block.")
    window_size = block.shape[0]
    if window_size == 0 or window_size % 2 != 0:
        raise ValueError(f"Phase randomization needs an even, non-zero block length, got {window_size}.")
    if out is not None and out.shape != block.shape:
        raise ValueError(f"Output buffer shape {out.shape} does not match block shape {block.shape}.")

    spectrum = rfft(block)
    magnitude = np.abs(spectrum)
    theta = rng.uniform(0.0, _TWO_PI, size=magnitude.shape[0]).astype(magnitude.dtype)
    spectrum = magnitude * np.exp(1j * theta)

    # DC and Nyquist bins of a real signal are purely real
    spectrum[0] = spectrum[0].real
    spectrum[-1] = spectrum[-1].real

    resynth = irfft(spectrum, n=window_size, norm="forward")
    resynth *= np.float32(1.0 / window_size)

    if out is None:
        return resynth.astype(np.float32)
    out[:] = resynth
    return out
