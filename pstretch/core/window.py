# pstretch/core/window.py

"""
Window math for the stretch engine.

Derives the fade-out length, the FFT window length and the window tables
(analysis/synthesis shape and the inverse amplitude-modulation correction).
All tables are float32 to match the sample sequences they are applied to.
"""

import logging
from typing import Literal, Tuple

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

WindowShape = Literal["hann", "power_cosine"]
WINDOW_SHAPES: Tuple[str, ...] = ("hann", "power_cosine")

MIN_WINDOW_SIZE = 16
MIN_END_SIZE = 16


def compute_end_size(sample_rate: int) -> int:
    """
    Number of trailing input samples that receive the fade-out ramp.

    One twentieth of a second, but never fewer than 16 samples.
    """
    end_size = int(sample_rate) // 20
    return max(MIN_END_SIZE, end_size)


def compute_window_size(window_size_secs: float, sample_rate: int) -> int:
    """
    Converts a window duration into an even FFT length of at least 16 samples.

    Args:
        window_size_secs: Window duration in seconds.
        sample_rate: Sampling rate in Hz.

    Returns:
        Window length in samples (even, >= 16).
    """
    window_size = int(np.float32(window_size_secs) * np.float32(sample_rate))
    if window_size < MIN_WINDOW_SIZE:
        return MIN_WINDOW_SIZE
    return window_size - (window_size % 2)


def compute_linspace(start: float, end: float, n: int) -> NDArray[np.float32]:
    """n evenly spaced values from start to end, both inclusive."""
    if n < 2:
        raise ValueError(f"linspace needs at least 2 points, got {n}.")
    dx = np.float32(end - start) / np.float32(n - 1)
    return (np.float32(start) + np.arange(n, dtype=np.float32) * dx).astype(np.float32)


def compute_hann(window_size: int) -> NDArray[np.float32]:
    phase = np.arange(window_size, dtype=np.float32) * np.float32(2.0 * np.pi) / np.float32(window_size - 1)
    return (np.float32(0.5) - np.cos(phase) * np.float32(0.5)).astype(np.float32)


def compute_power_cosine(window_size: int) -> NDArray[np.float32]:
    # Approximates a Hann window with a steeper roll-off.
    x = compute_linspace(-1.0, 1.0, window_size)
    base = np.clip(np.float32(1.0) - x * x, 0.0, None)
    return np.power(base, np.float32(1.25)).astype(np.float32)


def compute_window_func(window_size: int, shape: WindowShape = "hann") -> NDArray[np.float32]:
    """
    Builds the analysis/synthesis window table.

    Args:
        window_size: Length of the table (the FFT window length).
        shape: 'hann' for the raised cosine, 'power_cosine' for (1 - x^2)^1.25
               over x in [-1, 1].

    Returns:
        Symmetric float32 table of length `window_size` peaking at the centre.

    Raises:
        ValueError: If the shape is unknown or the window is shorter than 2.
    """
    if window_size < 2:
        raise ValueError(f"Window size must be at least 2, got {window_size}.")
    if shape == "hann":
        return compute_hann(window_size)
    if shape == "power_cosine":
        return compute_power_cosine(window_size)
    raise ValueError(f"Unknown window shape '{shape}'. Choose one of {WINDOW_SHAPES}.")


def compute_inv_buf(window_size: int) -> NDArray[np.float32]:
    """
    Inverse amplitude-modulation table for the Hann scheme.

    Flattens the gain ripple left by 50%-overlapped, twice-applied Hann windows.
    Length is window_size / 2.
    """
    half = window_size // 2
    k = np.float32((1.0 + np.sqrt(0.5)) * 0.5)
    phase = np.arange(half, dtype=np.float32) * np.float32(2.0 * np.pi) / np.float32(half)
    return (k - (np.float32(1.0) - k) * np.cos(phase)).astype(np.float32)
