# pstretch/core/stretch.py

"""
The paulstretch engine: extreme time stretching by re-synthesizing
overlapping windows with randomized phase spectra.

The engine works on one channel at a time. `paulstretch_multichannel`
fans a list of channels out over independent engine runs.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .overlap import overlap_add
from .phase import randomize_phase
from .window import (
    WINDOW_SHAPES,
    WindowShape,
    compute_end_size,
    compute_inv_buf,
    compute_linspace,
    compute_window_func,
    compute_window_size,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
ChannelCallback = Callable[[int, int], None]
SampleInput = Union[NDArray[np.floating], Sequence[float]]


def _check_parameters(
    sample_rate: int,
    window_size_secs: float,
    stretch_factor: float,
    window_shape: str
) -> None:
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}.")
    if not math.isfinite(stretch_factor) or stretch_factor <= 0:
        raise ValueError(f"Stretch factor must be a positive finite number, got {stretch_factor}.")
    if not math.isfinite(window_size_secs) or window_size_secs < 0:
        raise ValueError(f"Window size must be a non-negative number of seconds, got {window_size_secs}.")
    if window_shape not in WINDOW_SHAPES:
        raise ValueError(f"Unknown window shape '{window_shape}'. Choose one of {WINDOW_SHAPES}.")


def apply_end_fade(samples: NDArray[np.float32], end_size: int) -> NDArray[np.float32]:
    """
    Fades the tail of `samples` to zero in place.

    The last sample is scaled by the first value of linspace(0, 1, end_size),
    the one before it by the second, and so on. Inputs shorter than
    `end_size` only see the head of the ramp.
    """
    ramp = compute_linspace(0.0, 1.0, end_size)
    count = min(len(samples), end_size)
    if count:
        samples[len(samples) - count:] *= ramp[:count][::-1]
    return samples


def paulstretch(
    samples: SampleInput,
    sample_rate: int,
    window_size_secs: float,
    stretch_factor: float,
    progress: Optional[ProgressCallback] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    window_shape: WindowShape = "hann"
) -> NDArray[np.float32]:
    """
    Stretches a single channel without changing its pitch.

    The input is owned by the engine for the duration of the call: a writeable
    float32 array is faded out in place, anything else (read-only arrays,
    other dtypes, sequences) is copied to a new float32 array first.

    Args:
        samples: One channel of samples, nominally in [-1.0, 1.0].
        sample_rate: Sampling rate in Hz.
        window_size_secs: Analysis window length in seconds (at least 16 samples are used).
        stretch_factor: Output/input duration ratio (>1 stretches, <1 compresses).
        progress: Called as progress(iteration, max_iterations) at the start of
                  every iteration, iteration counting from 0.
        rng: Generator for the random phases. Defaults to np.random.default_rng(seed).
        seed: Seed used only when `rng` is not given.
        window_shape: 'hann' (with inverse amplitude-modulation correction) or
                      'power_cosine' (no correction table).

    Returns:
        The stretched channel (float32). Its length is a multiple of half the
        window size; the block computed by the final iteration is not emitted.

    Raises:
        ValueError: On empty or non-1D input, or invalid parameters.

    Example:
        >>> out = paulstretch(np.zeros(44100, dtype=np.float32), 44100, 0.25, 8.0, seed=1)
    """
    _check_parameters(sample_rate, window_size_secs, stretch_factor, window_shape)

    samples = np.asarray(samples, dtype=np.float32)
    if not samples.flags.writeable:
        samples = samples.copy()
    if samples.ndim != 1:
        raise ValueError("Input samples must be a 1D array (one channel).")
    n_samples = samples.shape[0]
    if n_samples == 0:
        raise ValueError("Cannot stretch an empty sample sequence.")

    if rng is None:
        rng = np.random.default_rng(seed)

    logger.info("initialising...")

    end_size = compute_end_size(sample_rate)
    apply_end_fade(samples, end_size)

    window_size = compute_window_size(window_size_secs, sample_rate)
    half_window_size = window_size // 2

    window = np.zeros(window_size, dtype=np.float32)
    prev_window = np.zeros(window_size, dtype=np.float32)
    out = np.zeros(half_window_size, dtype=np.float32)

    window_func = compute_window_func(window_size, window_shape)
    inv_buf = compute_inv_buf(window_size) if window_shape == "hann" else None

    start = 0.0
    step = half_window_size / stretch_factor
    if not math.isfinite(step):
        raise ValueError(f"Stretch factor {stretch_factor} is too small: the read step overflows.")
    max_iterations = math.ceil(n_samples / step)

    logger.debug(
        f"window_size={window_size}, half_window_size={half_window_size}, end_size={end_size}, "
        f"step={step:.4f}, max_iterations={max_iterations}, window_shape='{window_shape}'"
    )

    blocks: List[NDArray[np.float32]] = []

    logger.info("processing...")

    iteration = 0
    while True:
        if progress is not None:
            progress(iteration, max_iterations)

        # Grab window_size samples, zero-padding past the end of the input
        pos = int(start)
        remaining = n_samples - pos
        if remaining > window_size:
            window[:] = samples[pos:pos + window_size]
        else:
            window[remaining:] = 0.0
            window[:remaining] = samples[pos:]

        window *= window_func
        randomize_phase(window, rng, out=window)
        window *= window_func

        overlap_add(window, prev_window, out)
        prev_window[:] = window

        if inv_buf is not None:
            out *= inv_buf

        np.clip(out, -1.0, 1.0, out=out)

        start += step

        # The block computed on the terminal iteration is dropped
        if int(start) >= n_samples:
            break

        blocks.append(out.copy())
        iteration += 1

    logger.info("done!")

    if not blocks:
        return np.zeros(0, dtype=np.float32)
    return np.concatenate(blocks)


def paulstretch_multichannel(
    channels: Sequence[SampleInput],
    sample_rate: int,
    window_size_secs: float,
    stretch_factor: float,
    progress: Optional[ProgressCallback] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    window_shape: WindowShape = "hann",
    on_channel: Optional[ChannelCallback] = None
) -> List[NDArray[np.float32]]:
    """
    Applies `paulstretch` to every channel independently and in order.

    Channels share one random generator, consumed channel after channel, so a
    seeded run is reproducible. Phases are not correlated across channels.
    The progress callback restarts from iteration 0 for each channel;
    `on_channel(index, count)` is called before each channel starts.

    Returns:
        The stretched channels, in input order.
    """
    if len(channels) == 0:
        raise ValueError("At least one channel is required.")

    if rng is None:
        rng = np.random.default_rng(seed)

    stretched: List[NDArray[np.float32]] = []
    for index, channel in enumerate(channels):
        logger.debug(f"Stretching channel {index + 1}/{len(channels)}")
        if on_channel is not None:
            on_channel(index, len(channels))
        stretched.append(
            paulstretch(
                channel,
                sample_rate,
                window_size_secs,
                stretch_factor,
                progress=progress,
                rng=rng,
                window_shape=window_shape,
            )
        )
    return stretched
