# pstretch/core/audio/io.py

"""
Loading and saving of WAV files using soundfile.

Samples are exchanged with the stretch engine as one float32 array per channel,
normalised to approximately [-1.0, 1.0]. Integer formats are rescaled by the
largest positive value of their bit depth (127, 32767, 8388607, 2147483647),
float files pass through unchanged. Saving reverses the scaling exactly.
"""

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np
import soundfile as sf
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

SUPPORTED_CHANNELS = (1, 2)

# Largest positive integer value per bit depth
INT_SCALE: Dict[int, int] = {
    8: 127,
    16: 32767,
    24: 8388607,
    32: 2147483647,
}


class UnsupportedFormatError(ValueError):
    """Raised for bit depths, channel counts or encodings the I/O layer cannot handle."""


class SampleFormat(enum.Enum):
    INT = "int"
    FLOAT = "float"


# soundfile subtype -> (format, bit depth)
_SUBTYPE_INFO: Dict[str, Tuple[SampleFormat, int]] = {
    "PCM_U8": (SampleFormat.INT, 8),
    "PCM_S8": (SampleFormat.INT, 8),
    "PCM_16": (SampleFormat.INT, 16),
    "PCM_24": (SampleFormat.INT, 24),
    "PCM_32": (SampleFormat.INT, 32),
    "FLOAT": (SampleFormat.FLOAT, 32),
}

# (format, bit depth) -> subtype used when writing WAV (8 bit WAV is unsigned)
_WRITE_SUBTYPES: Dict[Tuple[SampleFormat, int], str] = {
    (SampleFormat.INT, 8): "PCM_U8",
    (SampleFormat.INT, 16): "PCM_16",
    (SampleFormat.INT, 24): "PCM_24",
    (SampleFormat.INT, 32): "PCM_32",
    (SampleFormat.FLOAT, 32): "FLOAT",
}


@dataclass
class WaveHeader:
    """Container-level description of a WAV file."""
    channels: int
    sample_rate: int
    bit_depth: int
    format: SampleFormat


@dataclass
class Wave:
    """A header plus one float32 sample array per channel."""
    header: WaveHeader
    data: List[NDArray[np.float32]] = field(default_factory=list)

    @property
    def n_frames(self) -> int:
        return len(self.data[0]) if self.data else 0

    @property
    def duration(self) -> float:
        return self.n_frames / self.header.sample_rate


def _check_channels(channels: int) -> None:
    if channels not in SUPPORTED_CHANNELS:
        raise UnsupportedFormatError(f"Unsupported number of channels ({channels}). Only mono and stereo are supported.")


def _check_bit_depth(header: WaveHeader) -> None:
    if header.format is SampleFormat.INT and header.bit_depth not in INT_SCALE:
        raise UnsupportedFormatError(f"Unrecognised bit depth: got {header.bit_depth}")
    if header.format is SampleFormat.FLOAT and header.bit_depth != 32:
        raise UnsupportedFormatError(f"Unrecognised float bit depth: got {header.bit_depth}")


def interleave(channels: Sequence[NDArray[np.float32]]) -> NDArray[np.float32]:
    """Merges per-channel arrays into one frame-ordered array (L R L R ...)."""
    _check_channels(len(channels))
    if len(channels) == 1:
        return np.asarray(channels[0], dtype=np.float32).copy()
    left = np.asarray(channels[0], dtype=np.float32)
    right = np.asarray(channels[1], dtype=np.float32)
    if left.shape != right.shape:
        raise ValueError(f"Channel lengths differ: {left.shape[0]} != {right.shape[0]}.")
    out = np.empty(2 * left.shape[0], dtype=np.float32)
    out[0::2] = left
    out[1::2] = right
    return out


def uninterleave(data: NDArray, channels: int) -> List[NDArray]:
    """Splits a frame-ordered array into one array per channel."""
    _check_channels(channels)
    data = np.asarray(data)
    if channels == 1:
        return [data.copy()]
    return [data[0::2].copy(), data[1::2].copy()]


def decode_samples(raw: NDArray, header: WaveHeader) -> NDArray[np.float32]:
    """
    Converts native sample values to normalised float32.

    Args:
        raw: Native integer values (e.g. -32768..32767 for 16 bit) or float samples.
        header: Describes the format and bit depth of `raw`.
    """
    _check_bit_depth(header)
    if header.format is SampleFormat.FLOAT:
        return np.asarray(raw, dtype=np.float32)
    scale = INT_SCALE[header.bit_depth]
    return (np.asarray(raw, dtype=np.float64) / scale).astype(np.float32)


def encode_samples(samples: NDArray[np.float32], header: WaveHeader) -> NDArray:
    """
    Converts normalised float samples back to native values for the header's format.

    Integer values are truncated toward zero and saturated to the bit depth's range.
    Float formats are returned as float32 unchanged.
    """
    _check_bit_depth(header)
    samples = np.asarray(samples)
    if header.format is SampleFormat.FLOAT:
        return samples.astype(np.float32)
    scale = INT_SCALE[header.bit_depth]
    values = np.trunc(samples.astype(np.float64) * scale)
    values = np.clip(values, -scale - 1, scale)
    return values.astype(np.int64)


def read_header(file_path: Path) -> WaveHeader:
    """Reads the header of an audio file without decoding samples."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Audio input file not found: {file_path}")

    info = sf.info(str(file_path))
    if info.subtype not in _SUBTYPE_INFO:
        raise UnsupportedFormatError(
            f"Unsupported sample encoding '{info.subtype}' in {file_path.name}. "
            f"Supported: {sorted(_SUBTYPE_INFO)}"
        )
    sample_format, bit_depth = _SUBTYPE_INFO[info.subtype]
    header = WaveHeader(
        channels=info.channels,
        sample_rate=info.samplerate,
        bit_depth=bit_depth,
        format=sample_format,
    )
    _check_channels(header.channels)
    return header


def load_wave(file_path: Union[str, Path]) -> Wave:
    """
    Loads an audio file into per-channel float32 arrays.

    Args:
        file_path: Path of the file to read.

    Returns:
        A Wave holding the header and one normalised array per channel.

    Raises:
        FileNotFoundError: If the file does not exist.
        UnsupportedFormatError: For channel counts other than 1/2 or unsupported encodings.
        soundfile.LibsndfileError: If the file cannot be decoded.
    """
    file_path = Path(file_path)
    header = read_header(file_path)
    logger.info(f"Loading audio from: {file_path} ({header.channels} ch, {header.bit_depth} bit {header.format.value}, {header.sample_rate} Hz)")

    if header.format is SampleFormat.FLOAT:
        frames, _ = sf.read(str(file_path), dtype="float32", always_2d=True)
        native = frames
    else:
        # libsndfile left-justifies every integer encoding into int32
        frames, _ = sf.read(str(file_path), dtype="int32", always_2d=True)
        native = frames >> (32 - header.bit_depth)

    data = [decode_samples(channel, header) for channel in uninterleave(native.reshape(-1), header.channels)]
    logger.debug(f"Audio loaded. Frames: {len(data[0])}, channels: {len(data)}")
    return Wave(header=header, data=data)


def save_wave(file_path: Union[str, Path], wave: Wave) -> None:
    """
    Writes a Wave to a WAV file, encoding it with the header's format and bit depth.

    Raises:
        UnsupportedFormatError: For unsupported bit depths, channel counts or extensions.
        soundfile.LibsndfileError: If writing fails.
    """
    file_path = Path(file_path)
    header = wave.header
    if file_path.suffix.lower() != ".wav":
        raise UnsupportedFormatError(f"Unsupported audio output extension: '{file_path.suffix}'. Only '.wav' is written.")
    _check_channels(len(wave.data))
    _check_bit_depth(header)
    subtype = _WRITE_SUBTYPES[(header.format, header.bit_depth)]

    logger.info(f"Saving audio to: {file_path} (sr={header.sample_rate}, subtype={subtype})")
    file_path.parent.mkdir(parents=True, exist_ok=True)

    frames = interleave(wave.data).reshape(-1, len(wave.data))
    if header.format is SampleFormat.FLOAT:
        payload = encode_samples(frames, header)
    else:
        native = encode_samples(frames, header)
        payload = (native << (32 - header.bit_depth)).astype(np.int32)

    sf.write(str(file_path), payload, header.sample_rate, subtype=subtype, format="WAV")
    logger.info(f"Audio successfully saved to {file_path}")
