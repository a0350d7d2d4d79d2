# pstretch/core/__init__.py

"""
Core Processing Package for pstretch.

Contains modules for:
- Window Math (window sizes, window tables, fade ramp)
- Overlap-Add of processed windows
- Spectral Phase Randomization
- The Stretch Engine and its multichannel adapter
- Audio I/O (WAV container, sample format conversion)
"""

from . import window
from . import overlap
from . import phase
from . import stretch
from . import audio
from .stretch import paulstretch, paulstretch_multichannel

__all__ = [
    "window",
    "overlap",
    "phase",
    "stretch",
    "audio",
    "paulstretch",
    "paulstretch_multichannel",
]
