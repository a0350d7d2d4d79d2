# pstretch/core/audio/__init__.py

"""
Core Audio Package.

Contains audio-specific input/output (WAV container reading and writing,
sample format conversion).
"""

from . import io

__all__ = [
    "io",
]
