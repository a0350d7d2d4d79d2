# pstretch/__init__.py

"""
pstretch: extreme time stretching of audio ("paulstretch") from the command line.
"""

from .version import __version__

__all__ = ["__version__"]
