# pstretch/config/__init__.py

"""
Configuration management for pstretch.

This package handles loading configuration from files (TOML),
environment variables, and internal defaults, providing a unified
configuration object.
"""

from .models import PstretchConfig
from .loaders import load_configuration

__all__ = [
    "PstretchConfig",
    "load_configuration",
]
