# pstretch/utils/logging_config.py

"""
Configures the logging system for pstretch based on loaded settings.
Uses Rich for enhanced console logging.
"""

import logging
from datetime import datetime
from typing import Optional

from rich.logging import RichHandler

from pstretch.config import PstretchConfig
from pstretch.version import __version__

# --- Constants ---
# Map verbosity levels (from CLI flags) to logging levels
VERBOSITY_MAP = {
    0: logging.WARNING,  # Default (normal)
    1: logging.INFO,     # -v (verbose)
    2: logging.DEBUG,    # -vv (debug)
    -1: logging.CRITICAL + 10 # -q (quiet/silent) - use a level higher than critical
}

# --- Setup Function ---

def setup_logging(config: PstretchConfig, verbosity: int = 0) -> Optional[str]:
    """
    Configures the package logger based on the provided configuration and verbosity level.

    Args:
        config: The loaded PstretchConfig object.
        verbosity: 0 for normal, 1 for verbose, 2 for debug, -1 for quiet.
                   Values above 2 are treated as debug.

    Returns:
        The path of the log file, or None when file logging is disabled.
    """
    log_cfg = config.logging

    console_level = VERBOSITY_MAP.get(min(verbosity, 2), logging.INFO)

    root_logger = logging.getLogger("pstretch")
    root_logger.setLevel(logging.DEBUG) # Handlers filter by their own levels
    root_logger.handlers.clear() # Remove any existing handlers (important for re-configuration)

    # --- Console Handler (Rich) ---
    if console_level <= logging.CRITICAL: # Only add console handler if not quiet
        console_handler = RichHandler(
            level=console_level,
            show_time=False,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    # --- File Handler ---
    log_filepath = None
    if log_cfg.log_file_enabled:
        try:
            log_dir = log_cfg.log_directory
            log_dir.mkdir(parents=True, exist_ok=True)

            log_filename = log_cfg.log_filename_template.format(timestamp=datetime.now())
            log_filepath = log_dir / log_filename

            file_handler = logging.FileHandler(log_filepath, encoding='utf-8')
            file_handler.setLevel(log_cfg.log_level_file)
            file_handler.setFormatter(logging.Formatter(log_cfg.log_format))
            root_logger.addHandler(file_handler)

            file_logger = logging.getLogger("pstretch.init")
            file_logger.info(f"--- pstretch v{__version__} Log Start ---")
            file_logger.debug(f"Full configuration loaded: {config.model_dump()}")
        except OSError as e:
            logging.getLogger("pstretch.error").error(f"Failed to configure file logging: {e}", exc_info=True)
            log_filepath = None

    init_logger = logging.getLogger("pstretch.init")
    init_logger.info(f"pstretch v{__version__} initialized.")
    if log_filepath is not None:
        init_logger.info(f"Logging to file: {log_filepath}")
    return str(log_filepath) if log_filepath is not None else None
