# pstretch/config/models.py

"""
Pydantic models for defining the structure and validation of the pstretch configuration (pstretch.toml).
Uses Pydantic V2 syntax.
"""

from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Helper Functions ---

def _resolve_path(path: Union[str, Path]) -> Path:
    """Resolves and expands user paths."""
    return Path(path).expanduser().resolve()

# --- Model Definitions ---

class StretchConfig(BaseModel):
    """Default parameters of the stretch command."""
    stretch_factor: float = Field(8.0, gt=0, description="Output/input duration ratio (>1 stretches, <1 compresses).")
    window_size_secs: float = Field(0.25, ge=0, description="Analysis window length in seconds (minimum 16 samples are used).")
    window_shape: Literal["hann", "power_cosine"] = Field("hann", description="Window table used for analysis and synthesis.")
    output_suffix: str = Field("_stretched", description="Appended to the input file stem when no output path is given.")
    seed: Optional[int] = Field(None, ge=0, description="Seed for the phase randomizer. None draws fresh entropy on every run.")

    @field_validator('output_suffix')
    @classmethod
    def check_suffix(cls, value: str) -> str:
        """An empty suffix would make the derived output overwrite the input."""
        if not value:
            raise ValueError("output_suffix must not be empty.")
        return value

class LoggingConfig(BaseModel):
    """Logging configuration settings."""
    log_file_enabled: bool = Field(False, description="Enable/disable persistent file logging.")
    log_directory: Path = Field(default=Path("./pstretch_logs"), description="Directory for log files.")
    log_filename_template: str = Field("pstretch_run_{timestamp:%Y%m%d_%H%M%S}.log", description="Naming pattern for log files.")
    log_level_file: str = Field("DEBUG", description="Minimum level for file logs (DEBUG, INFO, WARNING, ERROR, CRITICAL).")
    log_format: str = Field("%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)", description="Format string for file log entries.")

    @field_validator('log_directory', mode='before')
    @classmethod
    def resolve_path_before_validation(cls, value: Any) -> Path:
        """Resolves paths before Pydantic validates them."""
        if isinstance(value, (str, Path)):
            return _resolve_path(value)
        return value

    @field_validator('log_level_file')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Validate log level strings."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of {allowed_levels}")
        return upper_value

class PstretchConfig(BaseModel):
    """Root configuration model for pstretch."""
    model_config = ConfigDict(
        extra='ignore',
        validate_assignment=True
    )

    stretch: StretchConfig = Field(default_factory=StretchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
