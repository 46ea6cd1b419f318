# reverberance/config/models.py

"""
Pydantic models for the reverberance configuration (reverberance.toml) and for
the immutable set of reverberation parameters consumed by the pipeline.
Uses Pydantic V2 syntax.
"""

from numbers import Integral
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from reverberance.errors import InvalidParameterError

# --- Helper Functions ---

def _resolve_path(path: Union[str, Path]) -> Path:
    """Resolves and expands user paths."""
    return Path(path).expanduser().resolve()

# --- Reverb Parameters ---

class ReverbParameters(BaseModel):
    """
    Perceptual parameters describing the simulated room and the mix.

    Instances are immutable. Defaults reproduce a medium-large hall preset;
    the pipeline stages themselves receive every value explicitly. Values must
    be finite; constructing with an out-of-domain value raises
    InvalidParameterError.
    """
    model_config = ConfigDict(frozen=True, extra='forbid', allow_inf_nan=False)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidParameterError(f"Invalid reverb parameters: {e}") from e

    # Room characteristics
    room_size: float = Field(0.7, ge=0.0, le=1.0, description="Room size factor: 0=small room, 1=large hall.")
    pre_delay_seconds: float = Field(0.03, ge=0.0, description="Gap before the first audible reflection (s).")
    decay_time_seconds: float = Field(2.5, gt=0.0, description="RT60 decay time (s); also the impulse response length.")
    damping: float = Field(0.3, ge=0.0, le=1.0, description="High frequency damping of the late tail.")
    # Mix levels
    wet_level: float = Field(0.4, ge=0.0, le=1.0, description="Gain of the reverberated signal.")
    dry_level: float = Field(0.6, ge=0.0, le=1.0, description="Gain of the original signal.")
    # Tone control (0.5 is neutral)
    low_tone: float = Field(0.7, ge=0.0, le=1.0, description="Low frequency emphasis: 0=cut bass, 1=boost bass.")
    high_tone: float = Field(0.5, ge=0.0, le=1.0, description="High frequency emphasis: 0=cut treble, 1=boost treble.")
    # Stereo
    stereo_width: float = Field(0.8, ge=0.0, le=1.0, description="Stereo width: 0=mono, 1=full width.")
    enable_stereo: bool = Field(True, description="Enable stereo widening of the wet signal.")
    # Overall amount and early reflections
    reverberation: float = Field(0.6, ge=0.0, le=1.0, description="Overall reverberation amount.")
    num_early_reflections: int = Field(8, ge=0, description="Number of discrete early reflections.")
    early_reflection_gain: float = Field(0.6, ge=0.0, le=1.0, description="Gain of the early reflections.")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ReverbParameters":
        """
        Builds parameters from a plain mapping (config file section, CLI options).

        Raises:
            InvalidParameterError: If any value lies outside its domain or a key is unknown.
        """
        return cls(**dict(values))

    def with_overrides(self, **overrides: Any) -> "ReverbParameters":
        """Returns a validated copy with the given (non-None) fields replaced."""
        merged = self.model_dump()
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_mapping(merged)


def validate_for_sample_rate(params: ReverbParameters, sample_rate: int) -> None:
    """
    Checks parameters that only make sense relative to a sampling rate.

    Raises:
        InvalidParameterError: If the sample rate is not positive or the impulse
                               response would be shorter than one sample.
    """
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, Integral) or sample_rate <= 0:
        raise InvalidParameterError(f"sample_rate must be a positive integer, got {sample_rate!r}.")
    if round(params.decay_time_seconds * sample_rate) < 1:
        raise InvalidParameterError(
            f"decay_time_seconds ({params.decay_time_seconds}) is shorter than one sample at {sample_rate} Hz."
        )

# --- Application Configuration ---

class DefaultsConfig(BaseModel):
    """Default processing parameters."""
    default_sample_rate: int = Field(44100, gt=0, description="Sample rate used when synthesizing a standalone impulse response.")
    max_duration: Optional[float] = Field(20.0, gt=0, description="Analysis window in seconds; None processes the whole input.")
    output_subtype: str = Field("PCM_16", description="Soundfile subtype used when saving rendered audio.")

class PathsConfig(BaseModel):
    """Configuration for file paths used by reverberance."""
    model_config = ConfigDict(validate_default=True)

    output_dir: Path = Field(default=Path("./reverberance_output"), description="Directory for rendered files when no -o is given.")
    log_directory: Path = Field(default=Path("./reverberance_logs"), description="Directory for log files.")

    @field_validator('output_dir', 'log_directory', mode='before')
    @classmethod
    def resolve_paths_before_validation(cls, value: Any) -> Path:
        """Resolves paths before Pydantic validates them."""
        if isinstance(value, (str, Path)):
            return _resolve_path(value)
        return value

class LoggingConfig(BaseModel):
    """Logging configuration settings."""
    log_file_enabled: bool = Field(False, description="Enable/disable persistent file logging.")
    log_filename_template: str = Field("reverberance_run_{timestamp:%Y%m%d_%H%M%S}.log", description="Naming pattern for log files.")
    log_level_file: str = Field("DEBUG", description="Minimum level for file logs (DEBUG, INFO, WARNING, ERROR, CRITICAL).")
    log_format: str = Field("%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)", description="Format string for file log entries.")

    @field_validator('log_level_file')
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Validate log level strings."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of {allowed_levels}")
        return upper_value

class ReverberanceConfig(BaseModel):
    """Root configuration model for reverberance."""
    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True
    )

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    reverb: ReverbParameters = Field(default_factory=ReverbParameters)
