"""salientcrop configuration.

Two layers live here:

- ``AnalysisConfig``: the immutable set of algorithm tunables (weights,
  thresholds, search steps). It is passed explicitly into every component
  and never mutated after construction.
- ``Settings``: process-level options loaded with pydantic-settings from
  environment variables and .env files (logging, resampling, debug output).
"""

from __future__ import annotations

from typing import Self

from PIL import Image
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

RESAMPLING_METHODS: dict[str, Image.Resampling] = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


class ConfigError(Exception):
    """Raised when a configuration value is missing or invalid.

    Example:
        >>> Settings(RESAMPLE_METHOD="sinc", _env_file=None).require_resampling()  # doctest: +ELLIPSIS
        Traceback (most recent call last):
        ...
        ConfigError: Unknown resampling method 'sinc'. Set RESAMPLE_METHOD to ...
    """

    def __init__(self, message: str, env_var: str) -> None:
        """Initialize configuration error.

        Args:
            message: Human-readable description of the problem.
            env_var: Environment variable the user should fix.
        """
        self.env_var = env_var
        super().__init__(message)


class AnalysisConfig(BaseModel, frozen=True):
    """Tunable constants of the crop analysis.

    Defaults reproduce the reference smartcrop behaviour. Override any field
    to experiment; the model is frozen so one instance can be shared safely
    across concurrent analyses.
    """

    # Scoring weights
    detail_weight: float = 0.2
    skin_weight: float = 1.8
    saturation_weight: float = 0.3
    skin_bias: float = 0.01
    saturation_bias: float = 0.2

    # Skin detection
    skin_color: tuple[float, float, float] = (0.78, 0.57, 0.44)
    skin_threshold: float = Field(default=0.8, lt=1.0)
    skin_brightness_min: float = 0.2
    skin_brightness_max: float = 1.0

    # Saturation detection
    saturation_threshold: float = Field(default=0.4, lt=1.0)
    saturation_brightness_min: float = 0.05
    saturation_brightness_max: float = 0.9

    # Candidate search
    score_down_sample: int = Field(default=8, gt=0)
    step: int = Field(default=8, gt=0)
    scale_step: float = Field(default=0.1, gt=0.0)
    min_scale: float = Field(default=0.9, gt=0.0)
    max_scale: float = Field(default=1.0, gt=0.0)

    # Importance
    edge_radius: float = 0.4
    edge_weight: float = -20.0
    outside_importance: float = -0.5
    rule_of_thirds: bool = True

    # Pre-scaling
    prescale: bool = True
    prescale_min: float = Field(default=400.0, gt=0.0)

    @model_validator(mode="after")
    def _validate_scale_range(self) -> Self:
        if self.min_scale > self.max_scale:
            raise ValueError(
                f"min_scale ({self.min_scale}) must not exceed "
                f"max_scale ({self.max_scale})"
            )
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Analysis
    RESAMPLE_METHOD: str = "bicubic"
    PRESCALE_MIN: float = 400.0  # shorter side of the analysis image
    SCORE_WORKERS: int = 1  # >1 scores candidates on a thread pool

    # Debug output
    DEBUG_MODE: bool = False
    DEBUG_DIR: str = "."

    def require_resampling(self) -> Image.Resampling:
        """Get the Pillow filter for RESAMPLE_METHOD.

        Returns:
            The matching ``PIL.Image.Resampling`` member.

        Raises:
            ConfigError: If RESAMPLE_METHOD names no known filter.
        """
        method = RESAMPLING_METHODS.get(self.RESAMPLE_METHOD.strip().lower())
        if method is None:
            known = ", ".join(sorted(RESAMPLING_METHODS))
            raise ConfigError(
                f"Unknown resampling method '{self.RESAMPLE_METHOD}'. "
                f"Set RESAMPLE_METHOD to one of: {known}.",
                "RESAMPLE_METHOD",
            )
        return method

    def analysis_config(self) -> AnalysisConfig:
        """Build an AnalysisConfig honouring PRESCALE_MIN."""
        return AnalysisConfig(prescale_min=self.PRESCALE_MIN)


# Singleton instance for import convenience
settings = Settings()
