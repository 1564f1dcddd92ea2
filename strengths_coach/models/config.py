"""
Configuration Models

Pydantic models for system configuration validation.
"""

import json
from pathlib import Path
from pydantic import BaseModel, Field, ValidationInfo, field_validator


class ParserConfig(BaseModel):
    """PDF parsing configuration.

    Format thresholds and AI fallback behaviour for the extraction pipeline.
    """

    top_10_min: int = Field(
        default=10,
        gt=0,
        le=34,
        description="Minimum strength count classified as a Top 10 report",
    )
    full_34_min: int = Field(
        default=30,
        gt=0,
        le=34,
        description="Minimum strength count classified as a Full 34 report",
    )
    ai_fallback_enabled: bool = Field(default=True)
    ai_first: bool = Field(
        default=False,
        description="Try AI extraction before the regex pipeline",
    )
    ai_timeout_seconds: float = Field(default=30.0, gt=0)
    ai_max_chars: int = Field(default=10000, gt=0)
    max_pdf_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    unknown_user_name: str = Field(default="Unknown User", min_length=1)

    @field_validator("full_34_min")
    @classmethod
    def validate_threshold_ordering(cls, v: int, info: ValidationInfo) -> int:
        """Validate that full_34_min > top_10_min.

        Validation: 0 < top_10_min < full_34_min <= 34
        """
        top_10 = info.data.get("top_10_min", 10)

        if v <= top_10:
            raise ValueError(
                f"full_34_min ({v}) must be greater than top_10_min ({top_10})"
            )

        return v


class RateLimits(BaseModel):
    """Request limits for the coaching service, per client key."""

    requests_per_minute: int = Field(default=50, gt=0)
    requests_per_hour: int = Field(default=1000, gt=0)
    idle_ttl_seconds: float = Field(default=3600.0, ge=3600)

    @field_validator("requests_per_hour")
    @classmethod
    def validate_hour_covers_minute(cls, v: int, info: ValidationInfo) -> int:
        """An hourly limit below the per-minute limit is a config mistake."""
        per_minute = info.data.get("requests_per_minute", 50)
        if v < per_minute:
            raise ValueError(
                f"requests_per_hour ({v}) must be >= requests_per_minute ({per_minute})"
            )
        return v


class CoachingConfig(BaseModel):
    """Claude coaching configuration."""

    model: str = Field(default="claude-sonnet-4-5")
    max_turns: int = Field(default=1, gt=0, le=10)
    max_retries: int = Field(default=3, gt=0, le=10)
    timeout_seconds: float = Field(default=60.0, gt=0)


class SystemParams(BaseModel):
    """System parameters configuration model."""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    rate_limits: RateLimits = Field(default_factory=RateLimits)
    coaching: CoachingConfig = Field(default_factory=CoachingConfig)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "SystemParams":
        """Load system parameters from config file.

        Args:
            config_path: Path to system_params.json (defaults to config/system_params.json)

        Returns:
            SystemParams: Validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config validation fails
        """
        if config_path is None:
            config_path = Path("config/system_params.json")
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                f"Copy {config_path.stem}.example.json to {config_path.name}"
            )

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        return cls(**config_data)

    @classmethod
    def load_or_default(cls, config_path: Path | str | None = None) -> "SystemParams":
        """Load system parameters, falling back to defaults when no file exists."""
        try:
            return cls.load(config_path)
        except FileNotFoundError:
            return cls()
