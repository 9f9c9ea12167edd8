"""
Library configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Self


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    # Runtime
    ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Item-deleted aggregation.
    # "corrected" resets the weight sums for every excluded item.
    # "legacy" reproduces historical output, which accumulated the sums
    # across items and read the excluded item's (always zero) weight.
    ITEM_DELETED_METHOD: Literal["legacy", "corrected"] = "corrected"

    # Covariance matrix validation
    SYMMETRY_TOLERANCE: float = Field(
        default=1e-8,
        ge=0.0,
        description="Absolute tolerance used when checking matrix symmetry",
    )
    SYMMETRY_RTOL: float = Field(
        default=1e-5,
        ge=0.0,
        description="Relative tolerance used when checking matrix symmetry",
    )

    # Reporting
    RELIABILITY_THRESHOLD: float = Field(
        default=0.70,
        ge=0.0,
        le=1.0,
        description="Minimum acceptable Feldt-Gilmer coefficient",
    )
    REPORT_SUMMARY_DECIMALS: int = Field(default=2, ge=0, le=10)
    REPORT_ITEM_DECIMALS: int = Field(default=4, ge=0, le=10)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_log_level(self) -> Self:
        """Reject log levels the logging module does not know about."""
        valid_levels = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if self.LOG_LEVEL.upper() not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(valid_levels)}, "
                f"got '{self.LOG_LEVEL}'"
            )
        return self


settings = Settings()
