"""
Configuration module - settings for layering and reachability verification.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables prefixed with STACKCHECK_.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    Example:
        export STACKCHECK_ZINDEX_STRIDE=10000
        export STACKCHECK_RENDER_TIMEOUT_MS=10000
    """

    model_config = SettingsConfigDict(
        env_prefix="STACKCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # RENDERING
    # ---------------------------------------------------------------------------
    # Viewport size is part of the probe precondition: hit-testing is only
    # reproducible for a fixed size and scroll position.
    VIEWPORT_WIDTH: int = Field(1920, gt=0)
    VIEWPORT_HEIGHT: int = Field(1080, gt=0)

    # Upper bound for any render / network-idle wait. Exceeding it is
    # reported as DocumentUnavailableError and never retried.
    RENDER_TIMEOUT_MS: int = Field(5000, gt=0)

    # Layout settle buffer after the document reports idle
    SETTLE_MS: int = Field(150, ge=0)

    # ---------------------------------------------------------------------------
    # LAYERING
    # ---------------------------------------------------------------------------
    # Distance between band base offsets. Must exceed the number of elements
    # in the most populated band; the top slot is reserved for remediation.
    ZINDEX_STRIDE: int = Field(1000, ge=2)

    # Number of overrides sent to the browser per round trip
    WRITE_BATCH_SIZE: int = Field(250, gt=0)

    # ---------------------------------------------------------------------------
    # REACHABILITY
    # ---------------------------------------------------------------------------
    # When True a nested interactive descendant at the center point does not
    # count as a hit on its ancestor control.
    STRICT_DESCENDANT_HITS: bool = False

    # ---------------------------------------------------------------------------
    # REMEDIATION
    # ---------------------------------------------------------------------------
    REMEDIATION_PANEL_ID: str = "stackcheck-remediation-panel"
    REMEDIATION_PANEL_TOP_PX: int = 16
    REMEDIATION_PANEL_RIGHT_PX: int = 16

    # ---------------------------------------------------------------------------
    # LOGGING
    # ---------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"


# Usage: from stackcheck.config import settings
settings = Settings()
