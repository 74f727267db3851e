"""
Configuration module for loading environment variables.
Pricing constants that must stay fixed for reproducible estimates live here too.
"""
import os
from typing import Optional


class Config:
    """Application configuration loaded from environment variables."""

    # Pricing Configuration
    DEFAULT_REGION: str = os.getenv("CFN_COST_DEFAULT_REGION", "us-east-1")
    HOURS_PER_MONTH: int = 730  # Fixed assumption: 24/7 operation, not a calendar month
    SIGNIFICANT_CHANGE_THRESHOLD: float = 0.01  # Differences at or below one cent are noise

    # AWS Configuration (template fetching only, never used for pricing)
    AWS_PROFILE: Optional[str] = os.getenv("AWS_PROFILE") or None
    CLOUDFORMATION_TIMEOUT: int = int(os.getenv("CFN_COST_CLOUDFORMATION_TIMEOUT", "10"))

    # API Configuration
    MAX_TEMPLATE_BYTES: int = int(os.getenv("CFN_COST_MAX_TEMPLATE_BYTES", str(1024 * 1024)))

    # Logging
    LOG_LEVEL: str = os.getenv("CFN_COST_LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> None:
        """
        Validates that configuration values are usable.

        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if not cls.DEFAULT_REGION:
            raise ValueError("CFN_COST_DEFAULT_REGION must not be empty")
        if cls.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"CFN_COST_LOG_LEVEL is not a valid log level (got: {cls.LOG_LEVEL})")
        if cls.MAX_TEMPLATE_BYTES <= 0:
            raise ValueError("CFN_COST_MAX_TEMPLATE_BYTES must be positive")
        if cls.CLOUDFORMATION_TIMEOUT <= 0:
            raise ValueError("CFN_COST_CLOUDFORMATION_TIMEOUT must be positive")


config = Config()
