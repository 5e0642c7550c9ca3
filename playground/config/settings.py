"""
Redis Playground Configuration Settings

This module contains all configuration constants for the playground.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Playground configuration settings."""

    # Expiration settings
    SWEEP_INTERVAL_MS: int = int(os.environ.get("PLAYGROUND_SWEEP_INTERVAL_MS", "100"))

    # Input limits
    MAX_KEY_LENGTH: int = int(os.environ.get("PLAYGROUND_MAX_KEY_LENGTH", "256"))
    MAX_VALUE_LENGTH: int = int(os.environ.get("PLAYGROUND_MAX_VALUE_LENGTH", "1024"))

    # Console settings
    PROMPT: str = "127.0.0.1:6379> "

    # Reported by INFO
    VERSION: str = "1.1.0"
    REDIS_MODE: str = "standalone"

    # Logging settings
    DEBUG: bool = os.environ.get("PLAYGROUND_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("PLAYGROUND_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
