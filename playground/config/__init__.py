"""Configuration module for Redis Playground."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
