"""
Application configuration using Pydantic settings.

Configuration comes from environment variables (and an optional .env file)
with development-friendly defaults. Object storage supports a mock mode.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
