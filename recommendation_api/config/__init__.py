"""Configuration module for the recommendation API."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
