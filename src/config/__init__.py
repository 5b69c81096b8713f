"""Configuration module for the avatar video generation service."""

from src.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
