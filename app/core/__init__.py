"""Core app configuration, logging, security and request context."""

from app.core.config import get_settings, settings

__all__ = ["get_settings", "settings"]
