"""HTTP API: app factory and settings."""

from api.app import create_app
from api.config import Settings

__all__ = ["create_app", "Settings"]
