"""FastAPI dependencies resolving app-scoped objects."""

from fastapi import Request

from api.config import Settings
from pricedb.service import DatabaseService


def get_service(request: Request) -> DatabaseService:
    """The storage service created for this app."""
    return request.app.state.service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
