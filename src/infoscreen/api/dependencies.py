"""Shared dependencies for API endpoints."""

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from ..config import Settings
from ..services import BroadcastHub, ImageStore


def get_store(conn: HTTPConnection) -> ImageStore:
    """Image store owned by the running application."""
    return conn.app.state.store


def get_hub(conn: HTTPConnection) -> BroadcastHub:
    """Broadcast hub owned by the running application."""
    return conn.app.state.hub


def get_app_settings(conn: HTTPConnection) -> Settings:
    """Settings the application was created with."""
    return conn.app.state.settings


# Type aliases for cleaner endpoint signatures
StoreDep = Annotated[ImageStore, Depends(get_store)]
HubDep = Annotated[BroadcastHub, Depends(get_hub)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
