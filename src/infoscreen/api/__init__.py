"""HTTP and WebSocket API."""

from .router import router
from .ws import router as ws_router

__all__ = ["router", "ws_router"]
