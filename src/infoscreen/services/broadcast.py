"""Fan-out of live events between display and control clients."""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from starlette.websockets import WebSocket, WebSocketState

from ..models import ImageRecord

logger = logging.getLogger(__name__)

DISPLAY = "display"
CONTROL = "control"


class ConnectionRegistry:
    """Set of live sockets for one channel.

    Broadcasts iterate over a snapshot so sockets may be added or discarded
    while a send is in flight.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._clients: set[WebSocket] = set()

    def add(self, websocket: WebSocket) -> None:
        self._clients.add(websocket)
        logger.info("%s client connected (%d total)", self.name, len(self._clients))

    def discard(self, websocket: WebSocket) -> None:
        if websocket in self._clients:
            self._clients.discard(websocket)
            logger.info("%s client disconnected (%d total)", self.name, len(self._clients))

    def snapshot(self) -> list[WebSocket]:
        return list(self._clients)

    def __contains__(self, websocket: object) -> bool:
        return websocket in self._clients

    def __len__(self) -> int:
        return len(self._clients)


def _is_open(websocket: WebSocket) -> bool:
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


def _is_slide_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class BroadcastHub:
    """Relays transient events between the display and control channels.

    Nothing is persisted. Delivery is best effort: closed sockets are skipped
    and a socket whose send fails is dropped from its registry.
    """

    def __init__(self, snapshot: Callable[[], list[ImageRecord]]) -> None:
        """
        Initialize the hub.

        Args:
            snapshot: Returns the current catalog, sent to new display clients
                and to anyone asking for a refresh.
        """
        self._snapshot = snapshot
        self.display = ConnectionRegistry(DISPLAY)
        self.control = ConnectionRegistry(CONTROL)
        self.current_slide = 0
        self.is_playing: bool | None = None

    def images_message(self) -> dict[str, Any]:
        return {"type": "images-list", "images": [r.to_dict() for r in self._snapshot()]}

    async def send(self, websocket: WebSocket, message: dict[str, Any]) -> bool:
        """Send one message to one socket. Returns False if it could not be delivered."""
        if not _is_open(websocket):
            return False
        try:
            await websocket.send_text(json.dumps(message))
            return True
        except Exception as e:
            logger.warning("Dropping client after failed send: %s", e)
            return False

    async def _fan_out(self, registry: ConnectionRegistry, message: dict[str, Any]) -> int:
        clients = registry.snapshot()
        if not clients:
            return 0
        results = await asyncio.gather(*(self.send(ws, message) for ws in clients))
        for ws, delivered in zip(clients, results):
            if not delivered:
                registry.discard(ws)
        return sum(results)

    async def broadcast_display(self, message: dict[str, Any]) -> int:
        """Send a message to every display client. Returns the delivery count."""
        return await self._fan_out(self.display, message)

    async def broadcast_control(self, message: dict[str, Any]) -> int:
        """Send a message to every control client. Returns the delivery count."""
        return await self._fan_out(self.control, message)

    # Catalog events

    async def image_uploaded(self, record: ImageRecord) -> int:
        return await self.broadcast_display({"type": "image-uploaded", "image": record.to_dict()})

    async def image_updated(self, record: ImageRecord) -> int:
        return await self.broadcast_display({"type": "image-updated", "image": record.to_dict()})

    async def image_deleted(self, image_id: int) -> int:
        return await self.broadcast_display({"type": "image-deleted", "imageId": image_id})

    # Connection lifecycle

    async def connect_display(self, websocket: WebSocket) -> None:
        """Register a display client and send it the catalog."""
        self.display.add(websocket)
        await self.send(websocket, self.images_message())

    async def connect_control(self, websocket: WebSocket) -> None:
        """Register a control client and send it the last known slide."""
        self.control.add(websocket)
        await self.send(websocket, {"type": "current-slide", "slideIndex": self.current_slide})
        if self.is_playing is not None:
            await self.send(websocket, {"type": "play-state", "isPlaying": self.is_playing})

    def disconnect(self, websocket: WebSocket) -> None:
        self.display.discard(websocket)
        self.control.discard(websocket)

    # Inbound messages

    @staticmethod
    def parse(raw: str) -> dict[str, Any] | None:
        """Decode a text frame, returning None for anything but a typed JSON object."""
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Ignoring malformed frame: %.100s", raw)
            return None
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            logger.warning("Ignoring untyped frame: %.100s", raw)
            return None
        return data

    async def handle_display_message(self, websocket: WebSocket, data: dict[str, Any]) -> None:
        """Relay slideshow state reported by a display to the control clients."""
        msg_type = data["type"]
        if msg_type in ("slide-changed", "current-slide"):
            slide_index = data.get("slideIndex")
            if not _is_slide_index(slide_index):
                logger.warning("Ignoring %s with invalid slideIndex %r", msg_type, slide_index)
                return
            self.current_slide = slide_index
            await self.broadcast_control({"type": "current-slide", "slideIndex": self.current_slide})
        elif msg_type == "play-state":
            is_playing = data.get("isPlaying")
            if not isinstance(is_playing, bool):
                logger.warning("Ignoring play-state with invalid isPlaying %r", is_playing)
                return
            self.is_playing = is_playing
            await self.broadcast_control({"type": "play-state", "isPlaying": self.is_playing})
        elif msg_type == "request-images":
            await self.send(websocket, self.images_message())
        else:
            logger.debug("Ignoring display message type %s", msg_type)

    async def handle_control_message(self, websocket: WebSocket, data: dict[str, Any]) -> None:
        """Relay commands from a control client to the display clients."""
        msg_type = data["type"]
        if msg_type == "navigate":
            slide_index = data.get("slideIndex")
            if not _is_slide_index(slide_index):
                logger.warning("Ignoring navigate with invalid slideIndex %r", slide_index)
                return
            await self.broadcast_display({"type": "navigate-to", "slideIndex": slide_index})
        elif msg_type in ("playPause", "play-pause"):
            await self.broadcast_display({"type": "play-pause", "isPlaying": data.get("isPlaying")})
        elif msg_type == "request-images":
            await self.send(websocket, self.images_message())
        else:
            logger.debug("Ignoring control message type %s", msg_type)
