"""WebSocket endpoints for display and control clients."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from .dependencies import HubDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["websocket"])


async def _receive_frame(websocket: WebSocket) -> str | None:
    """
    Wait for the next frame.

    Returns:
        The text payload, or None for a binary frame.

    Raises:
        WebSocketDisconnect: When the client closes the connection.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))
    text = message.get("text")
    if text is None:
        logger.warning("Ignoring binary frame on %s", websocket.url.path)
    return text


@router.websocket("/display")
async def display_socket(websocket: WebSocket, hub: HubDep) -> None:
    """Slideshow screens: receive catalog changes and navigation commands."""
    await websocket.accept()
    await hub.connect_display(websocket)
    try:
        while True:
            raw = await _receive_frame(websocket)
            data = hub.parse(raw) if raw is not None else None
            if data is not None:
                await hub.handle_display_message(websocket, data)
    except WebSocketDisconnect:
        logger.debug("Display client closed the connection")
    finally:
        hub.disconnect(websocket)


@router.websocket("/control")
async def control_socket(websocket: WebSocket, hub: HubDep) -> None:
    """Touch controls: send navigation commands, receive slideshow state."""
    await websocket.accept()
    await hub.connect_control(websocket)
    try:
        while True:
            raw = await _receive_frame(websocket)
            data = hub.parse(raw) if raw is not None else None
            if data is not None:
                await hub.handle_control_message(websocket, data)
    except WebSocketDisconnect:
        logger.debug("Control client closed the connection")
    finally:
        hub.disconnect(websocket)
