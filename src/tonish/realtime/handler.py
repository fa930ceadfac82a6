"""WebSocket connection adapter between a browser socket and the hub.

One reader and one writer run per connection. The reader only watches for
the socket ending; the writer drains the client's send queue onto the wire
and sends a close frame once the hub closes the queue.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Request, WebSocket
from fastapi.responses import JSONResponse

from tonish.exceptions import HubNotRunningError
from tonish.logging import get_logger
from tonish.realtime.hub import Client, Hub

log = get_logger(__name__)

router = APIRouter()

MAX_USER_ID = 2**63 - 1


def parse_user_id(raw: str | None) -> int:
    """Parse the user_id query parameter; absent or invalid means 0.

    Only plain ASCII decimal digits are accepted, so signs, underscores and
    non-ASCII digits that int() would take all fall back to 0.
    """
    text = (raw or "").strip()
    if not (text.isascii() and text.isdigit()):
        return 0
    user_id = int(text)
    return user_id if user_id <= MAX_USER_ID else 0


async def _write_pump(websocket: WebSocket, client: Client) -> None:
    """Relay queued payloads as text frames until the queue is closed."""
    while True:
        payload = await client.receive()
        if payload is None:
            try:
                await websocket.close()
            except Exception:
                # Socket already gone; the reader has seen or will see that.
                log.debug("ws_close_after_disconnect", user_id=client.user_id)
            return
        try:
            await websocket.send_text(payload.decode("utf-8"))
        except Exception as e:
            log.warning("ws_send_failed", user_id=client.user_id, error=str(e))
            return


async def _read_pump(websocket: WebSocket, client: Client) -> None:
    """Consume inbound frames until the peer disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            code = message.get("code", 1000)
            if code not in (1000, 1001, 1005, 1006):
                log.warning("ws_unexpected_close", user_id=client.user_id, code=code)
            return


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Live change notifications, optionally scoped by ?user_id=N."""
    hub: Hub = websocket.app.state.hub
    user_id = parse_user_id(websocket.query_params.get("user_id"))
    client = hub.new_client(websocket, user_id=user_id)

    # Registered before the handshake completes so nothing sent after the
    # client sees the socket open can be missed.
    try:
        await hub.register(client)
    except HubNotRunningError:
        log.debug("ws_rejected_hub_stopped", user_id=user_id)
        await websocket.close(code=1013)
        return

    writer: asyncio.Task | None = None  # type: ignore[type-arg]
    try:
        await websocket.accept()
        writer = asyncio.create_task(_write_pump(websocket, client))
        await _read_pump(websocket, client)
    except Exception:
        log.warning("ws_connection_error", user_id=user_id, exc_info=True)
    finally:
        await hub.unregister(client)
        if writer is not None:
            try:
                await asyncio.wait_for(writer, timeout=5.0)
            except asyncio.TimeoutError:
                writer.cancel()


@router.get("/api/ws/status")
async def websocket_status(request: Request) -> JSONResponse:
    """Out-of-band view of the hub's registry size."""
    hub: Hub = request.app.state.hub
    return JSONResponse(content={"connected_clients": hub.client_count, "running": hub.running})
