from __future__ import annotations

import asyncio
import logging

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..hub import BroadcastHub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


async def _drain(websocket: WebSocket) -> None:
    """Read and discard inbound frames until the client disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


# PUBLIC_INTERFACE
@router.websocket("/ws")
async def notifications(websocket: WebSocket) -> None:
    """
    Push a text frame to the client after every todo mutation.

    The session ends when the client closes, or when a send to it fails.
    Either way it leaves the hub before this coroutine returns.
    """
    hub: BroadcastHub = websocket.app.state.hub
    subscriber = await hub.register(websocket)

    receiver = asyncio.create_task(_drain(websocket), name=f"ws-receiver-{subscriber.id}")
    sender = asyncio.create_task(subscriber.pump(), name=f"ws-sender-{subscriber.id}")
    try:
        await asyncio.wait({receiver, sender}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        # Cleanup must finish even when the handler itself is being cancelled
        with anyio.CancelScope(shield=True):
            await hub.unregister(subscriber)
            receiver.cancel()
            sender.cancel()
            results = await asyncio.gather(receiver, sender, return_exceptions=True)
            for result in results:
                if isinstance(result, WebSocketDisconnect) or not isinstance(result, Exception):
                    continue
                logger.warning("Subscriber %s failed: %r", subscriber.id, result)
            await subscriber.close()
