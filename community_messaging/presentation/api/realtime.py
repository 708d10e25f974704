"""
Realtime WebSocket - live view of one conversation.

    WS /ws/conversations/{key}?token=<jwt>

    server → {"type": "snapshot", "conversation_key": ..., "entries": [...]}
    server → {"type": "entries",  "conversation_key": ..., "entries": [...]}   per delta

Each connection runs one ConversationSession (snapshot + feed subscription,
merged through a Timeline). Incoming client frames are ignored; the
connection lives until the client disconnects.

Close codes:
- 1008: missing/invalid token, malformed key, not a participant
- 1011: snapshot or subscription could not be established
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status

from community_messaging.application.dto import ThreadEntryDTO
from community_messaging.application.services.access import authorize_viewer
from community_messaging.application.services.conversation_session import (
    ConversationSession,
)
from community_messaging.config.logging_config import bind_correlation_id
from community_messaging.domain.entities.thread_entry import ThreadEntry
from community_messaging.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    FeedSubscriptionError,
    RecordStoreError,
)
from community_messaging.domain.ports.realtime_feed import RealtimeFeed
from community_messaging.domain.ports.repositories import RecordStore
from community_messaging.domain.value_objects.conversation_key import ConversationKey
from community_messaging.presentation.dependencies.auth import decode_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _frame(kind: str, key: ConversationKey, entries) -> dict:
    return {
        "type": kind,
        "conversation_key": str(key),
        "entries": [
            ThreadEntryDTO.from_entry(entry).model_dump(mode="json") for entry in entries
        ],
    }


async def _wait_for_disconnect(ws: WebSocket) -> None:
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            return


async def _pump(ws: WebSocket, key: ConversationKey, queue: asyncio.Queue) -> None:
    """Forward queued deltas until the client goes away."""
    disconnect = asyncio.create_task(_wait_for_disconnect(ws))
    try:
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait(
                {getter, disconnect}, return_when=asyncio.FIRST_COMPLETED
            )
            if getter not in done:
                getter.cancel()
                return
            entries: list[ThreadEntry] = getter.result()
            await ws.send_json(_frame("entries", key, entries))
    finally:
        disconnect.cancel()


@router.websocket("/ws/conversations/{key}")
async def conversation_ws(ws: WebSocket, key: str):
    bind_correlation_id(ws.headers.get("X-Correlation-ID"), prefix="ws")
    await ws.accept()

    token = ws.query_params.get("token")
    if not token:
        logger.info("[WS] Closing: token missing")
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = decode_token(token)
        conversation_key = ConversationKey.parse(key)
    except (HTTPException, ValueError) as e:
        logger.info(f"[WS] Closing: {getattr(e, 'detail', e)}")
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    viewer_id = user.user_id.value
    container = ws.app.state.dishka_container
    async with container() as request_container:
        store = await request_container.get(RecordStore)
        feed = await request_container.get(RealtimeFeed)

        try:
            await authorize_viewer(store, conversation_key, viewer_id)
        except (AccessDeniedError, EntityNotFoundError) as e:
            logger.info(f"[WS] Closing {conversation_key} for {viewer_id}: {e}")
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        queue: asyncio.Queue = asyncio.Queue()
        try:
            async with ConversationSession(
                store, feed, conversation_key, viewer_id, on_entries=queue.put_nowait
            ) as session:
                logger.info(f"[WS] {viewer_id} connected to {conversation_key}")
                await ws.send_json(
                    _frame("snapshot", conversation_key, session.timeline.entries)
                )
                await _pump(ws, conversation_key, queue)
        except (RecordStoreError, FeedSubscriptionError) as e:
            logger.error(f"[WS] Cannot open {conversation_key}: {e}")
            await ws.close(code=status.WS_1011_INTERNAL_ERROR)
            return
        except WebSocketDisconnect:
            pass

        logger.info(f"[WS] {viewer_id} disconnected from {conversation_key}")
