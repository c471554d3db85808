import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from amc_portal.exceptions import AuthenticationError
from amc_portal.services.realtime import NOTIFICATION_CREATED, TASK_UPDATED
from amc_portal.utils.auth import user_from_token

logger = logging.getLogger(__name__)

router = APIRouter()


def _room_user_id(data: Any) -> Optional[str]:
    """``join-user-room`` carries either {"userId": ...} or the bare id"""
    if isinstance(data, dict):
        data = data.get("userId")
    return str(data) if data not in (None, "") else None


@router.websocket("/ws")
async def realtime_endpoint(websocket: WebSocket, token: Optional[str] = Query(None)):
    realtime = websocket.app.state.realtime
    await websocket.accept()

    # with a token the socket is bound to that user and may only join their room
    token_user_id = None
    if token:
        try:
            with websocket.app.state.database.session() as db:
                token_user_id = user_from_token(db, token, websocket.app.state.settings).id
        except AuthenticationError as e:
            await realtime.send(websocket, "error", {"message": e.message})
            await websocket.close(code=1008)
            return

    await realtime.send(websocket, "connected", {"message": "Connected to realtime service"})
    joined = set()

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
                event = frame.get("event")
                data = frame.get("data")
            except (json.JSONDecodeError, AttributeError):
                await realtime.send(websocket, "error", {"message": "Invalid message format"})
                continue

            if event == "join-user-room":
                user_id = _room_user_id(data)
                if user_id is None:
                    await realtime.send(websocket, "error", {"message": "userId is required"})
                elif token_user_id and user_id != token_user_id:
                    await realtime.send(websocket, "error", {"message": "You can only join your own room"})
                else:
                    realtime.join(websocket, user_id)
                    joined.add(user_id)
                    await realtime.send(websocket, "room-joined", {"userId": user_id})

            elif event == TASK_UPDATED:
                # client-relayed: only the assignee hears about someone else's change
                if isinstance(data, dict):
                    await realtime.relay_task_updated(data)

            elif event == NOTIFICATION_CREATED:
                target = _room_user_id(data) if isinstance(data, dict) else None
                if target:
                    await realtime.send_to_user(target, event, data)

            elif event == "ping":
                await realtime.send(websocket, "pong", data)

            else:
                await realtime.send(websocket, "error", {"message": f"Unknown event: {event}"})

    except WebSocketDisconnect:
        logger.info(f"Realtime socket disconnected (rooms: {sorted(joined)})")
    finally:
        realtime.leave(websocket)
