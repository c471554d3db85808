# amc_portal/services/realtime.py
import json
import logging
from typing import Any, Dict, List, Optional, Set

from fastapi import Request, WebSocket

from amc_portal.utils.datetime import isoformat_utc, utc_now

logger = logging.getLogger(__name__)

TASK_UPDATED = "task-updated"
NOTIFICATION_CREATED = "notification-created"


class RealtimeChannel:
    """Per-user rooms: user id -> the set of sockets that joined that user's room.

    Delivery is best-effort and at-most-once. A socket that fails a send is
    dropped from every room; the client re-joins after reconnecting.
    """

    def __init__(self):
        self.rooms: Dict[str, Set[WebSocket]] = {}

    def join(self, websocket: WebSocket, user_id: str) -> None:
        self.rooms.setdefault(user_id, set()).add(websocket)
        logger.info(f"User {user_id} joined their room. Connections: {len(self.rooms[user_id])}")

    def leave(self, websocket: WebSocket, user_id: Optional[str] = None) -> None:
        """Remove a socket from one room, or from all rooms when no user is given"""
        user_ids = [user_id] if user_id is not None else list(self.rooms)
        for uid in user_ids:
            sockets = self.rooms.get(uid)
            if not sockets or websocket not in sockets:
                continue
            sockets.discard(websocket)
            if not sockets:
                del self.rooms[uid]
            logger.info(f"User {uid} left their room. Remaining connections: {len(self.rooms.get(uid, ()))}")

    @staticmethod
    def frame(event: str, data: Any) -> str:
        return json.dumps({"event": event, "data": data, "timestamp": isoformat_utc(utc_now())})

    async def send(self, websocket: WebSocket, event: str, data: Any) -> None:
        await websocket.send_text(self.frame(event, data))

    async def send_to_user(self, user_id: str, event: str, data: Any) -> int:
        """Send to every socket in the user's room; returns how many sends succeeded"""
        sockets = self.rooms.get(user_id)
        if not sockets:
            logger.debug(f"User {user_id} not connected, {event} not delivered")
            return 0

        message = self.frame(event, data)
        delivered = 0
        broken = set()
        for websocket in list(sockets):
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Error sending {event} to user {user_id}: {e}")
                broken.add(websocket)

        for websocket in broken:
            self.leave(websocket)
        return delivered

    async def emit_task_updated(
        self, task: Dict[str, Any], assignee_id: Optional[str], updated_by: str, action: str
    ) -> int:
        """Tell the assignee about a change someone else made to their task"""
        if not assignee_id or assignee_id == updated_by:
            return 0
        payload = {"task": task, "action": action, "updatedBy": updated_by}
        return await self.send_to_user(assignee_id, TASK_UPDATED, payload)

    async def relay_task_updated(self, data: Dict[str, Any]) -> int:
        """Forward a client-sent task update to ``assignedTo`` unless they made it"""
        assignee_id = data.get("assignedTo")
        if not assignee_id or assignee_id == data.get("updatedBy"):
            return 0
        return await self.send_to_user(str(assignee_id), TASK_UPDATED, data)

    async def emit_notification_created(self, notification: Dict[str, Any]) -> int:
        user_id = notification.get("userId")
        if not user_id:
            return 0
        return await self.send_to_user(user_id, NOTIFICATION_CREATED, notification)

    def get_connected_users(self) -> List[str]:
        return list(self.rooms.keys())

    def get_connection_count(self, user_id: str) -> int:
        return len(self.rooms.get(user_id, ()))

    def get_total_connections(self) -> int:
        return sum(len(sockets) for sockets in self.rooms.values())


def get_realtime(request: Request) -> RealtimeChannel:
    return request.app.state.realtime
