import json
import logging
from typing import Any, Dict, List

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages dashboard WebSocket connections per signed-in user"""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, user: str, websocket: WebSocket):
        """Accept and store a new WebSocket connection"""
        await websocket.accept()
        self.active_connections.setdefault(user, []).append(websocket)

    def disconnect(self, user: str, websocket: WebSocket):
        """Remove a WebSocket connection"""
        connections = self.active_connections.get(user, [])
        if websocket in connections:
            connections.remove(websocket)
        if not connections:
            self.active_connections.pop(user, None)

    async def broadcast(self, user: str, message_type: str, data: Dict[str, Any]):
        """Send a message to every dashboard the user has open"""
        message = {"type": message_type, "data": data}
        message_json = json.dumps(message, default=str)

        disconnected = []
        for connection in self.active_connections.get(user, []):
            try:
                await connection.send_text(message_json)
            except Exception as e:
                logger.debug(f"Dropping connection for {user}: {e}")
                disconnected.append(connection)

        for connection in disconnected:
            self.disconnect(user, connection)


# Global connection manager instance
manager = ConnectionManager()
