"""WebSocket connection management and state serialization."""

import json
import logging

from fastapi import WebSocket

from .models import RenderState

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.connections: dict[WebSocket, str] = {}

    async def connect(self, ws: WebSocket) -> str:
        await ws.accept()
        client_id = f"c{id(ws)}"
        self.connections[ws] = client_id
        logger.info("Client %s connected", client_id)
        return client_id

    def disconnect(self, ws: WebSocket):
        client_id = self.connections.pop(ws, None)
        if client_id is not None:
            logger.info("Client %s disconnected", client_id)

    async def broadcast(self, message: str):
        disconnected = []
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except Exception:
                logger.debug("Dropping client %s after failed send", self.connections.get(ws))
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.pop(ws, None)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def build_state_msg(snapshot: RenderState) -> str:
    return json.dumps({"type": "state", **snapshot.to_dict()})


def build_game_over_msg(snapshot: RenderState) -> str:
    return json.dumps({
        "type": "game_over",
        "score": snapshot.score,
        "won": snapshot.won,
    })
