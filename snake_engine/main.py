"""FastAPI application — state routes, WebSocket endpoint, game loop."""

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from .connection_manager import ConnectionManager, build_game_over_msg, build_state_msg
from .constants import BOARD_SIZE, BASE_SPEED, HOST, KEY_DIRECTIONS, PORT, RESET_KEYS
from .errors import ConfigError
from .game import GameEngine
from .models import Direction, RenderState

logger = logging.getLogger(__name__)


def load_options(env=None) -> dict:
    """Read host options from the environment.

    SNAKE_BOARD_SIZE: board edge length (default BOARD_SIZE)
    SNAKE_WRAP: "0", "false" or "no" turns the edges into walls
    SNAKE_PORT: port for the uvicorn server
    """
    env = os.environ if env is None else env
    try:
        size = int(env.get("SNAKE_BOARD_SIZE", BOARD_SIZE))
        port = int(env.get("SNAKE_PORT", PORT))
    except ValueError as exc:
        raise ConfigError(f"Invalid numeric option: {exc}") from exc
    if size < 1:
        raise ConfigError(f"SNAKE_BOARD_SIZE must be at least 1, got {size}.")
    wrap = str(env.get("SNAKE_WRAP", "1")).strip().lower() not in ("0", "false", "no")
    return {"size": size, "wrap": wrap, "port": port}


def direction_from_key(key) -> Optional[Direction]:
    """Translate a raw key identifier into a Direction, or None."""
    if not isinstance(key, str):
        return None
    name = KEY_DIRECTIONS.get(key)
    return Direction(name) if name else None


options = load_options()
game = GameEngine(size=options["size"], wrap=options["wrap"])
manager = ConnectionManager()
game_over_events: list[RenderState] = []
game.add_game_over_listener(game_over_events.append)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(game_loop())
    yield
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task


app = FastAPI(lifespan=lifespan)


@app.get("/state")
async def get_state():
    return game.snapshot().to_dict()


@app.post("/reset")
async def reset_game():
    snapshot = game.reset()
    await manager.broadcast(build_state_msg(snapshot))
    return snapshot.to_dict()


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    try:
        await manager.send_personal(ws, build_state_msg(game.snapshot()))
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("type") == "key":
                key = msg.get("key")
                if not isinstance(key, str):
                    continue
                if key in RESET_KEYS:
                    # "Hit Enter to play again" only applies once the game is over.
                    if game.game_over:
                        await manager.broadcast(build_state_msg(game.reset()))
                elif game.set_direction(direction_from_key(key)):
                    await manager.broadcast(build_state_msg(game.snapshot()))
            elif msg.get("type") == "direction":
                if game.set_direction(msg.get("direction")):
                    await manager.broadcast(build_state_msg(game.snapshot()))
            elif msg.get("type") == "reset":
                await manager.broadcast(build_state_msg(game.reset()))
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


async def run_tick() -> float:
    """Advance the game one step, push the new state, and return the delay until the next tick."""
    if game.game_over:
        return game.speed / 1000

    game.tick()
    snapshot = game.snapshot()
    await manager.broadcast(build_state_msg(snapshot))
    while game_over_events:
        await manager.broadcast(build_game_over_msg(game_over_events.pop(0)))
    return snapshot.speed / 1000


async def game_loop():
    while True:
        if not manager.connections:
            await asyncio.sleep(BASE_SPEED / 1000)
            continue
        # Speed changes with the score, so it is re-read after every tick.
        delay = await run_tick()
        await asyncio.sleep(delay)


if __name__ == "__main__":
    import uvicorn
    print(f"Snake server starting on http://localhost:{options['port']}")
    uvicorn.run(app, host=HOST, port=options["port"])
