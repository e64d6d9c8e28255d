"""FastAPI server exposing the cooperative Minesweeper lobby protocol over WebSocket."""

from __future__ import annotations

import asyncio
from contextlib import suppress
import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from framework.serialize import json_dumps
from server.config import load_config
from server.connection import ConnectionHandler
from server.session import SessionRegistry

logger = logging.getLogger(__name__)

config = load_config()
app = FastAPI(title="Co-op Minesweeper Lobby Server", version="0.1.0")
registry = SessionRegistry()
handler = ConnectionHandler(registry=registry, config=config)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(config.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok"}


@app.get("/api/lobbies")
def list_lobbies() -> dict[str, int]:
    """Report how many lobbies are live in this process."""
    return {"lobbies": len(registry)}


@app.websocket("/")
@app.websocket("/ws")
async def lobby_socket(websocket: WebSocket) -> None:
    """Run one connection: read actions, apply them, and stream events back."""
    await websocket.accept()
    state = handler.open()

    async def send(payload: dict) -> None:
        await websocket.send_text(json_dumps(payload))

    writer = asyncio.create_task(state.handle.pump(send))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await handler.handle_message(state, raw)
    except WebSocketDisconnect:
        pass
    finally:
        await handler.handle_disconnect(state)
        writer.cancel()
        with suppress(asyncio.CancelledError):
            await writer


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("server.main:app", host=config.host, port=config.port, log_level=config.log_level.lower())
