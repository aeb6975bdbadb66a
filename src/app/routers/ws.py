"""WebSocket endpoint for live snapshots and emitter input."""

import asyncio
import json
import queue
from datetime import datetime, timezone

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from app.config import settings
from app.routers.game import EmitterInput

router = APIRouter(prefix="/ws", tags=["websocket"])


class ConnectionManager:
    """Tracks connected render clients."""

    def __init__(self):
        self.active_connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        async with self._lock:
            self.active_connections.add(websocket)
        logger.info(f"WebSocket connected. Total connections: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            self.active_connections.discard(websocket)
        logger.info(f"WebSocket disconnected. Total connections: {len(self.active_connections)}")

    async def send_to(self, websocket: WebSocket, message: dict):
        await websocket.send_text(json.dumps(message))


manager = ConnectionManager()


def _drain(events: queue.Queue, limit: int = 64) -> list[dict]:
    out = []
    while len(out) < limit:
        try:
            out.append(events.get_nowait())
        except queue.Empty:
            break
    return out


def handle_client_message(engine, message: dict) -> dict | None:
    """Apply one client message to the engine.  Returns a reply or None."""
    msg_type = message.get("type")

    if msg_type == "ping":
        return {"type": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}
    if msg_type == "emitter":
        # Same validation as POST /api/game/emitter; nothing changes on a bad payload
        try:
            data = EmitterInput.model_validate(message)
        except ValidationError as e:
            return {"type": "error", "message": str(e)}
        engine.set_emitter(x=data.x, y=data.y, active=data.active, mode=data.mode)
        return None
    if msg_type == "blast":
        return {"type": "blast", "fired": engine.fire_blast()}
    if msg_type == "start":
        return {"type": "start", "started": engine.start_game()}
    return {"type": "error", "message": f"Unknown message type: {msg_type}"}


async def _reader(websocket: WebSocket, engine):
    while True:
        data = await websocket.receive_text()
        try:
            message = json.loads(data)
        except json.JSONDecodeError:
            await manager.send_to(websocket, {"type": "error", "message": "Invalid JSON"})
            continue
        if not isinstance(message, dict):
            await manager.send_to(websocket, {"type": "error", "message": "Expected object"})
            continue
        reply = handle_client_message(engine, message)
        if reply is not None:
            await manager.send_to(websocket, reply)


async def _writer(websocket: WebSocket, engine, events: queue.Queue):
    period = 1.0 / settings.snapshot_rate
    while True:
        for event in _drain(events):
            await manager.send_to(websocket, {"type": "event", "event": event})
        await manager.send_to(websocket, {"type": "snapshot", "data": engine.snapshot()})
        await asyncio.sleep(period)


@router.websocket("/live")
async def websocket_live(websocket: WebSocket):
    """Stream snapshots + gameplay events; accept emitter input."""
    engine = getattr(websocket.app.state, "simulation_engine", None)
    if engine is None:
        await websocket.close(code=1013)
        return

    await manager.connect(websocket)
    events = engine.event_bus.subscribe()
    await manager.send_to(websocket, {
        "type": "connected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "NEBULA UPLINK ESTABLISHED",
    })

    tasks = [
        asyncio.create_task(_reader(websocket, engine)),
        asyncio.create_task(_writer(websocket, engine, events)),
    ]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning(f"WebSocket client dropped: {exc}")
    finally:
        engine.event_bus.unsubscribe(events)
        await manager.disconnect(websocket)
