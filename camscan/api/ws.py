"""WebSocket endpoint for live scan progress."""

import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..services.scan_manager import scan_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


class ConnectionManager:
    def __init__(self):
        self.active: list[WebSocket] = []

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.active.append(ws)

    def disconnect(self, ws: WebSocket):
        if ws in self.active:
            self.active.remove(ws)

    async def send(self, ws: WebSocket, message: dict):
        try:
            await ws.send_json(message)
        except Exception:
            logger.debug("Dropping websocket after failed send")
            self.disconnect(ws)


manager = ConnectionManager()


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    subscriptions = []

    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                continue

            if msg.get("action") != "subscribe_scan":
                continue
            job_id = msg.get("job_id")
            if not job_id or scan_manager.get_job(job_id) is None:
                await manager.send(ws, {"type": "error", "detail": "Scan job not found"})
                continue

            async def scan_cb(job, ws=ws):
                await manager.send(ws, {
                    "type": "scan_progress",
                    "job_id": job.id,
                    "status": job.status.value,
                    "progress": job.progress.model_dump(),
                    "error": job.error,
                })
            scan_manager.add_progress_listener(job_id, scan_cb)
            subscriptions.append((job_id, scan_cb))

    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)
        for job_id, cb in subscriptions:
            scan_manager.remove_progress_listener(job_id, cb)
