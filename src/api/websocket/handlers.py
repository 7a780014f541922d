"""WebSocket handlers for streaming live draft views."""

import json
import logging
from typing import Any, Dict

from fastapi import WebSocket, WebSocketDisconnect

from mundodraft.push import PushChannel
from mundodraft.reconciler import DraftView
from mundodraft.sync import DraftSync

from ..transformers.view_transformer import transform_view_to_frontend
from ...application.ports.draft_service import DraftDataPort
from ...application.ports.view_publisher import ViewPublisherPort
from ...application.use_cases.draft_view import JoinDraftUseCase

logger = logging.getLogger(__name__)


class WebSocketViewPublisher(ViewPublisherPort):
    """View publisher that sends updates via WebSocket."""

    def __init__(self, websocket: WebSocket):
        self._websocket = websocket

    async def publish(self, message: Dict[str, Any]) -> None:
        """Send a message via WebSocket."""
        await self._websocket.send_json(message)

    async def publish_view(self, view: DraftView) -> None:
        await self.publish({"type": "view", "view": transform_view_to_frontend(view)})


async def handle_draft_websocket(
    websocket: WebSocket,
    code: str,
    service: DraftDataPort,
    push: PushChannel | None = None,
    poll_interval_s: float = 2.0,
) -> None:
    """Handle a WebSocket connection following one draft.

    Server sends a ``view`` message after every refresh:
    {
        "type": "view",
        "view": { ... reconciled draft view ... }
    }

    Expected client messages:
    {"action": "select", "championId": "Ahri"}
    {"action": "dismiss"}
    {"action": "refresh"}

    Selections are answered with a ``selection`` message followed by the
    re-fetched view. The live session (poller and push subscription) is torn
    down when the client disconnects.

    Args:
        websocket: FastAPI WebSocket connection
        code: Draft join code
        service: Draft service port
        push: Shared push channel, if push updates are enabled
        poll_interval_s: Status poll interval
    """
    await websocket.accept()
    publisher = WebSocketViewPublisher(websocket)

    joined = await JoinDraftUseCase(service).execute(code)
    if not joined.success:
        await publisher.publish({
            "type": "error",
            "code": "DRAFT_NOT_FOUND" if joined.not_found else "JOIN_FAILED",
            "message": joined.error,
        })
        await websocket.close()
        return

    sync = DraftSync(service, joined.session.unique_id, push=push, poll_interval_s=poll_interval_s)
    sync.add_listener(publisher.publish_view)

    try:
        await sync.start()
        while True:
            try:
                data = await websocket.receive_json()
            except json.JSONDecodeError:
                await publisher.publish({"type": "error", "code": "INVALID_JSON", "message": "Invalid JSON message"})
                continue

            action = data.get("action") if isinstance(data, dict) else None
            if action == "select":
                champion_id = str(data.get("championId") or "")
                if not champion_id:
                    await publisher.publish({
                        "type": "error",
                        "code": "INVALID_REQUEST",
                        "message": "championId is required",
                    })
                    continue
                outcome = await sync.attempt_select(champion_id)
                await publisher.publish({
                    "type": "selection",
                    "ok": outcome.ok,
                    "reason": outcome.reason.value if outcome.reason else None,
                    "message": outcome.message,
                })
            elif action == "dismiss":
                sync.dismiss_error()
                await publisher.publish_view(sync.view)
            elif action == "refresh":
                await sync.refresh()
            else:
                await publisher.publish({
                    "type": "error",
                    "code": "UNKNOWN_ACTION",
                    "message": f"Unknown action: {action}",
                })
    except WebSocketDisconnect:
        logger.debug(f"Viewer of draft {code} disconnected")
    finally:
        await sync.close()
