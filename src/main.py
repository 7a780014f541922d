"""Main FastAPI application with hexagonal architecture."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from mundodraft.config import client_config_from_env
from mundodraft.push import PushChannel
from mundodraft.sync import run_blocking

from . import __version__
from .api.rest.routes import get_draft_service, router as drafts_router
from .api.websocket.handlers import handle_draft_websocket
from .application.ports.draft_service import DraftDataPort

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    config = client_config_from_env()
    app.state.config = config
    app.state.push = None
    if config.push_enabled:
        push = PushChannel(
            config.ws_url,
            max_reconnect_attempts=config.ws_max_reconnects,
            reconnect_delay_s=config.ws_reconnect_delay_s,
            max_reconnect_delay_s=config.ws_max_reconnect_delay_s,
        )
        push.start()
        app.state.push = push
        logger.info(f"Push channel started for {config.ws_url}")
    else:
        logger.info("Push updates disabled; relying on polling")
    yield
    # Shutdown
    if app.state.push is not None:
        await app.state.push.close()
        logger.info("Push channel closed")


app = FastAPI(
    title="MundoDraft API",
    description="Live League of Legends draft companion for Discord drafts",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Next dev server
        "*",  # Allow all for development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    upstream_reachable: bool
    push_connected: bool


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "MundoDraft API",
        "version": __version__,
        "description": "Live draft companion API",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "join": "GET /api/drafts/{code}",
            "view": "GET /api/drafts/{code}/view",
            "select": "POST /api/drafts/{code}/select",
            "champions": "GET /api/champions",
            "queue": "GET /api/queues/{guild_id}",
            "websocket": "WS /ws/drafts/{code}",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check(service: DraftDataPort = Depends(get_draft_service)):
    """Check API health and upstream reachability."""
    check = getattr(service, "health_check", None)
    reachable = bool(await run_blocking(check)) if check else False
    push = getattr(app.state, "push", None)
    return HealthResponse(
        status="healthy",
        version=__version__,
        upstream_reachable=reachable,
        push_connected=bool(push and push.connected),
    )


# Include REST routes
app.include_router(drafts_router)


# WebSocket endpoint streaming live draft views
@app.websocket("/ws/drafts/{code}")
async def websocket_draft(
    websocket: WebSocket,
    code: str,
    service: DraftDataPort = Depends(get_draft_service),
):
    """WebSocket endpoint for following a draft live.

    Connect to this endpoint and receive a reconciled view after every
    refresh (periodic poll or upstream push):
    {
        "type": "view",
        "view": { ... }
    }

    Send {"action": "select", "championId": "..."} to ban or pick for the
    current turn, {"action": "dismiss"} to clear a selection error.
    """
    config = getattr(websocket.app.state, "config", None) or client_config_from_env()
    push = getattr(websocket.app.state, "push", None)
    if push is not None and push.gave_up:
        push = None
    await handle_draft_websocket(
        websocket,
        code,
        service,
        push=push,
        poll_interval_s=config.poll_interval_s,
    )
