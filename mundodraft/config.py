from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_API_URL = "https://23.88.176.69:3001/api"
DEFAULT_WS_URL = "ws://23.88.176.69:3001"

DRAFT_POLL_INTERVAL_S = 2.0
QUEUE_POLL_INTERVAL_S = 5.0
DEFAULT_QUEUE_TYPE = "RANKED_DRAFT"
CHAMPION_PAGE_SIZE = 50


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    ws_url: str = DEFAULT_WS_URL
    api_token: str | None = None
    timeout_s: float = 10.0
    retries: int = 3
    backoff_s: float = 0.5
    poll_interval_s: float = DRAFT_POLL_INTERVAL_S
    queue_poll_interval_s: float = QUEUE_POLL_INTERVAL_S
    push_enabled: bool = True
    ws_max_reconnects: int = 5
    ws_reconnect_delay_s: float = 1.0
    ws_max_reconnect_delay_s: float = 30.0


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def client_config_from_env() -> ClientConfig:
    push = os.environ.get("MUNDO_PUSH", "1").lower() in {"1", "true", "yes"}
    return ClientConfig(
        api_url=os.environ.get("MUNDO_API_URL", DEFAULT_API_URL).rstrip("/"),
        ws_url=os.environ.get("MUNDO_WS_URL", DEFAULT_WS_URL),
        api_token=os.environ.get("MUNDO_API_TOKEN") or None,
        timeout_s=_env_float("MUNDO_TIMEOUT_S", 10.0),
        retries=max(1, _env_int("MUNDO_RETRIES", 3)),
        poll_interval_s=_env_float("MUNDO_POLL_INTERVAL_S", DRAFT_POLL_INTERVAL_S),
        queue_poll_interval_s=_env_float("MUNDO_QUEUE_POLL_INTERVAL_S", QUEUE_POLL_INTERVAL_S),
        push_enabled=push,
        ws_max_reconnects=_env_int("MUNDO_WS_MAX_RECONNECTS", 5),
        ws_reconnect_delay_s=_env_float("MUNDO_WS_RECONNECT_DELAY_S", 1.0),
        ws_max_reconnect_delay_s=_env_float("MUNDO_WS_MAX_RECONNECT_DELAY_S", 30.0),
    )
