"""Matchmaking queue fill for the stats page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .api_client import MundoApiClient
from .config import DEFAULT_QUEUE_TYPE, QUEUE_POLL_INTERVAL_S
from .errors import MundoError
from .models import ROLE_ORDER, FillLevel, GuildQueue
from .sync import PeriodicRefresh, run_blocking

logger = logging.getLogger(__name__)

PLAYERS_PER_ROLE = 2
MATCH_SIZE = PLAYERS_PER_ROLE * len(ROLE_ORDER)
QUEUE_ERROR_MESSAGE = "Failed to load queue status"


@dataclass(frozen=True)
class RoleFill:
    role: str
    count: int
    level: FillLevel


@dataclass(frozen=True)
class QueueView:
    roles: Dict[str, RoleFill] = field(default_factory=dict)
    total_players: int = 0
    match_size: int = MATCH_SIZE
    progress_percent: int = 0
    is_ready: bool = False


def fill_level(count: int) -> FillLevel:
    if count >= PLAYERS_PER_ROLE:
        return FillLevel.FILLED
    if count > 0:
        return FillLevel.PARTIAL
    return FillLevel.EMPTY


def summarize_queue(queue: GuildQueue) -> QueueView:
    roles = {}
    for role in ROLE_ORDER:
        count = len(queue.queues.get(role.value) or [])
        roles[role.value] = RoleFill(role=role.value, count=count, level=fill_level(count))
    return QueueView(
        roles=roles,
        total_players=queue.total_players,
        progress_percent=round(queue.progress * 100),
        is_ready=queue.is_ready,
    )


class QueueWatcher:
    """Polls one guild's queue; keeps the last good view when a fetch fails."""

    def __init__(
        self,
        api: MundoApiClient,
        guild_id: str,
        queue_type: str = DEFAULT_QUEUE_TYPE,
        poll_interval_s: float = QUEUE_POLL_INTERVAL_S,
    ):
        self._api = api
        self.guild_id = guild_id
        self.queue_type = queue_type
        self.view: Optional[QueueView] = None
        self.error: Optional[str] = None
        self._poller = PeriodicRefresh(self.refresh, poll_interval_s, name=f"queue-poll:{guild_id}")

    async def refresh(self) -> Optional[QueueView]:
        try:
            queue = await run_blocking(self._api.get_guild_queue, self.guild_id, self.queue_type)
        except MundoError as exc:
            logger.warning(f"Failed to fetch queue for guild {self.guild_id}: {exc}")
            self.error = QUEUE_ERROR_MESSAGE
            return self.view
        self.view = summarize_queue(queue)
        self.error = None
        return self.view

    async def start(self) -> Optional[QueueView]:
        view = await self.refresh()
        self._poller.start()
        return view

    async def stop(self) -> None:
        await self._poller.stop()
