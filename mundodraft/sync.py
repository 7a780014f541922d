"""Keep a local draft view consistent with server-authoritative state.

A :class:`DraftSync` owns the single "last known snapshot" for one draft and
one ``refresh()`` coroutine. The poller, push notifications and selection
attempts all go through that same coroutine, so every delivery path ends in
the same reconciled view. Snapshots are replaced wholesale in arrival order
(last write wins); the wire contract carries no version to do better.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Any, Awaitable, Callable, List, Optional, Union

from .api_client import MundoApiClient
from .config import DRAFT_POLL_INTERVAL_S
from .errors import ApiError, MundoError, NotFoundError, TransportError
from .models import DraftSession, DraftStatus, RejectionReason
from .push import PushChannel, draft_channel
from .reconciler import (
    REJECTION_MESSAGES,
    DraftView,
    check_selection,
    derive_current_action,
    reconcile,
)

logger = logging.getLogger(__name__)

# Thread pool for the blocking HTTP client
_executor = ThreadPoolExecutor(max_workers=4)

ViewListener = Callable[[DraftView], Union[None, Awaitable[None]]]

JOIN_CODE_MAX_LENGTH = 8


async def run_blocking(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a blocking call without stalling the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, partial(func, *args, **kwargs))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PeriodicRefresh:
    """Call one refresh coroutine on a fixed interval until stopped."""

    def __init__(self, refresh: Callable[[], Awaitable[Any]], interval_s: float, name: str = "refresh"):
        self._refresh = refresh
        self.interval_s = interval_s
        self.name = name
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run(), name=self.name)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            try:
                await self._refresh()
            except Exception:
                # A failed tick must not end polling; the next tick retries.
                logger.exception(f"{self.name} tick failed")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


@dataclass(frozen=True)
class SelectionOutcome:
    ok: bool
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None
    request_sent: bool = False


class DraftSync:
    """Live, reconciled view of one draft."""

    def __init__(
        self,
        api: MundoApiClient,
        draft_id: str,
        push: Optional[PushChannel] = None,
        poll_interval_s: float = DRAFT_POLL_INTERVAL_S,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._api = api
        self.draft_id = draft_id
        self._push = push
        self._clock = clock
        self._status: Optional[DraftStatus] = None
        self._fetch_error: Optional[str] = None
        self._selection_error: Optional[str] = None
        self._listeners: List[ViewListener] = []
        self._closed = False
        self._poller = PeriodicRefresh(self.refresh, poll_interval_s, name=f"draft-poll:{draft_id}")

    @property
    def channel(self) -> str:
        return draft_channel(self.draft_id)

    @property
    def status(self) -> Optional[DraftStatus]:
        return self._status

    @property
    def polling(self) -> bool:
        return self._poller.running

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def view(self) -> DraftView:
        return reconcile(
            self._status,
            self._clock(),
            fetch_error=self._fetch_error,
            selection_error=self._selection_error,
        )

    def add_listener(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        with suppress(ValueError):
            self._listeners.remove(listener)

    async def _publish(self) -> DraftView:
        view = self.view
        for listener in list(self._listeners):
            try:
                result = listener(view)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(f"View listener for draft {self.draft_id} failed")
        return view

    async def refresh(self, clear_selection_error: bool = True) -> DraftView:
        """Fetch a full snapshot and replace the local copy.

        Fetch failures are recorded but never discard the last good snapshot.
        """
        try:
            status = await run_blocking(self._api.get_draft_status, self.draft_id)
        except MundoError as exc:
            if self._closed:
                return self.view
            logger.warning(f"Failed to fetch draft status for {self.draft_id}: {exc}")
            self._fetch_error = str(exc)
            return await self._publish()

        if self._closed:
            # View already torn down; late responses are dropped.
            return self.view
        self._status = status
        self._fetch_error = None
        if clear_selection_error:
            self._selection_error = None
        return await self._publish()

    async def _on_push(self, _data: Any) -> None:
        await self.refresh()

    async def start(self) -> DraftView:
        self._closed = False
        view = await self.refresh()
        self._poller.start()
        if self._push is not None:
            await self._push.subscribe(self.channel, self._on_push)
        return view

    async def attempt_select(self, champion_id: str) -> SelectionOutcome:
        """Ban or pick ``champion_id`` for the current turn.

        Locally illegal attempts return without touching the network or any
        state. Otherwise the request is sent and a full re-fetch follows
        whether it succeeded or not.
        """
        status = self._status
        reason = check_selection(status, champion_id)
        if reason is not None:
            return SelectionOutcome(ok=False, reason=reason, message=REJECTION_MESSAGES[reason])

        self._selection_error = None
        action = derive_current_action(status)
        try:
            await run_blocking(self._api.select_champion, self.draft_id, champion_id, action)
        except TransportError as exc:
            outcome = SelectionOutcome(
                ok=False,
                reason=RejectionReason.TRANSPORT_FAILURE,
                message=str(exc) or REJECTION_MESSAGES[RejectionReason.TRANSPORT_FAILURE],
                request_sent=True,
            )
        except ApiError as exc:
            outcome = SelectionOutcome(
                ok=False,
                reason=RejectionReason.SERVER_REJECTED,
                message=exc.message or REJECTION_MESSAGES[RejectionReason.SERVER_REJECTED],
                request_sent=True,
            )
        else:
            outcome = SelectionOutcome(ok=True, request_sent=True)

        if not outcome.ok:
            logger.info(f"Selection of {champion_id} in {self.draft_id} failed: {outcome.message}")
            self._selection_error = outcome.message
        await self.refresh(clear_selection_error=outcome.ok)
        return outcome

    def dismiss_error(self) -> None:
        self._selection_error = None

    async def close(self) -> None:
        self._closed = True
        await self._poller.stop()
        if self._push is not None:
            await self._push.unsubscribe(self.channel, self._on_push)
        self._listeners.clear()

    async def __aenter__(self) -> "DraftSync":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def normalize_join_code(code: str) -> str:
    return (code or "").strip().upper()[:JOIN_CODE_MAX_LENGTH]


async def join_draft(api: MundoApiClient, code: str) -> DraftSession:
    """Resolve a join code to its draft session."""
    normalized = normalize_join_code(code)
    if not normalized:
        raise ValueError("Please enter a draft code")
    return await run_blocking(api.get_draft, normalized)


def join_error_message(exc: BaseException) -> str:
    if isinstance(exc, ValueError):
        return str(exc)
    if isinstance(exc, NotFoundError):
        return "Draft not found. Please check your code."
    return "Failed to join draft. Please try again."
