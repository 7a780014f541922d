"""Derive actionable view state from a draft status snapshot.

Everything in this module is a pure function of its inputs: a snapshot
(possibly ``None`` before the first fetch completes) and the current time.
Network I/O lives in :mod:`mundodraft.sync`, which feeds snapshots in here
whether they arrived from the poller or from a push notification.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, Optional, Tuple

from .models import (
    ROLE_ORDER,
    DraftAction,
    DraftLifecycle,
    DraftStatus,
    RejectionReason,
    Role,
    Selection,
    TeamSide,
)

BAN_MARKER = "BAN"

REJECTION_MESSAGES: Dict[RejectionReason, str] = {
    RejectionReason.NO_SNAPSHOT: "Draft is still loading",
    RejectionReason.NOT_DRAFTING: "Draft is not accepting selections",
    RejectionReason.CHAMPION_TAKEN: "Champion has already been picked or banned",
    RejectionReason.SERVER_REJECTED: "Failed to select champion",
    RejectionReason.TRANSPORT_FAILURE: "Could not reach the draft service",
}


@dataclass(frozen=True)
class TeamSelections:
    bans: Tuple[Selection, ...] = ()
    picks: Tuple[Selection, ...] = ()


@dataclass(frozen=True)
class DraftView:
    """Everything a draft screen needs, derived from one snapshot."""

    status: Optional[DraftStatus]
    action: DraftAction
    actionable: bool
    blue: TeamSelections
    red: TeamSelections
    blue_roles: Dict[Role, Optional[Selection]]
    red_roles: Dict[Role, Optional[Selection]]
    taken: FrozenSet[str]
    remaining_seconds: int
    fetch_error: Optional[str] = None
    selection_error: Optional[str] = None
    banner: Optional[str] = field(default=None)

    @property
    def loaded(self) -> bool:
        return self.status is not None


def derive_current_action(status: Optional[DraftStatus]) -> DraftAction:
    """BAN while the phase label names a ban phase, PICK otherwise.

    Without a snapshot we report BAN so that nothing speculative is picked.
    """
    if status is None:
        return DraftAction.BAN
    if BAN_MARKER in (status.current_phase or ""):
        return DraftAction.BAN
    return DraftAction.PICK


def is_actionable(status: Optional[DraftStatus]) -> bool:
    return status is not None and status.status == DraftLifecycle.DRAFTING


def partition_by_team(status: Optional[DraftStatus], team: TeamSide) -> TeamSelections:
    """Split one team's selections into bans and picks, keeping turn order."""
    if status is None:
        return TeamSelections()
    own = [s for s in status.selections if s.team == team]
    return TeamSelections(
        bans=tuple(s for s in own if s.action == DraftAction.BAN),
        picks=tuple(s for s in own if s.action == DraftAction.PICK),
    )


def picks_by_role(selections: TeamSelections) -> Dict[Role, Optional[Selection]]:
    slots: Dict[Role, Optional[Selection]] = {role: None for role in ROLE_ORDER}
    for pick in selections.picks:
        if pick.role is not None and slots.get(pick.role) is None:
            slots[pick.role] = pick
    return slots


def taken_champion_ids(status: Optional[DraftStatus]) -> FrozenSet[str]:
    if status is None:
        return frozenset()
    taken = set()
    for team in TeamSide:
        part = partition_by_team(status, team)
        taken.update(s.champion.id for s in part.bans + part.picks)
    return frozenset(taken)


def is_champion_taken(status: Optional[DraftStatus], champion_id: str) -> bool:
    return champion_id in taken_champion_ids(status)


def remaining_seconds(timer_end: Optional[datetime], now: datetime) -> int:
    """Whole seconds left on the turn timer, clamped at zero."""
    if timer_end is None:
        return 0
    delta = (timer_end - now).total_seconds()
    return max(0, math.floor(delta))


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def check_selection(status: Optional[DraftStatus], champion_id: str) -> Optional[RejectionReason]:
    """Local legality gate applied before any selection request is sent."""
    if status is None:
        return RejectionReason.NO_SNAPSHOT
    if not is_actionable(status):
        return RejectionReason.NOT_DRAFTING
    if is_champion_taken(status, champion_id):
        return RejectionReason.CHAMPION_TAKEN
    return None


def _banner(status: Optional[DraftStatus], action: DraftAction) -> Optional[str]:
    if not is_actionable(status):
        return None
    return f"{status.current_team.value} Team - {action.value} Phase (Turn {status.current_turn})"


def reconcile(
    status: Optional[DraftStatus],
    now: datetime,
    fetch_error: Optional[str] = None,
    selection_error: Optional[str] = None,
) -> DraftView:
    """Build the full view for a snapshot.

    The same call is made for polled and pushed snapshots; there is no
    delivery-specific handling anywhere downstream.
    """
    action = derive_current_action(status)
    blue = partition_by_team(status, TeamSide.BLUE)
    red = partition_by_team(status, TeamSide.RED)
    return DraftView(
        status=status,
        action=action,
        actionable=is_actionable(status),
        blue=blue,
        red=red,
        blue_roles=picks_by_role(blue),
        red_roles=picks_by_role(red),
        taken=taken_champion_ids(status),
        remaining_seconds=remaining_seconds(status.timer_end if status else None, now),
        fetch_error=fetch_error,
        selection_error=selection_error,
        banner=_banner(status, action),
    )
