"""Wire-level types for drafts, champions and queues."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class DraftLifecycle(str, Enum):
    """Server-side lifecycle of a draft."""

    WAITING = "WAITING"
    DRAFTING = "DRAFTING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TeamSide(str, Enum):
    BLUE = "BLUE"
    RED = "RED"


class DraftAction(str, Enum):
    BAN = "BAN"
    PICK = "PICK"


class Role(str, Enum):
    """Lane a pick is assigned to."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    ADC = "ADC"
    SUPPORT = "SUPPORT"


ROLE_ORDER: Tuple[Role, ...] = (Role.TOP, Role.JUNGLE, Role.MID, Role.ADC, Role.SUPPORT)


class RejectionReason(str, Enum):
    """Why a selection attempt did not go through."""

    NO_SNAPSHOT = "no_snapshot"
    NOT_DRAFTING = "not_drafting"
    CHAMPION_TAKEN = "champion_taken"
    SERVER_REJECTED = "server_rejected"
    TRANSPORT_FAILURE = "transport_failure"


class FillLevel(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    FILLED = "filled"


@dataclass(frozen=True)
class ChampionInfo:
    difficulty: int = 0
    attack: int = 0
    defense: int = 0
    magic: int = 0


@dataclass(frozen=True)
class Champion:
    id: str
    name: str
    title: str = ""
    tags: Tuple[str, ...] = ()
    info: ChampionInfo = field(default_factory=ChampionInfo)
    image_url: Optional[str] = None
    pick_rate: Optional[float] = None
    ban_rate: Optional[float] = None
    win_rate: Optional[float] = None


@dataclass(frozen=True)
class Selection:
    turn: int
    team: TeamSide
    action: DraftAction
    champion: Champion
    role: Optional[Role] = None
    time_taken: Optional[float] = None


@dataclass(frozen=True)
class TeamSummary:
    name: str
    side: TeamSide
    total_picks: int = 0
    total_bans: int = 0


@dataclass(frozen=True)
class DraftStatus:
    """Point-in-time snapshot of a draft. Replaced wholesale, never patched."""

    id: str
    status: DraftLifecycle
    current_turn: int
    current_team: TeamSide
    current_phase: str
    timer_end: Optional[datetime] = None
    teams: Dict[TeamSide, TeamSummary] = field(default_factory=dict)
    selections: Tuple[Selection, ...] = ()


@dataclass(frozen=True)
class DraftTeam:
    side: TeamSide
    name: str
    players: Dict[Role, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DraftSession:
    """Summary returned when resolving a join code."""

    id: str
    unique_id: str
    creator_id: str
    status: DraftLifecycle
    current_turn: int
    current_team: TeamSide
    current_phase: str
    teams: Tuple[DraftTeam, ...] = ()


@dataclass
class ChampionPage:
    champions: List[Champion]
    total: int
    limit: int
    offset: int
    has_more: bool


@dataclass
class GuildQueue:
    queues: Dict[str, List[Any]]
    total_players: int
    progress: float
    is_ready: bool
