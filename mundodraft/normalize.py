from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from .models import (
    Champion,
    ChampionInfo,
    ChampionPage,
    DraftAction,
    DraftLifecycle,
    DraftSession,
    DraftStatus,
    DraftTeam,
    GuildQueue,
    Role,
    Selection,
    TeamSide,
    TeamSummary,
)

E = TypeVar("E", bound=Enum)


def _safe_int(value: Any) -> int:
    try:
        return int(value or 0)
    except Exception:
        return 0


def _safe_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _enum(enum_cls: Type[E], value: Any, default: Optional[E]) -> Optional[E]:
    if value is None:
        return default
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp into an aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def champion_from_json(data: Dict[str, Any]) -> Champion:
    data = _as_dict(data)
    info = _as_dict(data.get("info"))
    image = _as_dict(data.get("image"))
    return Champion(
        id=str(data.get("id") or ""),
        name=str(data.get("name") or ""),
        title=str(data.get("title") or ""),
        tags=tuple(str(t) for t in _as_list(data.get("tags"))),
        info=ChampionInfo(
            difficulty=_safe_int(info.get("difficulty")),
            attack=_safe_int(info.get("attack")),
            defense=_safe_int(info.get("defense")),
            magic=_safe_int(info.get("magic")),
        ),
        image_url=image.get("url"),
        pick_rate=_safe_float(data.get("pick_rate")),
        ban_rate=_safe_float(data.get("ban_rate")),
        win_rate=_safe_float(data.get("win_rate")),
    )


def selection_from_json(data: Dict[str, Any]) -> Selection:
    data = _as_dict(data)
    return Selection(
        turn=_safe_int(data.get("turn")),
        team=_enum(TeamSide, data.get("team"), TeamSide.BLUE),
        action=_enum(DraftAction, data.get("action"), DraftAction.BAN),
        champion=champion_from_json(data.get("champion")),
        role=_enum(Role, data.get("role"), None),
        time_taken=_safe_float(data.get("time_taken")),
    )


def _team_summary(data: Any, side: TeamSide) -> TeamSummary:
    data = _as_dict(data)
    return TeamSummary(
        name=str(data.get("name") or f"{side.value.title()} Team"),
        side=side,
        total_picks=_safe_int(data.get("totalPicks")),
        total_bans=_safe_int(data.get("totalBans")),
    )


def draft_status_from_json(data: Dict[str, Any]) -> DraftStatus:
    """Build a snapshot from the status payload.

    Partial payloads are accepted: missing collections become empty and
    unknown enum values fall back to safe defaults, so a malformed snapshot
    never breaks rendering.
    """
    data = _as_dict(data)
    teams = _as_dict(data.get("teams"))
    selections: List[Selection] = [
        selection_from_json(s) for s in _as_list(data.get("selections")) if isinstance(s, dict)
    ]
    # Append-only on the server; keep turn order even if the payload is shuffled.
    selections.sort(key=lambda s: s.turn)
    return DraftStatus(
        id=str(data.get("id") or ""),
        status=_enum(DraftLifecycle, data.get("status"), DraftLifecycle.WAITING),
        current_turn=max(0, _safe_int(data.get("currentTurn"))),
        current_team=_enum(TeamSide, data.get("currentTeam"), TeamSide.BLUE),
        current_phase=str(data.get("currentPhase") or ""),
        timer_end=parse_timestamp(data.get("timerEnd")),
        teams={
            TeamSide.BLUE: _team_summary(teams.get("blue"), TeamSide.BLUE),
            TeamSide.RED: _team_summary(teams.get("red"), TeamSide.RED),
        },
        selections=tuple(selections),
    )


def _draft_team(data: Dict[str, Any]) -> DraftTeam:
    players: Dict[Role, str] = {}
    for key, name in _as_dict(data.get("players")).items():
        role = _enum(Role, key, None)
        if role is not None and name:
            players[role] = str(name)
    return DraftTeam(
        side=_enum(TeamSide, data.get("side"), TeamSide.BLUE),
        name=str(data.get("name") or ""),
        players=players,
    )


def draft_session_from_json(data: Dict[str, Any]) -> DraftSession:
    data = _as_dict(data)
    teams: Tuple[DraftTeam, ...] = tuple(
        _draft_team(t) for t in _as_list(data.get("Teams") or data.get("teams")) if isinstance(t, dict)
    )
    return DraftSession(
        id=str(data.get("id") or ""),
        unique_id=str(data.get("unique_id") or data.get("id") or ""),
        creator_id=str(data.get("creator_id") or ""),
        status=_enum(DraftLifecycle, data.get("status"), DraftLifecycle.WAITING),
        current_turn=max(0, _safe_int(data.get("current_turn"))),
        current_team=_enum(TeamSide, data.get("current_team"), TeamSide.BLUE),
        current_phase=str(data.get("current_phase") or ""),
        teams=teams,
    )


def champion_page_from_json(data: Dict[str, Any]) -> ChampionPage:
    data = _as_dict(data)
    champions = [champion_from_json(c) for c in _as_list(data.get("champions")) if isinstance(c, dict)]
    pagination = _as_dict(data.get("pagination"))
    return ChampionPage(
        champions=champions,
        total=_safe_int(pagination.get("total")) or len(champions),
        limit=_safe_int(pagination.get("limit")),
        offset=_safe_int(pagination.get("offset")),
        has_more=bool(pagination.get("hasMore")),
    )


def guild_queue_from_json(data: Dict[str, Any]) -> GuildQueue:
    data = _as_dict(data)
    stats = _as_dict(data.get("stats"))
    queues = {str(role).upper(): _as_list(members) for role, members in _as_dict(data.get("queues")).items()}
    return GuildQueue(
        queues=queues,
        total_players=_safe_int(stats.get("totalPlayers")),
        progress=_safe_float(stats.get("progress")) or 0.0,
        is_ready=bool(stats.get("isReady")),
    )
