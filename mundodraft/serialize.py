"""Plain-dict forms of views for JSON output."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .models import Champion, DraftSession, Selection
from .queue import QueueView
from .reconciler import DraftView, TeamSelections


def champion_to_dict(champion: Champion) -> Dict[str, Any]:
    return {
        "id": champion.id,
        "name": champion.name,
        "title": champion.title,
        "tags": list(champion.tags),
        "info": {
            "difficulty": champion.info.difficulty,
            "attack": champion.info.attack,
            "defense": champion.info.defense,
            "magic": champion.info.magic,
        },
        "image_url": champion.image_url,
        "pick_rate": champion.pick_rate,
        "ban_rate": champion.ban_rate,
        "win_rate": champion.win_rate,
    }


def selection_to_dict(selection: Optional[Selection]) -> Optional[Dict[str, Any]]:
    if selection is None:
        return None
    return {
        "turn": selection.turn,
        "team": selection.team.value,
        "action": selection.action.value,
        "champion": champion_to_dict(selection.champion),
        "role": selection.role.value if selection.role else None,
        "time_taken": selection.time_taken,
    }


def _team(part: TeamSelections, roles) -> Dict[str, Any]:
    return {
        "bans": [selection_to_dict(s) for s in part.bans],
        "picks": [selection_to_dict(s) for s in part.picks],
        "roles": {role.value: selection_to_dict(s) for role, s in roles.items()},
    }


def view_to_dict(view: DraftView) -> Dict[str, Any]:
    status = view.status
    return {
        "loaded": view.loaded,
        "draft_id": status.id if status else None,
        "status": status.status.value if status else None,
        "current_turn": status.current_turn if status else None,
        "current_team": status.current_team.value if status else None,
        "current_phase": status.current_phase if status else None,
        "timer_end": status.timer_end.isoformat() if status and status.timer_end else None,
        "action": view.action.value,
        "actionable": view.actionable,
        "remaining_seconds": view.remaining_seconds,
        "banner": view.banner,
        "teams": {
            side.value.lower(): {
                "name": summary.name,
                "total_picks": summary.total_picks,
                "total_bans": summary.total_bans,
            }
            for side, summary in (status.teams.items() if status else [])
        },
        "blue": _team(view.blue, view.blue_roles),
        "red": _team(view.red, view.red_roles),
        "taken": sorted(view.taken),
        "fetch_error": view.fetch_error,
        "selection_error": view.selection_error,
    }


def session_to_dict(session: DraftSession) -> Dict[str, Any]:
    return {
        "id": session.id,
        "unique_id": session.unique_id,
        "creator_id": session.creator_id,
        "status": session.status.value,
        "current_turn": session.current_turn,
        "current_team": session.current_team.value,
        "current_phase": session.current_phase,
        "teams": [
            {
                "side": t.side.value,
                "name": t.name,
                "players": {role.value: name for role, name in t.players.items()},
            }
            for t in session.teams
        ],
    }


def queue_to_dict(view: QueueView) -> Dict[str, Any]:
    return {
        "roles": {
            role: {"count": fill.count, "level": fill.level.value}
            for role, fill in view.roles.items()
        },
        "total_players": view.total_players,
        "match_size": view.match_size,
        "progress_percent": view.progress_percent,
        "is_ready": view.is_ready,
    }
