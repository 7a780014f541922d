from __future__ import annotations

from typing import Dict, List, Optional

from .champions import champion_stats
from .models import ROLE_ORDER, Champion, Role, Selection
from .queue import QueueView
from .reconciler import DraftView, TeamSelections, format_clock

BAN_SLOTS = 5


def _team_block(title: str, part: TeamSelections, roles: Dict[Role, Optional[Selection]]) -> List[str]:
    bans = [b.champion.name for b in part.bans]
    bans += ["-"] * max(0, BAN_SLOTS - len(bans))
    lines = [title, f"  Bans ({len(part.bans)}): " + ", ".join(bans), f"  Picks ({len(part.picks)}):"]
    for role in ROLE_ORDER:
        pick = roles.get(role)
        lines.append(f"    {role.value:<8} {pick.champion.name if pick else 'Not selected'}")
    return lines


def render_draft(view: DraftView) -> str:
    if view.status is None:
        if view.fetch_error:
            return f"Failed to load draft: {view.fetch_error}"
        return "Loading draft..."

    status = view.status
    lines = [f"DRAFT {status.id} | Status: {status.status.value}"]
    if view.remaining_seconds > 0:
        lines.append(f"Time: {format_clock(view.remaining_seconds)}")
    if view.banner:
        lines.append(view.banner)
    if view.selection_error:
        lines.append(f"! {view.selection_error}")
    if view.fetch_error:
        lines.append(f"(stale) {view.fetch_error}")
    lines.append("")
    lines.extend(_team_block("Blue Team", view.blue, view.blue_roles))
    lines.append("")
    lines.extend(_team_block("Red Team", view.red, view.red_roles))
    return "\n".join(lines)


def render_champions(champions: List[Champion]) -> str:
    if not champions:
        return "No champions found"
    lines = []
    for c in champions:
        tags = ", ".join(c.tags)
        lines.append(f"{c.name} - {c.title} [{tags}] ({c.id})")
        stats = champion_stats(c)
        if stats:
            lines.append("  " + " | ".join(f"{k}: {v}" for k, v in stats.items()))
    return "\n".join(lines)


def render_queue(view: QueueView) -> str:
    lines = ["QUEUE STATUS"]
    for fill in view.roles.values():
        lines.append(f"  {fill.role:<8} {fill.count}/2 ({fill.level.value})")
    lines.append(f"Total Players: {view.total_players}/{view.match_size}")
    lines.append(f"Progress: {view.progress_percent}%")
    if view.is_ready:
        lines.append("Ready to start!")
    return "\n".join(lines)
