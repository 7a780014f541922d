"""Champion picker and statistics helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .config import CHAMPION_PAGE_SIZE
from .models import Champion, DraftStatus
from .reconciler import is_actionable, taken_champion_ids

ALL_ROLES = "ALL"
ROLE_FILTERS = (ALL_ROLES, "TOP", "JUNGLE", "MID", "ADC", "SUPPORT")


@dataclass(frozen=True)
class PickerEntry:
    champion: Champion
    taken: bool
    disabled: bool


def champion_query(
    role: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = CHAMPION_PAGE_SIZE,
) -> Dict[str, object]:
    """Keyword arguments for ``MundoApiClient.get_champions``."""
    params: Dict[str, object] = {"limit": limit}
    if role and role.upper() != ALL_ROLES:
        params["role"] = role.upper()
    if search and search.strip():
        params["search"] = search.strip()
    return params


def format_rate(rate: Optional[float]) -> Optional[str]:
    if not rate:
        return None
    return f"{rate * 100:.1f}%"


def champion_stats(champion: Champion) -> Dict[str, str]:
    stats = {}
    for label, rate in (
        ("Pick Rate", champion.pick_rate),
        ("Ban Rate", champion.ban_rate),
        ("Win Rate", champion.win_rate),
    ):
        formatted = format_rate(rate)
        if formatted:
            stats[label] = formatted
    return stats


def available_champions(champions: Sequence[Champion], status: Optional[DraftStatus]) -> List[PickerEntry]:
    """Annotate the picker grid; taken champions stay disabled whoever took them."""
    taken = taken_champion_ids(status)
    actionable = is_actionable(status)
    return [
        PickerEntry(
            champion=c,
            taken=c.id in taken,
            disabled=(c.id in taken) or not actionable,
        )
        for c in champions
    ]
