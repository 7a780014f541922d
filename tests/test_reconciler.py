from datetime import datetime, timedelta, timezone
from itertools import permutations

from mundodraft.models import (
    Champion,
    DraftAction,
    DraftLifecycle,
    DraftStatus,
    RejectionReason,
    Role,
    Selection,
    TeamSide,
)
from mundodraft.reconciler import (
    check_selection,
    derive_current_action,
    format_clock,
    is_actionable,
    is_champion_taken,
    partition_by_team,
    picks_by_role,
    reconcile,
    remaining_seconds,
)

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _sel(turn: int, team: TeamSide, action: DraftAction, champ: str, role: Role | None = None) -> Selection:
    return Selection(turn=turn, team=team, action=action, champion=Champion(id=champ, name=champ), role=role)


def _status(
    selections=(),
    phase: str = "BLUE_BAN",
    lifecycle: DraftLifecycle = DraftLifecycle.DRAFTING,
    turn: int = 3,
    timer_end: datetime | None = None,
) -> DraftStatus:
    return DraftStatus(
        id="ABC123",
        status=lifecycle,
        current_turn=turn,
        current_team=TeamSide.BLUE,
        current_phase=phase,
        timer_end=timer_end,
        selections=tuple(selections),
    )


def test_action_follows_phase_label() -> None:
    for phase in ("BLUE_BAN", "RED_BAN_2", "BAN"):
        assert derive_current_action(_status(phase=phase)) == DraftAction.BAN
    for phase in ("BLUE_PICK", "RED_PICK_3", "", "SWAP"):
        assert derive_current_action(_status(phase=phase)) == DraftAction.PICK


def test_action_defaults_to_ban_without_snapshot() -> None:
    assert derive_current_action(None) == DraftAction.BAN


def test_only_drafting_is_actionable() -> None:
    assert is_actionable(_status(lifecycle=DraftLifecycle.DRAFTING))
    for lifecycle in (DraftLifecycle.WAITING, DraftLifecycle.COMPLETED, DraftLifecycle.CANCELLED):
        assert not is_actionable(_status(lifecycle=lifecycle))
    assert not is_actionable(None)


def test_fresh_ban_phase_scenario() -> None:
    status = _status(phase="BLUE_BAN", turn=3)
    view = reconcile(status, NOW)
    assert view.action == DraftAction.BAN
    assert view.actionable
    assert partition_by_team(status, TeamSide.BLUE).bans == ()
    assert partition_by_team(status, TeamSide.BLUE).picks == ()
    assert partition_by_team(status, TeamSide.RED).bans == ()
    assert partition_by_team(status, TeamSide.RED).picks == ()
    assert view.banner == "BLUE Team - BAN Phase (Turn 3)"


def test_single_pick_scenario() -> None:
    status = _status([_sel(1, TeamSide.BLUE, DraftAction.PICK, "Ahri", Role.MID)], phase="RED_PICK")
    blue = partition_by_team(status, TeamSide.BLUE)
    assert [s.champion.id for s in blue.picks] == ["Ahri"]
    assert blue.picks[0].role == Role.MID
    assert is_champion_taken(status, "Ahri")
    assert not is_champion_taken(status, "Zed")
    assert picks_by_role(blue)[Role.MID].champion.id == "Ahri"
    assert picks_by_role(blue)[Role.TOP] is None


def test_partition_is_exact_and_disjoint() -> None:
    selections = [
        _sel(1, TeamSide.BLUE, DraftAction.BAN, "Zed"),
        _sel(2, TeamSide.RED, DraftAction.BAN, "Yasuo"),
        _sel(3, TeamSide.BLUE, DraftAction.BAN, "Lux"),
        _sel(4, TeamSide.BLUE, DraftAction.PICK, "Ahri", Role.MID),
        _sel(5, TeamSide.RED, DraftAction.PICK, "Garen", Role.TOP),
        _sel(6, TeamSide.RED, DraftAction.PICK, "Jinx", Role.ADC),
    ]
    for ordering in list(permutations(selections))[:50]:
        status = _status(ordering)
        for team in TeamSide:
            part = partition_by_team(status, team)
            own = [s for s in ordering if s.team == team]
            assert set(part.bans) | set(part.picks) == set(own)
            assert not set(part.bans) & set(part.picks)
            assert len(part.bans) + len(part.picks) == len(own)
            assert all(s.action == DraftAction.BAN for s in part.bans)
            assert all(s.action == DraftAction.PICK for s in part.picks)


def test_partition_keeps_turn_order() -> None:
    status = _status([
        _sel(1, TeamSide.BLUE, DraftAction.BAN, "Zed"),
        _sel(3, TeamSide.BLUE, DraftAction.BAN, "Lux"),
        _sel(5, TeamSide.BLUE, DraftAction.BAN, "Akali"),
    ])
    assert [s.champion.id for s in partition_by_team(status, TeamSide.BLUE).bans] == ["Zed", "Lux", "Akali"]


def test_taken_is_monotonic_as_selections_append() -> None:
    history = [
        _sel(1, TeamSide.BLUE, DraftAction.BAN, "Zed"),
        _sel(2, TeamSide.RED, DraftAction.BAN, "Yasuo"),
        _sel(3, TeamSide.BLUE, DraftAction.PICK, "Ahri", Role.MID),
        _sel(4, TeamSide.RED, DraftAction.PICK, "Garen", Role.TOP),
    ]
    seen = set()
    for n in range(len(history) + 1):
        status = _status(history[:n])
        for champ in seen:
            assert is_champion_taken(status, champ)
        seen.update(s.champion.id for s in history[:n])


def test_remaining_seconds_clamps_at_zero() -> None:
    assert remaining_seconds(NOW + timedelta(seconds=30, milliseconds=900), NOW) == 30
    assert remaining_seconds(NOW, NOW) == 0
    assert remaining_seconds(NOW - timedelta(seconds=10), NOW) == 0
    assert remaining_seconds(NOW - timedelta(milliseconds=1), NOW) == 0
    assert remaining_seconds(None, NOW) == 0


def test_expired_timer_in_view() -> None:
    view = reconcile(_status(timer_end=NOW - timedelta(seconds=10)), NOW)
    assert view.remaining_seconds == 0


def test_format_clock() -> None:
    assert format_clock(0) == "0:00"
    assert format_clock(75) == "1:15"
    assert format_clock(9) == "0:09"


def test_check_selection_rejects_locally() -> None:
    assert check_selection(None, "Ahri") == RejectionReason.NO_SNAPSHOT
    assert check_selection(_status(lifecycle=DraftLifecycle.COMPLETED), "Ahri") == RejectionReason.NOT_DRAFTING
    taken = _status([_sel(1, TeamSide.RED, DraftAction.BAN, "Ahri")])
    assert check_selection(taken, "Ahri") == RejectionReason.CHAMPION_TAKEN
    assert check_selection(taken, "Zed") is None


def test_view_without_snapshot_is_empty() -> None:
    view = reconcile(None, NOW, fetch_error="boom")
    assert not view.loaded
    assert not view.actionable
    assert view.action == DraftAction.BAN
    assert view.taken == frozenset()
    assert view.banner is None
    assert view.fetch_error == "boom"
