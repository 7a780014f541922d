from mundodraft.champions import available_champions, champion_query, champion_stats, format_rate
from mundodraft.models import Champion, DraftAction, DraftLifecycle, DraftStatus, Selection, TeamSide


def _status(lifecycle=DraftLifecycle.DRAFTING) -> DraftStatus:
    return DraftStatus(
        id="d1",
        status=lifecycle,
        current_turn=2,
        current_team=TeamSide.RED,
        current_phase="RED_BAN",
        selections=(Selection(1, TeamSide.BLUE, DraftAction.BAN, Champion("Zed", "Zed")),),
    )


def test_query_drops_all_role_and_blank_search() -> None:
    assert champion_query("ALL", "  ", 50) == {"limit": 50}
    assert champion_query("mid", " ahri ", 20) == {"limit": 20, "role": "MID", "search": "ahri"}


def test_rates_formatting() -> None:
    assert format_rate(0.1234) == "12.3%"
    assert format_rate(None) is None
    assert format_rate(0) is None
    champ = Champion("Ahri", "Ahri", pick_rate=0.1, win_rate=0.52)
    assert champion_stats(champ) == {"Pick Rate": "10.0%", "Win Rate": "52.0%"}


def test_taken_champions_are_disabled_for_either_team() -> None:
    champs = [Champion("Zed", "Zed"), Champion("Ahri", "Ahri")]
    entries = available_champions(champs, _status())
    assert [(e.champion.id, e.taken, e.disabled) for e in entries] == [
        ("Zed", True, True),
        ("Ahri", False, False),
    ]


def test_everything_disabled_outside_drafting() -> None:
    champs = [Champion("Ahri", "Ahri")]
    assert available_champions(champs, _status(DraftLifecycle.COMPLETED))[0].disabled
    assert available_champions(champs, None)[0].disabled
