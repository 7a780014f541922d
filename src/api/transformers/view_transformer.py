"""Transform reconciled draft views to the frontend's camelCase format."""

from typing import Any, Dict, List

from mundodraft.champions import available_champions, champion_stats
from mundodraft.models import Champion, DraftSession, DraftStatus
from mundodraft.queue import QueueView
from mundodraft.reconciler import DraftView, format_clock
from mundodraft.serialize import champion_to_dict, queue_to_dict, session_to_dict, view_to_dict


def _to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def _camelize(value: Any) -> Any:
    """Recursively camelCase dict keys.

    Role and side keys (``TOP``, ``blue``) have no underscores and pass
    through unchanged.
    """
    if isinstance(value, dict):
        return {_to_camel_case(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def transform_view_to_frontend(view: DraftView) -> Dict[str, Any]:
    """Transform a reconciled view to frontend format.

    Args:
        view: View derived from the latest snapshot

    Returns:
        Dictionary matching the draft screen's expected structure, with a
        preformatted ``clock`` for the turn timer.
    """
    payload = _camelize(view_to_dict(view))
    payload["clock"] = format_clock(view.remaining_seconds) if view.remaining_seconds > 0 else None
    return payload


def transform_session_to_frontend(session: DraftSession) -> Dict[str, Any]:
    return _camelize(session_to_dict(session))


def transform_champions_to_frontend(
    champions: List[Champion],
    status: DraftStatus | None = None,
) -> List[Dict[str, Any]]:
    """Champion list for the picker or stats page.

    With a snapshot, each entry carries ``taken``/``disabled`` flags.
    """
    entries = []
    for entry in available_champions(champions, status):
        item = _camelize(champion_to_dict(entry.champion))
        item["stats"] = champion_stats(entry.champion)
        if status is not None:
            item["taken"] = entry.taken
            item["disabled"] = entry.disabled
        entries.append(item)
    return entries


def transform_queue_to_frontend(view: QueueView) -> Dict[str, Any]:
    return _camelize(queue_to_dict(view))
