import asyncio

from mundodraft.errors import TransportError
from mundodraft.models import FillLevel, GuildQueue
from mundodraft.queue import QUEUE_ERROR_MESSAGE, QueueWatcher, fill_level, summarize_queue


def _queue() -> GuildQueue:
    return GuildQueue(
        queues={"TOP": [{"id": 1}, {"id": 2}], "MID": [{"id": 3}]},
        total_players=3,
        progress=0.333,
        is_ready=False,
    )


def test_fill_levels() -> None:
    assert fill_level(0) == FillLevel.EMPTY
    assert fill_level(1) == FillLevel.PARTIAL
    assert fill_level(2) == FillLevel.FILLED
    assert fill_level(3) == FillLevel.FILLED


def test_summary_covers_every_role() -> None:
    view = summarize_queue(_queue())
    assert list(view.roles) == ["TOP", "JUNGLE", "MID", "ADC", "SUPPORT"]
    assert view.roles["TOP"].level == FillLevel.FILLED
    assert view.roles["MID"].count == 1
    assert view.roles["SUPPORT"].level == FillLevel.EMPTY
    assert view.progress_percent == 33
    assert view.match_size == 10


class _FlakyQueueApi:
    def __init__(self):
        self.calls = 0

    def get_guild_queue(self, guild_id, queue_type=None):
        self.calls += 1
        if self.calls == 2:
            raise TransportError("down")
        return _queue()


def test_watcher_keeps_last_view_on_error() -> None:
    api = _FlakyQueueApi()
    watcher = QueueWatcher(api, "g1")

    async def scenario():
        first = await watcher.refresh()
        second = await watcher.refresh()
        error = watcher.error
        third = await watcher.refresh()
        return first, second, error, third

    first, second, error, third = asyncio.run(scenario())
    assert second == first
    assert error == QUEUE_ERROR_MESSAGE
    assert third == first
    assert watcher.error is None
