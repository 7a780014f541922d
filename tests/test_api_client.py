import pytest
import requests

from mundodraft.api_client import MundoApiClient
from mundodraft.config import ClientConfig
from mundodraft.errors import ApiError, NotFoundError, SelectionRejectedError, TransportError
from mundodraft.models import DraftAction, DraftLifecycle


class _FakeResponse:
    def __init__(self, status_code: int, body=None, reason: str = "OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


def _client(responses, token=None):
    client = MundoApiClient(ClientConfig(api_url="http://api.test/api", api_token=token, backoff_s=0, retries=3))
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    client.session.request = fake_request
    return client, calls


def test_status_is_unwrapped_from_envelope() -> None:
    client, calls = _client([
        _FakeResponse(200, {"success": True, "data": {"id": "d1", "status": "DRAFTING", "currentPhase": "BLUE_BAN"}})
    ])
    status = client.get_draft_status("d1")
    assert status.status == DraftLifecycle.DRAFTING
    assert calls[0][0] == "GET"
    assert calls[0][1] == "http://api.test/api/drafts/d1/status"


def test_not_found_is_distinct() -> None:
    client, _ = _client([_FakeResponse(404, {"success": False, "message": "Draft not found"}, "Not Found")])
    with pytest.raises(NotFoundError):
        client.get_draft("NOPE")


def test_select_sends_action_and_token() -> None:
    client, calls = _client([_FakeResponse(200, {"success": True, "data": {"message": "ok"}})], token="t0k")
    assert client.select_champion("d1", "Ahri", DraftAction.PICK) == "ok"
    method, url, kwargs = calls[0]
    assert method == "POST"
    assert url.endswith("/drafts/d1/select")
    assert kwargs["json"] == {"championId": "Ahri", "actionType": "PICK"}
    assert kwargs["headers"]["Authorization"] == "Bearer t0k"


def test_select_rejection_is_not_retried() -> None:
    client, calls = _client([
        _FakeResponse(400, {"success": False, "message": "Not your turn"}, "Bad Request"),
        _FakeResponse(200, {"success": True, "data": {}}),
    ])
    with pytest.raises(SelectionRejectedError) as exc_info:
        client.select_champion("d1", "Ahri", DraftAction.BAN)
    assert exc_info.value.message == "Not your turn"
    assert len(calls) == 1


def test_select_aborted_after_send_is_not_resubmitted() -> None:
    client, calls = _client([
        requests.ConnectionError("('Connection aborted.', RemoteDisconnected('closed'))"),
        _FakeResponse(400, {"success": False, "message": "Champion already selected"}, "Bad Request"),
    ])
    with pytest.raises(TransportError):
        client.select_champion("d1", "Ahri", DraftAction.PICK)
    assert len(calls) == 1


def test_select_retries_when_connect_never_completed() -> None:
    client, calls = _client([
        requests.exceptions.ConnectTimeout("connect timed out"),
        _FakeResponse(200, {"success": True, "data": {"message": "ok"}}),
    ])
    assert client.select_champion("d1", "Ahri", DraftAction.PICK) == "ok"
    assert len(calls) == 2


def test_get_retries_server_errors_then_succeeds() -> None:
    client, calls = _client([
        _FakeResponse(503, None, "Service Unavailable"),
        requests.ConnectionError("reset"),
        _FakeResponse(200, {"success": True, "data": {"champions": [], "pagination": {}}}),
    ])
    page = client.get_champions(role="MID", limit=20)
    assert page.champions == []
    assert len(calls) == 3
    assert calls[-1][2]["params"] == {"role": "MID", "limit": 20}


def test_exhausted_retries_raise_transport_error() -> None:
    client, calls = _client([requests.Timeout("slow")] * 3)
    with pytest.raises(TransportError):
        client.get_draft_status("d1")
    assert len(calls) == 3


def test_success_false_envelope_raises() -> None:
    client, _ = _client([_FakeResponse(200, {"success": False, "error": "Draft locked"})])
    with pytest.raises(ApiError, match="Draft locked"):
        client.get_draft_status("d1")


def test_queue_type_is_passed_through() -> None:
    client, calls = _client([
        _FakeResponse(200, {"success": True, "data": {"queues": {}, "stats": {"totalPlayers": 0}}})
    ])
    client.get_guild_queue("g1", "RANKED_DRAFT")
    assert calls[0][1].endswith("/queues/guild/g1")
    assert calls[0][2]["params"] == {"queueType": "RANKED_DRAFT"}


def test_queue_membership_posts_payloads() -> None:
    client, calls = _client([
        _FakeResponse(200, {"success": True, "data": {"message": "Joined queue"}}),
        _FakeResponse(200, {"success": True, "data": {"message": "Left queue"}}),
    ], token="t0k")
    assert client.join_queue("u1", "g1", "c1", "MID", "RANKED_DRAFT") == "Joined queue"
    assert client.leave_queue("u1", "g1") == "Left queue"
    assert calls[0][0] == "POST"
    assert calls[0][1].endswith("/queues/join")
    assert calls[0][2]["json"] == {
        "userId": "u1",
        "guildId": "g1",
        "channelId": "c1",
        "role": "MID",
        "queueType": "RANKED_DRAFT",
    }
    assert calls[0][2]["headers"]["Authorization"] == "Bearer t0k"
    assert calls[1][1].endswith("/queues/leave")
    assert calls[1][2]["json"] == {"userId": "u1", "guildId": "g1"}


def test_start_draft_returns_message() -> None:
    client, calls = _client([_FakeResponse(200, {"success": True, "data": {"message": "Draft started"}})])
    assert client.start_draft("d1") == "Draft started"
    assert calls[0][0] == "POST"
    assert calls[0][1] == "http://api.test/api/drafts/d1/start"


def test_search_quotes_query() -> None:
    client, calls = _client([
        _FakeResponse(200, {"success": True, "data": {"champions": [{"id": "KSante", "name": "K'Sante"}]}})
    ])
    champions = client.search_champions("k'sante rift", limit=5)
    assert [c.name for c in champions] == ["K'Sante"]
    assert calls[0][1] == "http://api.test/api/champions/search/k%27sante%20rift"
    assert calls[0][2]["params"] == {"limit": 5}


def test_user_endpoints() -> None:
    client, calls = _client([
        _FakeResponse(200, {"success": True, "data": {"id": "u1", "username": "mundo"}}),
        _FakeResponse(200, {"success": True, "data": {"drafts": [{"id": "d1", "unique_id": "ABCD1234"}]}}),
        _FakeResponse(200, {"success": True, "data": {"champions": [{"championId": "Ahri", "games": 3}]}}),
    ])
    assert client.get_user("u1")["username"] == "mundo"
    drafts = client.get_user_drafts("u1", limit=10, status="COMPLETED")
    assert [d.unique_id for d in drafts] == ["ABCD1234"]
    assert client.get_user_champion_stats("u1", limit=5) == [{"championId": "Ahri", "games": 3}]
    assert calls[0][1].endswith("/users/u1")
    assert calls[1][1].endswith("/users/u1/drafts")
    assert calls[1][2]["params"] == {"limit": 10, "status": "COMPLETED"}
    assert calls[2][1].endswith("/users/u1/champions")
    assert calls[2][2]["params"] == {"limit": 5}
