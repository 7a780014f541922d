from mundodraft.config import DEFAULT_API_URL, client_config_from_env


def test_defaults_without_environment(monkeypatch) -> None:
    for name in ("MUNDO_API_URL", "MUNDO_API_TOKEN", "MUNDO_POLL_INTERVAL_S", "MUNDO_PUSH"):
        monkeypatch.delenv(name, raising=False)
    config = client_config_from_env()
    assert config.api_url == DEFAULT_API_URL
    assert config.api_token is None
    assert config.poll_interval_s == 2.0
    assert config.queue_poll_interval_s == 5.0
    assert config.push_enabled
    assert config.ws_max_reconnects == 5


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MUNDO_API_URL", "http://localhost:3001/api/")
    monkeypatch.setenv("MUNDO_POLL_INTERVAL_S", "0.5")
    monkeypatch.setenv("MUNDO_RETRIES", "bogus")
    monkeypatch.setenv("MUNDO_PUSH", "no")
    config = client_config_from_env()
    assert config.api_url == "http://localhost:3001/api"
    assert config.poll_interval_s == 0.5
    assert config.retries == 3
    assert not config.push_enabled


def test_push_reconnect_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MUNDO_WS_MAX_RECONNECTS", "2")
    monkeypatch.setenv("MUNDO_WS_RECONNECT_DELAY_S", "0.25")
    monkeypatch.setenv("MUNDO_WS_MAX_RECONNECT_DELAY_S", "4")
    config = client_config_from_env()
    assert config.ws_max_reconnects == 2
    assert config.ws_reconnect_delay_s == 0.25
    assert config.ws_max_reconnect_delay_s == 4.0
