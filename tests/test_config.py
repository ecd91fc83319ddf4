from __future__ import annotations

from ingestion.config import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, DEFAULT_UA, FetchConfig


def test_defaults(monkeypatch):
    for name in ("TEXTPROXY_TIMEOUT", "TEXTPROXY_MAX_REDIRECTS", "TEXTPROXY_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    cfg = FetchConfig.from_env()
    assert cfg.timeout == DEFAULT_TIMEOUT == 30.0
    assert cfg.max_redirects == DEFAULT_MAX_REDIRECTS == 10
    assert cfg.user_agent == DEFAULT_UA


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TEXTPROXY_TIMEOUT", "5")
    monkeypatch.setenv("TEXTPROXY_MAX_REDIRECTS", "2")
    monkeypatch.setenv("TEXTPROXY_USER_AGENT", "test-agent/1.0")
    cfg = FetchConfig.from_env()
    assert (cfg.timeout, cfg.max_redirects, cfg.user_agent) == (5.0, 2, "test-agent/1.0")
    assert cfg.headers()["User-Agent"] == "test-agent/1.0"


def test_bad_env_values_fall_back(monkeypatch):
    monkeypatch.setenv("TEXTPROXY_TIMEOUT", "soon")
    monkeypatch.setenv("TEXTPROXY_MAX_REDIRECTS", "-1")
    cfg = FetchConfig.from_env()
    assert cfg.timeout == DEFAULT_TIMEOUT
    assert cfg.max_redirects == DEFAULT_MAX_REDIRECTS
