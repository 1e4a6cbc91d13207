from pathlib import Path

import pytest

import n8n_config
from n8n_config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, load_config
from workflow_files import default_workflows_dir


def test_defaults_with_empty_env():
    cfg = load_config({})
    assert cfg.base_url == DEFAULT_BASE_URL == "http://localhost:5678"
    assert cfg.api_key is None
    assert cfg.session_cookie is None
    assert cfg.workflows_dir == default_workflows_dir()
    assert cfg.timeout == DEFAULT_TIMEOUT


def test_reads_values():
    cfg = load_config({
        "N8N_URL": "https://n8n.example.com/",
        "N8N_API_KEY": "key",
        "N8N_SESSION_COOKIE": "n8n-auth=xyz",
        "N8N_WORKFLOWS_DIR": "/srv/workflows",
        "N8N_TIMEOUT": "120",
    })
    assert cfg.base_url == "https://n8n.example.com"
    assert cfg.api_key == "key"
    assert cfg.session_cookie == "n8n-auth=xyz"
    assert cfg.workflows_dir == Path("/srv/workflows")
    assert cfg.timeout == 120.0


def test_blank_credentials_are_none():
    cfg = load_config({"N8N_API_KEY": "  ", "N8N_SESSION_COOKIE": ""})
    assert cfg.api_key is None
    assert cfg.session_cookie is None


def test_legacy_base_url_drops_api_suffix():
    cfg = load_config({"N8N_BASE_URL": "https://ii-bot.example/api/v1/"})
    assert cfg.base_url == "https://ii-bot.example"


def test_n8n_url_wins_over_legacy():
    cfg = load_config({"N8N_URL": "http://a:5678", "N8N_BASE_URL": "http://b/api/v1"})
    assert cfg.base_url == "http://a:5678"


def test_bad_timeout():
    with pytest.raises(ValueError, match="N8N_TIMEOUT"):
        load_config({"N8N_TIMEOUT": "soon"})


def test_reads_process_env_by_default(monkeypatch):
    monkeypatch.setenv("N8N_URL", "http://from-env:1234")
    monkeypatch.delenv("N8N_API_KEY", raising=False)
    assert load_config().base_url == "http://from-env:1234"


def test_config_is_frozen():
    cfg = load_config({})
    with pytest.raises(Exception):
        cfg.base_url = "http://elsewhere"


def test_load_env_does_not_override(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("N8N_API_KEY=from-file\nN8N_SESSION_COOKIE=cookie-from-file\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("N8N_API_KEY", "from-env")
    # setenv first so teardown removes whatever load_env puts there
    monkeypatch.setenv("N8N_SESSION_COOKIE", "x")
    monkeypatch.delenv("N8N_SESSION_COOKIE")

    n8n_config.load_env()
    cfg = load_config()

    assert cfg.api_key == "from-env"
    assert cfg.session_cookie == "cookie-from-file"
