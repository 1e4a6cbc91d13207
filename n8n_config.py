import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from workflow_files import default_workflows_dir

DEFAULT_BASE_URL = "http://localhost:5678"
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class N8nConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    session_cookie: Optional[str] = None
    workflows_dir: Path = default_workflows_dir()
    timeout: float = DEFAULT_TIMEOUT


def load_env() -> None:
    # .env next to the scripts first, then the working directory; real env wins
    load_dotenv(Path(__file__).resolve().parent / ".env", override=False)
    load_dotenv(find_dotenv(usecwd=True), override=False)


def _opt(environ: Mapping[str, str], key: str) -> Optional[str]:
    v = (environ.get(key) or "").strip()
    return v or None


def _base_url(environ: Mapping[str, str]) -> str:
    url = _opt(environ, "N8N_URL")
    if not url:
        # N8N_BASE_URL is the API root (https://host/api/v1) in older .agent_env files
        legacy = _opt(environ, "N8N_BASE_URL")
        if legacy:
            url = legacy.rstrip("/")
            if url.endswith("/api/v1"):
                url = url[: -len("/api/v1")]
    return (url or DEFAULT_BASE_URL).rstrip("/")


def load_config(environ: Optional[Mapping[str, str]] = None) -> N8nConfig:
    """
    Snapshot of the n8n settings taken once at startup.
    Call load_env() before this if .env files should be honoured.
    """
    env = os.environ if environ is None else environ

    timeout_raw = _opt(env, "N8N_TIMEOUT")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError:
        raise ValueError(f"N8N_TIMEOUT must be a number of seconds, got {timeout_raw!r}") from None

    wf_dir = _opt(env, "N8N_WORKFLOWS_DIR")

    return N8nConfig(
        base_url=_base_url(env),
        api_key=_opt(env, "N8N_API_KEY"),
        session_cookie=_opt(env, "N8N_SESSION_COOKIE"),
        workflows_dir=Path(wf_dir).expanduser() if wf_dir else default_workflows_dir(),
        timeout=timeout,
    )
