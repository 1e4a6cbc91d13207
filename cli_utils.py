import json
import sys
from typing import Any, Dict, List, NoReturn, Optional

import httpx

from n8n_client import ACTIVATED, ALREADY_ACTIVE, ERROR, N8nClient, eprint
from n8n_config import N8nConfig, load_config, load_env


def create_client(config: Optional[N8nConfig] = None) -> N8nClient:
    if config is None:
        load_env()
        config = load_config()
    return N8nClient.from_config(config)


def ensure_authenticated(client: N8nClient) -> None:
    auth = client.check_auth()
    if not auth.get("authenticated"):
        exit_with_error(
            "Not authenticated to n8n API. Please set N8N_API_KEY or N8N_SESSION_COOKIE environment variable."
        )


def format_http_error(error: httpx.HTTPStatusError) -> str:
    resp = error.response
    parts = [f"status={resp.status_code}"]
    body = resp.text.strip()
    if body:
        try:
            parts.append("data=" + json.dumps(resp.json(), ensure_ascii=False))
        except ValueError:
            parts.append("data=" + body[:500])
    return " ".join(parts)


def exit_with_error(message: str, error: Optional[BaseException] = None) -> NoReturn:
    eprint(f"❌ {message}")
    if error is not None:
        extra = ""
        if isinstance(error, httpx.HTTPStatusError):
            extra = f" ({format_http_error(error)})"
        eprint(f"   Details: {error}{extra}")
    sys.exit(1)


def print_json(results: Any) -> None:
    print(json.dumps(results, ensure_ascii=False, indent=2))


def log_import_results(results: List[Dict[str, Any]]) -> None:
    print("\n📊 Import Summary:")
    print("─" * 50)

    for r in results:
        if r.get("error"):
            print(f"❌ {r['file']}: {r['error']}")
        else:
            print(f"✓ {r['file']} → {r['name']} (ID: {r.get('id')})")

    ok = sum(1 for r in results if not r.get("error"))
    print(f"\n✅ Imported {ok} workflow(s)")


def log_activation_results(results: List[Dict[str, Any]]) -> None:
    print("\n📊 Activation Summary:")
    print("─" * 50)

    activated = [r for r in results if r.get("status") == ACTIVATED]
    already = [r for r in results if r.get("status") == ALREADY_ACTIVE]
    failed = [r for r in results if r.get("status") == ERROR]

    if activated:
        print(f"\n✅ Activated {len(activated)} workflow(s):")
        for r in activated:
            print(f"   - {r['name']}")

    if already:
        print(f"\nℹ️  Already active {len(already)} workflow(s):")
        for r in already:
            print(f"   - {r['name']}")

    if failed:
        print(f"\n❌ Failed to activate {len(failed)} workflow(s):")
        for r in failed:
            print(f"   - {r['name']}: {r.get('error')}")
