#!/usr/bin/env python3
import argparse
import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import httpx

from n8n_client import eprint
from n8n_config import N8nConfig, load_config, load_env

SAMPLE_DIR = Path("tests/output/samples")
SAMPLE_TIMEOUT = 60.0

SAMPLE_TARGETS: List[Dict[str, Any]] = [
    {
        "name": "01-deterministic-text-summarizer",
        "endpoint": "/webhook/summarize",
        "payload": {
            "text": "This is a test text about AI transforming industries. "
                    "Include multiple sentences so the summary has content.",
            "title": "AI Impact",
            "language": "en",
        },
    },
    {
        "name": "02-deterministic-url-summarizer",
        "endpoint": "/webhook/summarize-url",
        "payload": {"url": "https://example.com/", "language": "en"},
    },
    {
        "name": "03-deterministic-url-qna",
        "endpoint": "/webhook/question-url",
        "payload": {
            "url": "https://example.com/",
            "question": "What is the purpose of this site?",
            "language": "en",
        },
    },
    {
        "name": "04-agentic-chat",
        "endpoint": "/webhook/agent-chat",
        "payload": {"input": "Hello! Introduce yourself."},
    },
    {
        "name": "05-agentic-url-tools",
        "endpoint": "/webhook/agent-url-tools",
        "payload": {"url": "https://example.com/", "question": "Summarize this website."},
    },
]


def auth_headers(config: N8nConfig) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if config.api_key:
        headers["X-N8N-API-KEY"] = config.api_key
    if config.session_cookie:
        headers["Cookie"] = config.session_cookie
    return headers


def sample_target(client: httpx.Client, target: Dict[str, Any], out_dir: Path) -> Path:
    """
    POST one sample payload and save {metadata, request, response}.
    HTTP error statuses are recorded, not raised; transport errors propagate.
    """
    r = client.post(target["endpoint"], json=target["payload"])
    try:
        data: Any = r.json()
    except ValueError:
        data = r.text

    record = {
        "metadata": {
            "name": target["name"],
            "endpoint": target["endpoint"],
            "status": r.status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "request": target["payload"],
        "response": data,
    }

    out_dir.mkdir(parents=True, exist_ok=True)
    fp = out_dir / f"{target['name']}-{int(time.time() * 1000)}.json"
    fp.write_text(json.dumps(record, ensure_ascii=False, indent=2), encoding="utf-8")
    return fp


def main() -> int:
    ap = argparse.ArgumentParser(description="Call the deployed webhooks with sample payloads and save the responses")
    ap.add_argument("--out", default=str(SAMPLE_DIR), help=f"Output directory (default: {SAMPLE_DIR})")
    args = ap.parse_args()

    load_env()
    config = load_config()
    out_dir = Path(args.out)

    with httpx.Client(base_url=config.base_url, headers=auth_headers(config), timeout=SAMPLE_TIMEOUT) as client:
        for target in SAMPLE_TARGETS:
            print(f"↻ {target['name']} → {config.base_url}{target['endpoint']} ... ", end="", flush=True)
            try:
                fp = sample_target(client, target, out_dir)
                print(f"saved → {fp}")
            except httpx.HTTPError as ex:
                print("failed")
                eprint(f"   Error sampling {target['name']}: {ex}")

    print(f"\n✅ Sampling complete. See {out_dir} for payloads.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
