import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

from n8n_client import N8nClient


def make_workflow(name: str, **extra: Any) -> Dict[str, Any]:
    wf = {
        "name": name,
        "nodes": [
            {
                "id": "wh1",
                "name": "Webhook In",
                "type": "n8n-nodes-base.webhook",
                "typeVersion": 2,
                "position": [240, 300],
                "parameters": {"path": name.lower(), "httpMethod": "POST"},
            },
            {
                "id": "resp",
                "name": "Respond",
                "type": "n8n-nodes-base.respondToWebhook",
                "typeVersion": 1,
                "position": [460, 300],
                "parameters": {"responseBody": "={{$json}}"},
            },
        ],
        "connections": {
            "Webhook In": {"main": [[{"node": "Respond", "type": "main", "index": 0}]]},
        },
        "settings": {},
    }
    wf.update(extra)
    return wf


def write_workflow(directory: Path, fname: str, wf: Any) -> Path:
    fp = directory / fname
    fp.write_text(json.dumps(wf, ensure_ascii=False), encoding="utf-8")
    return fp


class FakeN8n:
    """
    In-memory stand-in for the /api/v1/workflows endpoints.
    Records every request; fail_* hooks force error statuses.
    """

    def __init__(self, workflows: Optional[List[Dict[str, Any]]] = None):
        self.workflows: List[Dict[str, Any]] = [dict(w) for w in (workflows or [])]
        self.requests: List[httpx.Request] = []
        self.list_status = 200
        self.fail_activate: Dict[str, int] = {}
        self.fail_delete: Dict[str, int] = {}
        self._next_id = 1000

    @property
    def calls(self) -> List[tuple]:
        return [(r.method, r.url.path) for r in self.requests]

    def body(self, i: int) -> Dict[str, Any]:
        return json.loads(self.requests[i].content)

    def _find(self, wid: str) -> Optional[Dict[str, Any]]:
        return next((w for w in self.workflows if w.get("id") == wid), None)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [p for p in request.url.path.split("/") if p][3:]  # strip api/v1/workflows
        method = request.method

        if not parts:
            if method == "GET":
                if self.list_status != 200:
                    return httpx.Response(self.list_status, json={"message": "nope"})
                return httpx.Response(200, json={"data": self.workflows, "nextCursor": None})
            if method == "POST":
                wf = json.loads(request.content)
                self._next_id += 1
                created = dict(wf, id=str(self._next_id), active=False)
                self.workflows.append(created)
                return httpx.Response(200, json=created)

        wid = parts[0] if parts else ""
        wf = self._find(wid)
        if wf is None:
            return httpx.Response(404, json={"message": "Not Found"})

        if len(parts) == 2 and method == "POST":
            if parts[1] == "activate":
                if wid in self.fail_activate:
                    return httpx.Response(self.fail_activate[wid], json={"message": "cannot activate"})
                wf["active"] = True
            elif parts[1] == "deactivate":
                wf["active"] = False
            return httpx.Response(200, json=wf)

        if method == "GET":
            return httpx.Response(200, json=wf)
        if method == "PUT":
            wf.update(json.loads(request.content))
            return httpx.Response(200, json=wf)
        if method == "DELETE":
            if wid in self.fail_delete:
                return httpx.Response(self.fail_delete[wid], json={"message": "cannot delete"})
            self.workflows.remove(wf)
            return httpx.Response(200, json=wf)

        return httpx.Response(405)


@pytest.fixture
def fake_n8n():
    return FakeN8n()


@pytest.fixture
def wf_dir(tmp_path):
    d = tmp_path / "workflows"
    d.mkdir()
    return d


@pytest.fixture
def client(fake_n8n, wf_dir):
    c = N8nClient(
        "http://n8n.test",
        api_key="key-123",
        workflows_dir=wf_dir,
        transport=httpx.MockTransport(fake_n8n.handler),
    )
    yield c
    c.close()
