import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx

from n8n_config import DEFAULT_TIMEOUT, N8nConfig
from workflow_files import (
    PathLike,
    assert_non_empty_string,
    default_workflows_dir,
    list_workflow_files,
    read_workflow_file,
    sanitize_workflow_for_import,
    sanitize_workflow_for_update,
)

WORKFLOWS_PATH = "/api/v1/workflows"

ACTIVATED = "activated"
ALREADY_ACTIVE = "already active"
ERROR = "error"


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


class N8nClient:
    """
    Thin wrapper over the n8n public REST API (/api/v1/workflows).

    Every call is one HTTP round trip, no retries, no caching: each operation
    reads the server state fresh. Non-2xx responses raise httpx.HTTPStatusError,
    connection problems raise whatever httpx raises.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        session_cookie: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        workflows_dir: Optional[PathLike] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._session_cookie = session_cookie
        self._workflows_dir = Path(workflows_dir) if workflows_dir else default_workflows_dir()

        # httpx adds Content-Type itself when a JSON body is sent
        headers = {"Accept": "application/json"}
        if api_key:
            headers["X-N8N-API-KEY"] = api_key
        if session_cookie:
            headers["Cookie"] = session_cookie

        self._http = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: N8nConfig, transport: Optional[httpx.BaseTransport] = None) -> "N8nClient":
        return cls(
            config.base_url,
            api_key=config.api_key,
            session_cookie=config.session_cookie,
            timeout=config.timeout,
            workflows_dir=config.workflows_dir,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def session_cookie(self) -> Optional[str]:
        return self._session_cookie

    @property
    def workflows_dir(self) -> Path:
        return self._workflows_dir

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "N8nClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        r = self._http.request(method, path, json=body)
        r.raise_for_status()
        if not r.content:
            return None
        return r.json()

    # --- single-item operations ---

    def check_auth(self) -> Dict[str, Any]:
        # there is no whoami endpoint across n8n versions, so probe with a listing
        try:
            self._request("GET", WORKFLOWS_PATH)
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                return {"authenticated": False, "error": "Not authenticated"}
            raise
        return {"authenticated": True}

    def list_workflows(self) -> List[Dict[str, Any]]:
        # no pagination: assumes everything fits in the first page
        body = self._request("GET", WORKFLOWS_PATH)
        return (body or {}).get("data", [])

    def get_workflow(self, workflow_id: str) -> Dict[str, Any]:
        assert_non_empty_string(workflow_id, "Workflow ID")
        return self._request("GET", f"{WORKFLOWS_PATH}/{workflow_id}")

    def import_workflow(self, file_path: PathLike) -> Dict[str, Any]:
        wf = read_workflow_file(file_path)
        return self._request("POST", WORKFLOWS_PATH, sanitize_workflow_for_import(wf))

    def update_workflow(self, workflow_id: str, file_path: PathLike) -> Dict[str, Any]:
        assert_non_empty_string(workflow_id, "Workflow ID")
        wf = read_workflow_file(file_path)
        return self._request("PUT", f"{WORKFLOWS_PATH}/{workflow_id}", sanitize_workflow_for_update(wf))

    def activate_workflow(self, workflow_id: str) -> Dict[str, Any]:
        assert_non_empty_string(workflow_id, "Workflow ID")
        return self._request("POST", f"{WORKFLOWS_PATH}/{workflow_id}/activate")

    def deactivate_workflow(self, workflow_id: str) -> Dict[str, Any]:
        assert_non_empty_string(workflow_id, "Workflow ID")
        return self._request("POST", f"{WORKFLOWS_PATH}/{workflow_id}/deactivate")

    def delete_workflow(self, workflow_id: str) -> None:
        assert_non_empty_string(workflow_id, "Workflow ID")
        self._request("DELETE", f"{WORKFLOWS_PATH}/{workflow_id}")

    def import_or_update_workflow(self, file_path: PathLike, workflow_name: str) -> Dict[str, Any]:
        """
        Upsert by name: update the first remote workflow whose name matches
        exactly, otherwise create a new one. Re-lists the server on every call.
        """
        assert_non_empty_string(workflow_name, "Workflow name")
        try:
            existing = next((w for w in self.list_workflows() if w.get("name") == workflow_name), None)
            wid = (existing or {}).get("id")
            if wid:
                eprint(f"[n8n_client] updating existing workflow: {workflow_name} (id={wid})")
                return self.update_workflow(wid, file_path)
            eprint(f"[n8n_client] importing new workflow: {workflow_name}")
            return self.import_workflow(file_path)
        except Exception as ex:
            eprint(f"[n8n_client] ERROR importing/updating workflow {workflow_name}:", ex)
            raise

    # --- bulk operations: per-item errors go into the results, never raised ---

    def import_all_workflows(self, workflows_dir: Optional[PathLike] = None) -> List[Dict[str, Any]]:
        wf_dir = Path(workflows_dir) if workflows_dir else self._workflows_dir
        results: List[Dict[str, Any]] = []

        for fname in list_workflow_files(wf_dir):
            name = None
            try:
                name = read_workflow_file(wf_dir / fname)["name"]
                wf = self.import_or_update_workflow(wf_dir / fname, name)
                results.append({"file": fname, "name": name, "id": wf.get("id"), "active": wf.get("active")})
            except Exception as ex:
                eprint(f"[n8n_client] failed to import {fname}:", ex)
                results.append({"file": fname, "name": name, "error": str(ex)})

        return results

    def _activate_workflows_with_filter(
        self, predicate: Callable[[Dict[str, Any]], bool]
    ) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []

        for wf in self.list_workflows():
            if not predicate(wf):
                continue
            wid = wf.get("id")
            if not wid:
                continue
            name = wf.get("name")

            if wf.get("active"):
                results.append({"name": name, "id": wid, "status": ALREADY_ACTIVE})
                eprint(f"[n8n_client] - already active: {name}")
                continue

            try:
                self.activate_workflow(wid)
                results.append({"name": name, "id": wid, "status": ACTIVATED})
                eprint(f"[n8n_client] ✓ activated: {name}")
            except Exception as ex:
                results.append({"name": name, "id": wid, "status": ERROR, "error": str(ex)})
                eprint(f"[n8n_client] ✗ failed to activate {name}:", ex)

        return results

    def activate_all_workflows(self) -> List[Dict[str, Any]]:
        return self._activate_workflows_with_filter(lambda wf: True)

    def activate_project_workflows(self, workflows_dir: Optional[PathLike] = None) -> List[Dict[str, Any]]:
        """Activate only remote workflows whose name matches one of the local files."""
        wf_dir = Path(workflows_dir) if workflows_dir else self._workflows_dir
        names = {read_workflow_file(wf_dir / f)["name"] for f in list_workflow_files(wf_dir)}
        return self._activate_workflows_with_filter(lambda wf: wf.get("name") in names)
