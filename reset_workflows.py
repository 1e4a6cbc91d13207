#!/usr/bin/env python3
import argparse
from pathlib import Path
from typing import Any, Dict, List

from cli_utils import create_client, ensure_authenticated, exit_with_error, log_activation_results, log_import_results
from n8n_client import N8nClient, eprint
from workflow_files import list_workflow_files


def delete_all_workflows(client: N8nClient) -> List[Dict[str, Any]]:
    workflows = client.list_workflows()
    print(f"Found {len(workflows)} workflow(s)")

    results = []
    for wf in workflows:
        wid = wf.get("id")
        if not wid:
            continue
        try:
            client.delete_workflow(wid)
            results.append({"name": wf.get("name"), "id": wid, "deleted": True})
            print(f"  ✓ Deleted: {wf.get('name')}")
        except Exception as ex:
            results.append({"name": wf.get("name"), "id": wid, "deleted": False, "error": str(ex)})
            eprint(f"  ✗ Failed to delete {wf.get('name')}: {ex}")
    return results


def verify_active(client: N8nClient, expected: int) -> Dict[str, int]:
    workflows = client.list_workflows()
    active = sum(1 for wf in workflows if wf.get("active"))
    print(f"Total workflows: {len(workflows)}")
    print(f"Active workflows: {active}")
    if active < expected:
        eprint(f"⚠️  Warning: expected at least {expected} active workflow(s)")
    return {"total": len(workflows), "active": active, "expected": expected}


def main() -> int:
    ap = argparse.ArgumentParser(description="Full reset test: delete everything, import, activate, verify")
    ap.add_argument("--dir", help="Workflows directory (default: N8N_WORKFLOWS_DIR or ./workflows)")
    args = ap.parse_args()

    print("🧪 Full setup test: Delete → Import → Activate → Verify\n")

    try:
        with create_client() as client:
            ensure_authenticated(client)
            wf_dir = Path(args.dir) if args.dir else client.workflows_dir

            print("🗑️  Step 1: Deleting all existing workflows...\n")
            delete_all_workflows(client)

            print("\n📥 Step 2: Importing workflows...\n")
            log_import_results(client.import_all_workflows(wf_dir))

            print("\n⚡ Step 3: Activating workflows...\n")
            log_activation_results(client.activate_project_workflows(wf_dir))

            print("\n✅ Step 4: Verifying workflows...\n")
            verify_active(client, len(list_workflow_files(wf_dir)))
    except Exception as ex:
        exit_with_error("Error during full setup test", ex)

    print("\n🎉 Full setup test complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
