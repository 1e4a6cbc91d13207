#!/usr/bin/env python3
import argparse
import json
import sys
from pathlib import Path

from workflow_files import (
    WorkflowValidationError,
    read_workflow_file,
    sanitize_workflow_for_import,
    sanitize_workflow_for_update,
)


def main() -> int:
    ap = argparse.ArgumentParser(description="Write the payload n8n accepts for one workflow file")
    ap.add_argument("src", help="Workflow JSON (an n8n export is fine)")
    ap.add_argument("dst", nargs="?", help="Output file (default: stdout)")
    ap.add_argument("--update", action="store_true", help="PUT payload (keeps id) instead of POST payload")
    args = ap.parse_args()

    try:
        wf = read_workflow_file(Path(args.src).expanduser())
    except (OSError, WorkflowValidationError) as e:
        raise SystemExit(f"ERROR: {e}")

    out = sanitize_workflow_for_update(wf) if args.update else sanitize_workflow_for_import(wf)

    s = json.dumps(out, ensure_ascii=False)
    if args.dst:
        dst = Path(args.dst).expanduser()
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_text(s, encoding="utf-8")
    else:
        sys.stdout.write(s)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
