#!/usr/bin/env python3
import argparse

from cli_utils import create_client, ensure_authenticated, exit_with_error, log_activation_results, print_json


def main() -> int:
    ap = argparse.ArgumentParser(description="Activate the n8n workflows that belong to this project")
    ap.add_argument("--dir", help="Workflows directory (default: N8N_WORKFLOWS_DIR or ./workflows)")
    ap.add_argument("--json", action="store_true", help="Print JSON results to stdout")
    args = ap.parse_args()

    if not args.json:
        print("🚀 Activating workflows in n8n...\n")

    try:
        with create_client() as client:
            ensure_authenticated(client)
            # only workflows that have a local file; anything else on the server is left alone
            results = client.activate_project_workflows(args.dir)
    except Exception as ex:
        exit_with_error("Error while activating workflows", ex)

    if args.json:
        print_json(results)
    else:
        log_activation_results(results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
