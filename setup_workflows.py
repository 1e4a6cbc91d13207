#!/usr/bin/env python3
import argparse

from cli_utils import (
    create_client,
    ensure_authenticated,
    exit_with_error,
    log_activation_results,
    log_import_results,
    print_json,
)


def main() -> int:
    ap = argparse.ArgumentParser(description="Import all workflow files, then activate every workflow on the server")
    ap.add_argument("--dir", help="Workflows directory (default: N8N_WORKFLOWS_DIR or ./workflows)")
    ap.add_argument("--json", action="store_true", help="Print JSON results to stdout")
    args = ap.parse_args()

    if not args.json:
        print("🚀 Setting up workflows (import + activate)...\n")

    try:
        with create_client() as client:
            ensure_authenticated(client)

            if not args.json:
                print("📥 Step 1: Importing workflows...\n")
            import_results = client.import_all_workflows(args.dir)
            if not args.json:
                log_import_results(import_results)

            if not args.json:
                print("\n⚡ Step 2: Activating workflows...\n")
            activate_results = client.activate_all_workflows()
            if not args.json:
                log_activation_results(activate_results)
    except Exception as ex:
        exit_with_error("Error while setting up workflows", ex)

    if args.json:
        print_json({"imported": import_results, "activated": activate_results})
    else:
        print("\n🎉 Setup complete!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
