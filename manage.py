#!/usr/bin/env python3
"""
PharmaStock management CLI.

Usage:
    python manage.py serve        Start the API server
    python manage.py migrate      Apply pending database migrations
    python manage.py check-db     Run schema integrity checks
"""

import argparse
import asyncio
import sys


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from pharmastock.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "pharmastock.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from pharmastock.config import configure_logging
    from pharmastock.infrastructure.storage.sqlite.migrations import run_migrations

    configure_logging()
    results = asyncio.run(run_migrations(create_backup_before=not args.no_backup))
    if not results:
        print("Database is up to date.")
        return

    for r in results:
        mark = "ok" if r.success else f"FAILED: {r.error}"
        print(f"  v{r.version}_{r.name} ({r.execution_time_ms} ms) {mark}")
    if not all(r.success for r in results):
        sys.exit(1)


def cmd_check_db(args: argparse.Namespace) -> None:
    from pharmastock.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity())
    failed = False
    for check in checks:
        print(f"  {check['check']}: {check['status']}")
        failed = failed or check["status"] != "PASS"
    if failed:
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="PharmaStock management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    p_check = sub.add_parser("check-db", help="Verify schema integrity")
    p_check.set_defaults(func=cmd_check_db)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
