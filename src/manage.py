"""Storefront database management CLI.

Usage:
    PROTEAN_ENV=production DATABASE_URL=postgresql://... python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py reset-db
"""

import argparse
import sys


def _run(action):
    from storefront.domain import storefront
    from storefront.utils import db

    storefront.init()
    touched = getattr(db, action)(storefront)
    if not touched:
        print("No SQL provider configured; nothing to do.")
        return
    for name in touched:
        print(f"  {action.replace('_', '-')} done for provider '{name}'.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("reset-db", help="Drop and recreate all database tables")

    args = parser.parse_args(argv)

    actions = {"setup-db": "setup_db", "drop-db": "drop_db", "reset-db": "reset_db"}
    if args.command not in actions:
        parser.print_help()
        sys.exit(1)
    _run(actions[args.command])


if __name__ == "__main__":
    main()
