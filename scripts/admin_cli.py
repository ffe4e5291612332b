#!/usr/bin/env python3
"""
Command-line admin panel for the Bonparte Cafe API.

Drives the same AdminController the web panel uses, so validation, id
assignment and error reporting behave identically.

Usage:
    python scripts/admin_cli.py health
    python scripts/admin_cli.py list menu
    python scripts/admin_cli.py show contact.json
    python scripts/admin_cli.py put menu.json --input menu.json
    python scripts/admin_cli.py delete events 3 --yes
    python scripts/admin_cli.py backup
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.clients.admin import AdminController
from app.clients.data_api import DataAPI
from app.core.logging import setup_logging

# Load environment variables
load_dotenv()

TABLES = {
    "menu": ("render_menu_table", "delete_menu_item"),
    "specials": ("render_specials_table", "delete_special"),
    "events": ("render_events_table", "delete_event"),
}


def ask(message: str) -> bool:
    return input(f"{message} [y/N] ").strip().lower() in ("y", "yes")


def print_table(table):
    print(table.heading)
    print("-" * 50)
    for row in table.rows:
        print("  ".join(str(value) for value in row.values()))


def print_toasts(admin: AdminController):
    for toast in admin.notifier.history:
        print(f"[{toast.kind}] {toast.message}")
    admin.notifier.history.clear()


async def run(args) -> int:
    async with DataAPI(base_url=args.url) as api:
        confirm = (lambda message: True) if getattr(args, "yes", False) else ask
        admin = AdminController(api, confirm=confirm)

        if args.command == "health":
            healthy = await api.check_health()
            print("OK" if healthy else "Server unreachable")
            return 0 if healthy else 1

        if args.command == "backup":
            path = await admin.create_backup()
            print_toasts(admin)
            if path:
                print(path)
            return 0 if path else 1

        if args.command == "show":
            text = await admin.load_json(args.filename)
            print(text if text is not None else admin.json_status)
            return 0 if text is not None else 1

        if args.command == "put":
            text = Path(args.input).read_text(encoding="utf-8")
            saved = await admin.save_json(args.filename, text)
            print(admin.json_status)
            return 0 if saved else 1

        await admin.load_all_data()
        render_name, delete_name = TABLES[args.section]

        if args.command == "list":
            table = getattr(admin, render_name)()
            if table is None:
                print(f"{args.section} data is not available")
                return 1
            print_table(table)
            return 0

        if args.command == "delete":
            deleted = await getattr(admin, delete_name)(args.id)
            print_toasts(admin)
            return 0 if deleted else 1

    return 1


def main():
    parser = argparse.ArgumentParser(
        description="Manage Bonparte Cafe menu, specials, events and contact data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Base URL of the cafe API (default: CAFE_API_URL or http://localhost:3000)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("health", help="Check that the API is running")
    commands.add_parser("backup", help="Snapshot every data file on the server")

    list_parser = commands.add_parser("list", help="List the items of a section")
    list_parser.add_argument("section", choices=sorted(TABLES))

    show_parser = commands.add_parser("show", help="Print a document as JSON")
    show_parser.add_argument("filename")

    put_parser = commands.add_parser("put", help="Replace a document from a JSON file")
    put_parser.add_argument("filename")
    put_parser.add_argument("--input", required=True, help="Path of the JSON file to upload")

    delete_parser = commands.add_parser("delete", help="Delete one item by id")
    delete_parser.add_argument("section", choices=sorted(TABLES))
    delete_parser.add_argument("id", type=int)
    delete_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
