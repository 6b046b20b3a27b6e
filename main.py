"""CLI entrypoint to force-sync an OAE ticket that is missing from ZenDesk.

Do not run this lightly: it creates a new ZenDesk ticket every time, even when
one already exists for the same OAE ticket.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from formatting import NO_FILE_ATTACHED, build_download_url
from models import SyncError
from oae_store import OaeApiStore
from resolver import resolve_ticket
from sync import sync_ticket
from zendesk_client import ZendeskClient

REQUIRED_PARAMETERS_MESSAGE = "The email, token, uri and ticket are all required parameters"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags, falling back to environment variables."""
    parser = argparse.ArgumentParser(description="Force-sync one OAE ticket into ZenDesk")
    parser.add_argument("-e", "--email", default=os.getenv("ZENDESK_EMAIL", ""), help="The ZenDesk email")
    parser.add_argument("-t", "--token", default=os.getenv("ZENDESK_TOKEN", ""), help="The ZenDesk token")
    parser.add_argument("-u", "--uri", default=os.getenv("ZENDESK_URI", ""), help="The ZenDesk API uri")
    parser.add_argument("-i", "--ticket", default=os.getenv("OAE_TICKET", ""), help="The OA ticket id")
    parser.add_argument(
        "--oae-url",
        default=os.getenv("OAE_API_URL", ""),
        help="Base URL of the OAE REST API (defaults to OAE_API_URL)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only resolve the ticket and print its download link, without ZenDesk writes",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Run one sync and return the process exit status."""
    store = OaeApiStore(base_url=args.oae_url or None)

    if args.dry_run:
        view = resolve_ticket(store, args.ticket)
        if isinstance(view, SyncError):
            logging.error("Dry run failed at stage=%s: %s", view.stage, view.message)
            return 1
        logging.info(
            "[dry-run] %s - %s",
            view.ticket.external_id,
            build_download_url(view.content) or NO_FILE_ATTACHED,
        )
        return 0

    client = ZendeskClient(email=args.email, token=args.token, uri=args.uri)
    result = sync_ticket(store, client, args.ticket)
    if isinstance(result, SyncError):
        logging.error("Sync failed at stage=%s code=%s: %s", result.stage, result.code, result.message)
        return 1

    logging.info(
        "Done. zendesk_ticket_id=%s requester_id=%s",
        result.zendesk_ticket_id,
        result.requester.user_id,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the sync."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if not (args.email and args.token and args.uri and args.ticket):
        logging.error(REQUIRED_PARAMETERS_MESSAGE)
        return 1

    try:
        return run(args)
    except RuntimeError as exc:
        logging.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
