"""Force-sync one OAE ticket into ZenDesk.

Runs strictly forward: Idle -> Fetching -> UserResolving -> Creating ->
Commenting -> Done. The first failing stage moves the run to Failed and its
SyncError is returned to the caller. A ticket that was created before the
comment failed is left in place.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

from formatting import build_download_url, render_comment_body, render_ticket_body, ticket_subject
from helpdesk_users import get_or_create_zendesk_user
from models import SyncError, SyncResult, SyncState, TicketView
from oae_store import RecordStore
from resolver import resolve_ticket
from zendesk_client import ZendeskClient


LOGGER = logging.getLogger(__name__)


def sync_ticket(store: RecordStore, client: ZendeskClient, ticket_id: str) -> SyncResult | SyncError:
    """Resolve ``ticket_id`` from OAE and mirror it into ZenDesk."""
    _transition(SyncState.IDLE, SyncState.FETCHING, ticket_id)
    view = resolve_ticket(store, ticket_id)
    if isinstance(view, SyncError):
        _transition(SyncState.FETCHING, SyncState.FAILED, ticket_id)
        return view

    return submit_ticket(client, view)


def submit_ticket(
    client: ZendeskClient, view: TicketView, group_id: int | None = None
) -> SyncResult | SyncError:
    """Create the ZenDesk ticket for ``view`` and attach the private comment."""
    ticket_id = view.ticket.ticket_id
    if group_id is None:
        group_id = int(os.getenv("ZENDESK_GROUP_ID", "1"))

    # Contact the submitter at the address given in the form, else their account email.
    email = view.publication.contact_email or view.user.email
    if not email:
        LOGGER.error("No contact email for ticket %s", view.ticket.external_id)
        _transition(SyncState.FETCHING, SyncState.FAILED, ticket_id)
        return SyncError(stage=SyncState.USER_RESOLVING.value, message="No contact email available", code=400)

    _transition(SyncState.FETCHING, SyncState.USER_RESOLVING, ticket_id)
    requester = get_or_create_zendesk_user(client, view.user.display_name, email)
    if isinstance(requester, SyncError):
        LOGGER.error("Error creating ZenDesk user: %s", requester.message)
        _transition(SyncState.USER_RESOLVING, SyncState.FAILED, ticket_id)
        return requester

    _transition(SyncState.USER_RESOLVING, SyncState.CREATING, ticket_id)
    payload = build_ticket_payload(view, requester.user_id, email, group_id)
    try:
        _, created = client.create_ticket(payload)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.error("Error creating ticket on ZenDesk.com: %s", exc)
        _transition(SyncState.CREATING, SyncState.FAILED, ticket_id)
        return SyncError(stage=SyncState.CREATING.value, message=f"Error creating ticket on ZenDesk.com: {exc}")
    zendesk_ticket_id = created["id"]
    LOGGER.info("Created ZenDesk ticket id=%s for %s", zendesk_ticket_id, view.ticket.external_id)

    _transition(SyncState.CREATING, SyncState.COMMENTING, ticket_id)
    try:
        client.update_ticket(zendesk_ticket_id, build_comment_payload(view))
    except requests.RequestException as exc:
        LOGGER.error("Error commenting on ticket id=%s: %s", zendesk_ticket_id, exc)
        _transition(SyncState.COMMENTING, SyncState.FAILED, ticket_id)
        return SyncError(stage=SyncState.COMMENTING.value, message=f"Error commenting on ticket: {exc}")

    _transition(SyncState.COMMENTING, SyncState.DONE, ticket_id)
    return SyncResult(zendesk_ticket_id=zendesk_ticket_id, requester=requester)


def build_ticket_payload(
    view: TicketView, requester_id: int, email: str, group_id: int
) -> dict[str, Any]:
    external_id = view.ticket.external_id
    return {
        "ticket": {
            "group_id": group_id,
            "requester_id": requester_id,
            "external_id": external_id,
            "subject": ticket_subject(external_id),
            "description": render_ticket_body(view, email),
        }
    }


def build_comment_payload(view: TicketView) -> dict[str, Any]:
    body = render_comment_body(view.user.user_id, build_download_url(view.content))
    return {"ticket": {"comment": {"body": body, "public": False}}}


def _transition(current: SyncState, target: SyncState, ticket_id: str) -> None:
    LOGGER.info("Ticket %s: %s -> %s", ticket_id, current.value, target.value)
