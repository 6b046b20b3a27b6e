"""Compose a ticket with its publication, content and submitter."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

import requests

from models import SyncError, TicketView
from oae_store import RecordStore

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_ticket(store: RecordStore, ticket_id: str) -> TicketView | SyncError:
    """Fetch ticket -> publication -> content -> user, stopping at the first failure."""
    ticket = _lookup("ticket", ticket_id, store.get_ticket)
    if isinstance(ticket, SyncError):
        return ticket
    LOGGER.info("Got ticket data: %s", ticket.external_id)

    publication = _lookup("publication", ticket.publication_id, store.get_publication)
    if isinstance(publication, SyncError):
        return publication
    LOGGER.info("Got publication data: %s - %s", publication.publication_id, publication.display_name)

    content = None
    if publication.linked_content_id:
        content = _lookup("content", publication.linked_content_id, store.get_content)
        if isinstance(content, SyncError):
            return content

    if not publication.created_by:
        LOGGER.error("Publication %s has no submitting user", publication.publication_id)
        return SyncError(stage="user", message="Failed to get user", code=404)
    user = _lookup("user", publication.created_by, store.get_user)
    if isinstance(user, SyncError):
        return user

    return TicketView(ticket=ticket, publication=publication, content=content, user=user)


def _lookup(stage: str, record_id: str, fetch: Callable[[str], T | None]) -> T | SyncError:
    try:
        record = fetch(record_id)
    except (requests.RequestException, RuntimeError) as exc:
        LOGGER.error("Failed to get %s id=%s: %s", stage, record_id, exc)
        return SyncError(stage=stage, message=f"Failed to get {stage}: {exc}")

    if record is None:
        LOGGER.error("Failed to get %s id=%s: not found", stage, record_id)
        return SyncError(stage=stage, message=f"Failed to get {stage}", code=404)
    return record
