"""Shared typed models for the ticket sync."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Ticket:
    """OAE open access enquiry ticket."""

    ticket_id: str
    external_id: str
    publication_id: str


@dataclass(frozen=True, slots=True)
class Publication:
    """Publication metadata submitted with a ticket."""

    publication_id: str
    display_name: str | None = None
    journal_name: str | None = None
    department: str | None = None
    funders: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    acceptance_date: int | float | None = None
    comments: str | None = None
    use_cambridge_addendum: bool | None = None
    contact_email: str | None = None
    linked_content_id: str | None = None
    created_by: str | None = None


@dataclass(frozen=True, slots=True)
class Content:
    content_id: str
    download_path: str | None = None


@dataclass(frozen=True, slots=True)
class User:
    """OAE principal who submitted the publication."""

    user_id: str
    display_name: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class HelpdeskUser:
    user_id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class TicketView:
    """Ticket with its publication, content and submitter resolved."""

    ticket: Ticket
    publication: Publication
    content: Content | None
    user: User


class SyncState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    USER_RESOLVING = "user_resolving"
    CREATING = "creating"
    COMMENTING = "commenting"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SyncError:
    """Failure returned by a sync stage; the run stops at the first one."""

    stage: str
    message: str
    code: int = 500


@dataclass(frozen=True, slots=True)
class SyncResult:
    zendesk_ticket_id: int
    requester: HelpdeskUser
    state: SyncState = SyncState.DONE
