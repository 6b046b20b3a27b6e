"""Read-only access to OAE tickets, publications, content and principals."""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

import requests

from models import Content, Publication, Ticket, User

REQUEST_TIMEOUT_SECONDS = 20

LOGGER = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Lookups return None when the record does not exist."""

    def get_ticket(self, ticket_id: str) -> Ticket | None: ...

    def get_publication(self, publication_id: str) -> Publication | None: ...

    def get_content(self, content_id: str) -> Content | None: ...

    def get_user(self, user_id: str) -> User | None: ...


class OaeApiStore:
    """RecordStore backed by the OAE REST API."""

    def __init__(self, base_url: str | None = None, token: str | None = None) -> None:
        base_url = base_url or os.getenv("OAE_API_URL", "")
        if not base_url:
            raise RuntimeError("OAE_API_URL environment variable or --oae-url is required")

        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.session.headers["Accept"] = "application/json"
        token = token or os.getenv("OAE_API_TOKEN", "")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def get_ticket(self, ticket_id: str) -> Ticket | None:
        payload = self._get(f"/api/tickets/{ticket_id}")
        return _parse_ticket(payload) if payload is not None else None

    def get_publication(self, publication_id: str) -> Publication | None:
        payload = self._get(f"/api/publications/{publication_id}")
        return _parse_publication(payload) if payload is not None else None

    def get_content(self, content_id: str) -> Content | None:
        payload = self._get(f"/api/content/{content_id}")
        return _parse_content(payload) if payload is not None else None

    def get_user(self, user_id: str) -> User | None:
        payload = self._get(f"/api/user/{user_id}")
        return _parse_user(payload) if payload is not None else None

    def _get(self, path: str) -> dict[str, Any] | None:
        url = f"{self.base_url}{path}"
        LOGGER.debug("OAE GET %s", url)
        response = self.session.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
        if response.status_code == 404:
            return None
        response.raise_for_status()

        body = response.json()
        if not isinstance(body, dict):
            raise RuntimeError(f"Unexpected OAE response shape for {path}: expected an object")
        return body


def _parse_ticket(payload: dict[str, Any]) -> Ticket:
    return Ticket(
        ticket_id=_require_str(payload, "id"),
        external_id=_as_str(payload.get("externalId")) or "",
        publication_id=_require_str(payload, "publicationId"),
    )


def _parse_publication(payload: dict[str, Any]) -> Publication:
    acceptance_date = payload.get("acceptanceDate")
    if isinstance(acceptance_date, bool) or not isinstance(acceptance_date, (int, float)):
        acceptance_date = None

    addendum = payload.get("useCambridgeAddendum")
    return Publication(
        publication_id=_require_str(payload, "id"),
        display_name=_as_str(payload.get("displayName")),
        journal_name=_as_str(payload.get("journalName")),
        department=_as_str(payload.get("department")),
        funders=_as_str_list(payload.get("funders")),
        authors=_as_str_list(payload.get("authors")),
        acceptance_date=acceptance_date,
        comments=_as_str(payload.get("comments")),
        use_cambridge_addendum=addendum if isinstance(addendum, bool) else None,
        contact_email=_as_str(payload.get("contactEmail")),
        linked_content_id=_as_str(payload.get("linkedContentId")),
        created_by=_as_str(payload.get("createdBy")),
    )


def _parse_content(payload: dict[str, Any]) -> Content:
    return Content(
        content_id=_require_str(payload, "id"),
        download_path=_as_str(payload.get("downloadPath")),
    )


def _parse_user(payload: dict[str, Any]) -> User:
    return User(
        user_id=_require_str(payload, "id"),
        display_name=_as_str(payload.get("displayName")) or "",
        email=_as_str(payload.get("email")),
    )


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = _as_str(payload.get(key))
    if value is None:
        raise RuntimeError(f"OAE record is missing required field '{key}'")
    return value


def _as_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) and value.strip() else None


def _as_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
