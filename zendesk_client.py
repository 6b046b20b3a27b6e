"""Minimal ZenDesk API v2 client for users and tickets."""

from __future__ import annotations

import logging
from typing import Any

import requests

REQUEST_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


class ZendeskClient:
    """Authenticated session against one ZenDesk instance.

    Args:
        email: Agent email the API token belongs to.
        token: ZenDesk API token.
        uri: API base, e.g. https://example.zendesk.com/api/v2
    """

    def __init__(self, email: str, token: str, uri: str) -> None:
        self.base_url = uri.rstrip("/")
        self.session = requests.Session()
        self.session.auth = (f"{email}/token", token)
        self.session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )

    def search_users(self, query: str) -> list[dict[str, Any]]:
        """Search users; a bare email address matches exactly."""
        response = self.session.get(
            f"{self.base_url}/users/search.json",
            params={"query": query},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        users = response.json().get("users", [])
        return users if isinstance(users, list) else []

    def create_user(self, name: str, email: str) -> tuple[int, dict[str, Any]]:
        """Create a verified end user. The caller checks the status code."""
        payload = {"user": {"name": name, "email": email, "verified": True}}
        response = self.session.post(
            f"{self.base_url}/users.json",
            json=payload,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        return response.status_code, _user_from_body(response)

    def create_ticket(self, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        response = self.session.post(
            f"{self.base_url}/tickets.json",
            json=payload,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        ticket = response.json().get("ticket")
        if not isinstance(ticket, dict) or "id" not in ticket:
            raise RuntimeError(f"Unexpected ZenDesk ticket response shape: {response.text}")
        return response.status_code, ticket

    def update_ticket(self, ticket_id: int, payload: dict[str, Any]) -> int:
        response = self.session.put(
            f"{self.base_url}/tickets/{ticket_id}.json",
            json=payload,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.status_code


def _user_from_body(response: requests.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        LOGGER.debug("Non-JSON ZenDesk response: %s", response.text)
        return {}
    if not isinstance(body, dict):
        return {}
    user = body.get("user")
    return user if isinstance(user, dict) else body
