"""Find or create the ZenDesk requester for a ticket."""

from __future__ import annotations

import logging
from typing import Any

import requests

from models import HelpdeskUser, SyncError
from zendesk_client import ZendeskClient

LOGGER = logging.getLogger(__name__)

_STAGE = "user_resolving"


def get_or_create_zendesk_user(
    client: ZendeskClient, name: str, email: str
) -> HelpdeskUser | SyncError:
    """Return the ZenDesk user for ``email``, creating it when none exists.

    The name is only used when a user has to be created. ZenDesk matches a bare
    email query exactly, so the first search result is taken as the user.
    """
    found = _search(client, email)
    if isinstance(found, SyncError) or found is not None:
        return found

    try:
        status, data = client.create_user(name, email)
    except requests.RequestException as exc:
        LOGGER.error("Error while creating ZenDesk user name=%s email=%s: %s", name, email, exc)
        return SyncError(stage=_STAGE, message="Error while creating ZenDesk user")

    if status == 422:
        # Created by another process since the search above.
        LOGGER.warning("ZenDesk rejected user create for %s (status=422), searching again", email)
        found = _search(client, email)
        if isinstance(found, SyncError) or found is not None:
            return found

    if status != 201:
        LOGGER.error(
            "Unexpected response from ZenDesk API, expected 201 created: status=%s data=%s",
            status,
            data,
        )
        return SyncError(
            stage=_STAGE, message="Unexpected response from ZenDesk API, expected 201 created"
        )

    LOGGER.info("Created ZenDesk user id=%s for %s", data.get("id"), email)
    return _to_helpdesk_user(data, name, email)


def _search(client: ZendeskClient, email: str) -> HelpdeskUser | SyncError | None:
    try:
        users = client.search_users(email)
    except requests.RequestException as exc:
        LOGGER.error("Error while searching for ZenDesk user email=%s: %s", email, exc)
        return SyncError(stage=_STAGE, message="Error while searching for ZenDesk user")

    if not users:
        return None
    LOGGER.info("Found existing ZenDesk user id=%s for %s", users[0].get("id"), email)
    return _to_helpdesk_user(users[0], "", email)


def _to_helpdesk_user(data: dict[str, Any], name: str, email: str) -> HelpdeskUser:
    return HelpdeskUser(
        user_id=data.get("id"),
        name=data.get("name") or name,
        email=data.get("email") or email,
    )
