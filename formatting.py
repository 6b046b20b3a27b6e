"""Render the ZenDesk ticket description and private comment."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Any

from models import Content, TicketView

DEFAULT_OPENACCESS_BASE_URL = "https://www.openaccess.cam.ac.uk"
OTHER_FUNDER_PREFIX = "other:"
NONE_PROVIDED = "(none provided)"
NO_FILE_ATTACHED = "(no file attached)"

_REMARKS_TOP = "┏" + "━" * 78 + "┓"
_REMARKS_BOTTOM = "┗" + "━" * 78 + "┛"


def ticket_subject(external_id: str) -> str:
    return f"Open Access enquiry {external_id}"


def format_funders(funders: list[str] | None) -> str:
    """Join the funders picked from the predefined list, keeping their order."""
    return ", ".join(f for f in funders or [] if not f.startswith(OTHER_FUNDER_PREFIX))


def get_other_funders(funders: list[str] | None) -> str | None:
    """Join the free-text "other:" funders, or None when there are none.

    An "other:" entry with nothing after the prefix is dropped.
    """
    others = [
        funder[len(OTHER_FUNDER_PREFIX):]
        for funder in funders or []
        if funder.startswith(OTHER_FUNDER_PREFIX) and len(funder) > len(OTHER_FUNDER_PREFIX)
    ]
    return ", ".join(others) or None


def format_acceptance_date(value: Any) -> str | None:
    """Format an epoch-millisecond timestamp as d/m/yyyy in local time."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        date = datetime.fromtimestamp(value / 1000)
    except (OverflowError, OSError, ValueError):
        return None
    return f"{date.day}/{date.month}/{date.year}"


def build_download_url(content: Content | None) -> str | None:
    if content is None or not content.download_path:
        return None
    return f"{_openaccess_base_url()}{content.download_path}"


def render_ticket_body(view: TicketView, email: str | None) -> str:
    """Public ticket description; it is included in the email sent to the submitter."""
    publication = view.publication
    lines = [
        f"Open Access enquiry {view.ticket.external_id} has been received by "
        f"Cambridge University ({_openaccess_base_url()}/).",
        "",
        "The information received was as follows:",
        "",
        "User information:",
        f"  name: {_or_none(view.user.display_name)}",
        f"  department: {_or_none(publication.department)}",
        f"  email: {_or_none(email)}",
        "",
        "Publishing information:",
        f"  article title: {_or_none(publication.display_name)}",
        f"  journal title: {_or_none(publication.journal_name)}",
        f"  funders: {_or_none(format_funders(publication.funders))}",
        f"  other funder(s): {_or_none(get_other_funders(publication.funders))}",
        f"  corresponding author: {_or_none(', '.join(publication.authors))}",
        f"  acceptance date: {_or_none(format_acceptance_date(publication.acceptance_date))}",
        f"  use Cambridge Addendum?: {_or_none(publication.use_cambridge_addendum)}",
        "  remarks:",
        _REMARKS_TOP,
        _or_none(publication.comments),
        _REMARKS_BOTTOM,
    ]
    return "\n".join(lines)


def render_comment_body(user_id: str, download_url: str | None) -> str:
    """Private comment for operators; never shown to the submitter."""
    lines = [
        "Submitted file download link:",
        f"  {download_url or NO_FILE_ATTACHED}",
        "For debugging purposes only:",
        f"  The avocet internal user ID: {user_id}",
    ]
    return "\n".join(lines)


def _openaccess_base_url() -> str:
    return os.getenv("OPENACCESS_BASE_URL", DEFAULT_OPENACCESS_BASE_URL)


def _or_none(value: Any) -> str:
    if value is True:
        return "true"
    return str(value) if value else NONE_PROVIDED
