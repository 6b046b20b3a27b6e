from unittest.mock import MagicMock, patch

import pytest
from dotenv import load_dotenv

import main
from models import Content, Publication, SyncError, Ticket, TicketView, User
from oae_store import OaeApiStore

_ARGS = ["-e", "agent@cam.ac.uk", "-t", "secret", "-u", "https://cam.zendesk.com/api/v2", "-i", "t-42",
         "--oae-url", "https://oae.example.org"]


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "load_dotenv", lambda: None)
    for name in ("ZENDESK_EMAIL", "ZENDESK_TOKEN", "ZENDESK_URI", "OAE_TICKET"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize("missing", ["-e", "-t", "-u", "-i"])
def test_missing_parameter_makes_no_remote_calls(missing: str) -> None:
    index = _ARGS.index(missing)
    argv = _ARGS[:index] + _ARGS[index + 2:]

    with patch("main.OaeApiStore") as store_cls, patch("main.ZendeskClient") as client_cls:
        assert main.main(argv) == 1

    store_cls.assert_not_called()
    client_cls.assert_not_called()


def test_parameters_fall_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENDESK_EMAIL", "env@cam.ac.uk")
    args = main.parse_args(["-i", "t-1"])
    assert args.email == "env@cam.ac.uk"
    assert args.ticket == "t-1"


def test_successful_sync_exits_zero() -> None:
    result = MagicMock()
    with patch("main.OaeApiStore"), patch("main.ZendeskClient") as client_cls, \
         patch("main.sync_ticket", return_value=result) as sync:
        assert main.main(_ARGS) == 0

    client_cls.assert_called_once_with(
        email="agent@cam.ac.uk", token="secret", uri="https://cam.zendesk.com/api/v2"
    )
    assert sync.call_args.args[2] == "t-42"


def test_failed_sync_exits_one() -> None:
    with patch("main.OaeApiStore"), patch("main.ZendeskClient"), \
         patch("main.sync_ticket", return_value=SyncError(stage="ticket", message="Failed to get ticket")):
        assert main.main(_ARGS) == 1


def test_dry_run_skips_zendesk() -> None:
    view = TicketView(
        ticket=Ticket("t-42", "OA-42", "p-42"),
        publication=Publication("p-42"),
        content=Content("c-42", "/files/42.pdf"),
        user=User("u-1", "Jo"),
    )
    with patch("main.OaeApiStore"), patch("main.ZendeskClient") as client_cls, \
         patch("main.resolve_ticket", return_value=view):
        assert main.main(_ARGS + ["--dry-run"]) == 0

    client_cls.assert_not_called()


def test_dotenv_values_are_read_after_import(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OAE_API_TOKEN=from-dotenv\nZENDESK_GROUP_ID=77\n")
    for name in ("OAE_API_TOKEN", "ZENDESK_GROUP_ID"):
        # Registered first so the values loaded from .env are removed afterwards.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr(main, "load_dotenv", lambda: load_dotenv(env_file))

    stores: list[OaeApiStore] = []

    def _build_store(**kwargs) -> OaeApiStore:
        stores.append(OaeApiStore(**kwargs))
        return stores[-1]

    client = MagicMock()
    client.search_users.return_value = [{"id": 5, "name": "Jo", "email": "jo@cam.ac.uk"}]
    client.create_ticket.return_value = (201, {"id": 1001})
    view = TicketView(
        ticket=Ticket("t-42", "OA-42", "p-42"),
        publication=Publication("p-42"),
        content=None,
        user=User("u-1", "Jo", "jo@cam.ac.uk"),
    )

    with patch("main.OaeApiStore", side_effect=_build_store), \
         patch("main.ZendeskClient", return_value=client), \
         patch("sync.resolve_ticket", return_value=view):
        assert main.main(_ARGS) == 0

    assert stores[0].session.headers["Authorization"] == "Bearer from-dotenv"
    assert client.create_ticket.call_args.args[0]["ticket"]["group_id"] == 77
