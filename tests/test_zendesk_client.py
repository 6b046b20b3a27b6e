from unittest.mock import MagicMock

import pytest
import requests

from zendesk_client import ZendeskClient


def _mock_resp(status: int, payload) -> MagicMock:
    mock = MagicMock()
    mock.status_code = status
    mock.json.return_value = payload
    if status >= 400:
        mock.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return mock


def _client() -> ZendeskClient:
    client = ZendeskClient("agent@cam.ac.uk", "secret", "https://cam.zendesk.com/api/v2/")
    client.session = MagicMock()
    return client


def test_session_uses_token_auth() -> None:
    client = ZendeskClient("agent@cam.ac.uk", "secret", "https://cam.zendesk.com/api/v2/")
    assert client.session.auth == ("agent@cam.ac.uk/token", "secret")
    assert client.base_url == "https://cam.zendesk.com/api/v2"


def test_search_users_queries_by_email() -> None:
    client = _client()
    client.session.get.return_value = _mock_resp(200, {"users": [{"id": 1}]})

    assert client.search_users("jo@cam.ac.uk") == [{"id": 1}]
    args, kwargs = client.session.get.call_args
    assert args[0] == "https://cam.zendesk.com/api/v2/users/search.json"
    assert kwargs["params"] == {"query": "jo@cam.ac.uk"}


def test_create_user_returns_status_without_raising() -> None:
    client = _client()
    client.session.post.return_value = _mock_resp(422, {"error": "RecordInvalid"})

    status, data = client.create_user("Jo", "jo@cam.ac.uk")

    assert status == 422
    assert data == {"error": "RecordInvalid"}
    payload = client.session.post.call_args.kwargs["json"]
    assert payload["user"]["email"] == "jo@cam.ac.uk"


def test_create_user_unwraps_user() -> None:
    client = _client()
    client.session.post.return_value = _mock_resp(201, {"user": {"id": 3, "name": "Jo"}})

    assert client.create_user("Jo", "jo@cam.ac.uk") == (201, {"id": 3, "name": "Jo"})


def test_create_ticket_returns_ticket() -> None:
    client = _client()
    client.session.post.return_value = _mock_resp(201, {"ticket": {"id": 1001}})

    assert client.create_ticket({"ticket": {}}) == (201, {"id": 1001})


def test_create_ticket_raises_on_http_error() -> None:
    client = _client()
    client.session.post.return_value = _mock_resp(422, {"error": "bad"})

    with pytest.raises(requests.HTTPError):
        client.create_ticket({"ticket": {}})


def test_update_ticket_puts_comment() -> None:
    client = _client()
    client.session.put.return_value = _mock_resp(200, {"ticket": {"id": 1001}})

    assert client.update_ticket(1001, {"ticket": {"comment": {"body": "x", "public": False}}}) == 200
    assert client.session.put.call_args.args[0] == "https://cam.zendesk.com/api/v2/tickets/1001.json"
