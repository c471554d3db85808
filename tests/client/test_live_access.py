import json
from unittest import mock

import pytest
import requests

from amc_portal.client import LiveDataAccess
from amc_portal.client.live_access import REFRESH_TOKEN_KEY, api_error
from amc_portal.client.mock_store import CURRENT_USER_KEY
from amc_portal.exceptions import AuthenticationError, ConflictError, InternalError, ValidationError


def fake_response(status_code=200, body=None):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = json.dumps(body).encode() if body is not None else b""
    if body is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def live(client_settings, storage, session):
    return LiveDataAccess(client_settings, storage, session=session)


def test_login_stores_tokens_and_user(live, session, storage):
    session.request.return_value = fake_response(
        200,
        {"success": True, "data": {"user": {"id": "u1"}, "accessToken": "access-1", "refreshToken": "refresh-1"}},
    )

    live.login("john@amc.com", "john123", "user")

    method, url = session.request.call_args.args
    assert (method, url) == ("POST", "http://api.test/api/auth/login")
    assert session.request.call_args.kwargs["json"] == {"email": "john@amc.com", "password": "john123", "role": "user"}
    assert live.access_token == "access-1"
    assert storage.get_item(REFRESH_TOKEN_KEY) == "refresh-1"
    assert json.loads(storage.get_item(CURRENT_USER_KEY)) == {"id": "u1"}


def test_requests_send_bearer_token_and_unwrap_data(live, session):
    live.access_token = "access-1"
    session.request.return_value = fake_response(200, {"success": True, "data": [{"id": "t1"}]})

    assert live.get_tasks(status="pending") == [{"id": "t1"}]

    kwargs = session.request.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer access-1"
    assert kwargs["params"] == {"status": "pending", "limit": 50}


def test_expired_access_token_is_refreshed_once(live, session, storage):
    storage.set_item(REFRESH_TOKEN_KEY, "refresh-1")
    live.access_token = "stale"
    session.request.side_effect = [
        fake_response(401, {"success": False, "message": "Invalid or expired token"}),
        fake_response(200, {"success": True, "data": {"accessToken": "fresh", "refreshToken": "refresh-2"}}),
        fake_response(200, {"success": True, "data": {"count": 3}}),
    ]

    assert live.get_unread_count() == 3

    urls = [c.args[1] for c in session.request.call_args_list]
    assert urls == [
        "http://api.test/api/notifications/unread-count",
        "http://api.test/api/auth/refresh",
        "http://api.test/api/notifications/unread-count",
    ]
    assert session.request.call_args_list[1].kwargs["json"] == {"refreshToken": "refresh-1"}
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer fresh"
    assert storage.get_item(REFRESH_TOKEN_KEY) == "refresh-2"


def test_rejected_refresh_clears_session(live, session, storage):
    storage.set_item(REFRESH_TOKEN_KEY, "refresh-1")
    storage.set_item(CURRENT_USER_KEY, "{}")
    session.request.side_effect = [
        fake_response(401, {"success": False, "message": "Invalid or expired token"}),
        fake_response(401, {"success": False, "message": "Invalid or expired refresh token"}),
    ]

    with pytest.raises(AuthenticationError) as exc:
        live.get_task_stats()

    assert exc.value.message == "Invalid or expired token"
    assert storage.get_item(REFRESH_TOKEN_KEY) is None
    assert storage.get_item(CURRENT_USER_KEY) is None


def test_no_refresh_token_means_no_retry(live, session):
    session.request.return_value = fake_response(401, {"success": False, "message": "Access token is required"})

    with pytest.raises(AuthenticationError):
        live.get_current_user()
    assert session.request.call_count == 1


def test_error_envelope_maps_to_exception(live, session):
    session.request.return_value = fake_response(
        400, {"success": False, "message": "Validation errors", "errors": [{"field": "title", "message": "required"}]}
    )

    with pytest.raises(ValidationError) as exc:
        live.create_task({})
    assert exc.value.errors == [{"field": "title", "message": "required"}]


def test_error_without_body_gets_default_message():
    error = api_error(fake_response(409))

    assert isinstance(error, ConflictError)
    assert error.message == "This record already exists."


def test_network_failure_becomes_internal_error(live, session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(InternalError):
        live.get_users()


def test_logout_clears_session_even_on_failure(live, session, storage):
    storage.set_item(REFRESH_TOKEN_KEY, "refresh-1")
    live.access_token = "access-1"
    session.request.return_value = fake_response(500, {"success": False, "message": "Internal server error"})

    with pytest.raises(InternalError):
        live.logout()

    assert live.access_token is None
    assert storage.get_item(REFRESH_TOKEN_KEY) is None


def test_empty_success_body_returns_none(live, session):
    session.request.return_value = fake_response(200)

    assert live.delete_task("t1") is None
    assert session.request.call_args.args == ("DELETE", "http://api.test/api/tasks/t1")
