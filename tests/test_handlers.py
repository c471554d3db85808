import pytest
from fastapi.testclient import TestClient

from amc_portal.config import Settings
from amc_portal.exceptions import InternalError, NotFoundError, error_for_status, ConflictError, ValidationError
from main import create_app


def build_client(database, app_env="test"):
    settings = Settings()
    settings.app_env = app_env
    app = create_app(settings=settings, database=database)

    @app.get("/boom/portal")
    def portal_failure():
        raise InternalError("database exploded")

    @app.get("/boom/unhandled")
    def unhandled_failure():
        raise RuntimeError("kaboom")

    @app.get("/boom/not-found")
    def missing():
        raise NotFoundError("Widget not found")

    return TestClient(app, raise_server_exceptions=False)


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_portal_errors_keep_their_status_and_message(database):
    response = build_client(database).get("/boom/not-found")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Widget not found"}


def test_internal_error_detail_shown_outside_production(database):
    client = build_client(database)

    assert client.get("/boom/portal").json()["message"] == "database exploded"
    unhandled = client.get("/boom/unhandled")
    assert unhandled.status_code == 500
    assert unhandled.json() == {"success": False, "message": "kaboom"}


def test_internal_error_detail_hidden_in_production(database):
    client = build_client(database, app_env="production")

    for path in ("/boom/portal", "/boom/unhandled"):
        response = client.get(path)
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}

    # 4xx messages are still passed through
    assert client.get("/boom/not-found").json()["message"] == "Widget not found"


def test_production_adds_hsts_header(database):
    response = build_client(database, app_env="production").get("/health")

    assert response.headers["Strict-Transport-Security"].startswith("max-age=")


def test_validation_errors_list_each_field(client):
    response = client.post("/api/auth/login", json={"email": "nope", "role": "boss"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation errors"
    assert {e["field"] for e in body["errors"]} == {"email", "password", "role"}


def test_health(client):
    body = client.get("/health").json()

    assert body["success"] is True
    assert body["timestamp"].endswith("+00:00")
    assert "version" in body


@pytest.mark.parametrize(
    "status,expected",
    [(400, ValidationError), (404, NotFoundError), (409, ConflictError), (418, InternalError), (502, InternalError)],
)
def test_error_for_status(status, expected):
    error = error_for_status(status, "message")

    assert isinstance(error, expected)
    assert error.message == "message"
