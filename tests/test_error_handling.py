"""
Error envelope and middleware tests.

Every failure, whether raised by a service, by request validation, by routing
or by a bug, must reach the client as:

    {"success": false, "error": {"code", "message", "details"?}, "timestamp"}
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import anyio
import pytest
from fastapi.testclient import TestClient

from test_fixtures import client, as_user, anonymous
import main
from main import app
from api.middleware import make_serializable
from services.fridge_service import FridgeService
from services.wallet_service import WalletService
from app.exceptions import (
    ChefOSError,
    ConflictError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
    UnauthorizedError,
)


# =============================================================================
# EXCEPTION CLASSES
# =============================================================================


@pytest.mark.parametrize(
    "exc_class,status,code",
    [
        (ServiceValidationError, 400, "SERVICE_VALIDATION_ERROR"),
        (UnauthorizedError, 401, "AUTH_REQUIRED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
        (ExternalServiceError, 502, "AI_UNAVAILABLE"),
    ],
)
def test_error_defaults(exc_class, status, code):
    exc = exc_class("boom")

    assert isinstance(exc, ChefOSError)
    assert exc.http_status == status
    assert exc.code == code
    assert str(exc) == "boom"


def test_error_to_dict_includes_details_only_when_present():
    bare = ConflictError("Title taken", code="TITLE_EXISTS")
    rich = ConflictError("Title taken", details={"suggestions": ["Bigos (2)"]}, code="TITLE_EXISTS")

    assert bare.to_dict() == {"code": "TITLE_EXISTS", "message": "Title taken"}
    assert rich.to_dict()["details"] == {"suggestions": ["Bigos (2)"]}


def test_make_serializable():
    ref = uuid.uuid4()
    value = {"amount": Decimal("4.50"), "ids": (ref,), "cause": ValueError("bad")}

    assert make_serializable(value) == {"amount": 4.5, "ids": [str(ref)], "cause": "bad"}


# =============================================================================
# HANDLERS
# =============================================================================


def test_service_error_envelope(as_user, monkeypatch):
    """
    Verifies:
    - status taken from the exception class
    - code, message and details rendered under "error"
    - ISO timestamp present
    """

    def fake_transfer(db, sender_id, recipient_id, amount, note=None):
        raise ServiceValidationError(
            "Not enough tokens",
            details={"balance": 5, "required": 20},
            code="INSUFFICIENT_TOKENS",
        )

    monkeypatch.setattr(WalletService, "transfer", staticmethod(fake_transfer))

    response = client.post(
        "/api/v1/wallet/transfer", json={"recipient_id": str(uuid.uuid4()), "amount": 20}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == {
        "code": "INSUFFICIENT_TOKENS",
        "message": "Not enough tokens",
        "details": {"balance": 5, "required": 20},
    }
    assert body["timestamp"].startswith(str(datetime.now(timezone.utc).year))


def test_missing_identity_is_401(anonymous):
    response = client.get("/api/v1/fridge/items")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_REQUIRED"


def test_request_validation_envelope(as_user):
    response = client.post("/api/v1/fridge/items", json={"quantity": "lots"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {tuple(e["loc"])[-1] for e in error["details"]}
    assert {"ingredient_id", "quantity"} <= fields


def test_bad_path_parameter_is_422(as_user):
    response = client.delete("/api/v1/fridge/items/not-a-uuid")
    assert response.status_code == 422


def test_unknown_route_envelope():
    response = client.get("/api/v1/no-such-thing")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HTTP_404"


def test_unexpected_error_is_500(as_user, monkeypatch):
    def broken(db, user_id):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(FridgeService, "get_stats", staticmethod(broken))
    lenient = TestClient(app, raise_server_exceptions=False)

    response = lenient.get("/api/v1/fridge/stats")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_SERVER_ERROR"
    assert "exploded" not in error["message"]


# =============================================================================
# MIDDLEWARE AND HEALTH
# =============================================================================


def test_request_id_is_echoed():
    response = client.get("/api/v1/health-check", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert float(response.headers["X-Process-Time"]) >= 0


def test_request_id_generated_when_missing():
    response = client.get("/api/v1/health-check")
    uuid.UUID(response.headers["X-Request-ID"])


def test_health_check():
    response = client.get("/api/v1/health-check")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "ChefOS"


# =============================================================================
# STARTUP
# =============================================================================


def test_wait_for_database_retries_until_ready(monkeypatch):
    calls = []

    def flaky_init():
        calls.append(1)
        if len(calls) < 3:
            raise OSError("connection refused")

    monkeypatch.setattr(main, "init_database", flaky_init)

    anyio.run(main.wait_for_database, 5, 0)

    assert len(calls) == 3


def test_wait_for_database_gives_up(monkeypatch):
    def down():
        raise OSError("connection refused")

    monkeypatch.setattr(main, "init_database", down)

    with pytest.raises(OSError):
        anyio.run(main.wait_for_database, 2, 0)


def test_ai_wizard_not_started_when_disabled(monkeypatch):
    connected = []
    monkeypatch.setattr(main.settings, "ai_enabled", False)
    monkeypatch.setattr(main.llm_adapter, "connect", lambda *a, **k: connected.append(1))

    main.start_ai_wizard()

    assert connected == []
