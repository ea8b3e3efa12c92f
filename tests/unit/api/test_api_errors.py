"""Unit tests for API error handling."""

import pytest
from fastapi.testclient import TestClient

from bridge.api.endpoints import get_dispatcher
from bridge.api.main import app
from tests.conftest import FailingRouter
from tests.helpers import (
    ANY_ROUTER,
    FIXED_CRYPTO_FEE,
    OPERATOR,
    RECIPIENT,
    SENDER,
    TRANSIT_TOKEN,
    TREASURY,
)


def token_body(value: int = FIXED_CRYPTO_FEE, amount: str = "1000") -> dict:
    return {
        "request": {
            "srcInputToken": TRANSIT_TOKEN,
            "srcInputAmount": amount,
            "dstChainID": 56,
            "dstOutputToken": TRANSIT_TOKEN,
            "recipient": RECIPIENT,
            "router": ANY_ROUTER,
        },
        "sender": SENDER,
        "value": str(value),
    }


@pytest.fixture
def client(dispatcher):
    """Create a test client for the API."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestBridgeErrorMapping:
    """Bridge errors surface with their kind and a matching status code."""

    def test_value_mismatch(self, client, events):
        response = client.post("/bridge/token", json=token_body(value=1))
        assert response.status_code == 400
        assert response.json()["error"] == "ValueMismatch"
        assert len(events) == 0

    def test_zero_amount(self, client):
        response = client.post("/bridge/token", json=token_body(amount="0"))
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAmount"

    def test_slippage(self, client):
        body = token_body()
        body["request"]["dstMinOutputAmount"] = "971"
        response = client.post("/bridge/token", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "SlippageExceeded"

    def test_router_failure_is_bad_gateway(self, client, make_dispatcher):
        failing = make_dispatcher(router=FailingRouter())
        app.dependency_overrides[get_dispatcher] = lambda: failing

        response = client.post("/bridge/token", json=token_body())
        assert response.status_code == 502
        assert response.json()["error"] == "ExternalCollaboratorFailure"

    def test_unauthorized_config_change(self, client):
        response = client.put("/config/fixed-crypto-fee/1", headers={"X-Caller": SENDER})
        assert response.status_code == 403
        assert response.json()["error"] == "UnauthorizedConfigChange"

    def test_unauthorized_collect(self, client):
        response = client.post(
            f"/ledger/platform/{TRANSIT_TOKEN}/collect",
            params={"to": SENDER},
            headers={"X-Caller": SENDER},
        )
        assert response.status_code == 403


class TestInvalidInput:
    """Malformed input is rejected before reaching the dispatcher."""

    def test_negative_amount(self, client):
        response = client.post("/bridge/token", json=token_body(amount="-1"))
        assert response.status_code == 422

    def test_amount_over_uint256(self, client):
        response = client.post("/bridge/token", json=token_body(amount=str(2**256)))
        assert response.status_code == 422

    def test_missing_caller_header(self, client):
        response = client.put("/config/fixed-crypto-fee/1")
        assert response.status_code == 422

    def test_rate_out_of_range(self, client):
        response = client.put(
            "/config/platform-token-fee/1000001", headers={"X-Caller": OPERATOR}
        )
        assert response.status_code == 422

    def test_fixed_fee_over_uint256(self, client):
        response = client.put(
            f"/config/fixed-crypto-fee/{2**256}", headers={"X-Caller": OPERATOR}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidConfiguration"

    def test_inverted_limits(self, client):
        response = client.put(
            f"/config/limits/{TRANSIT_TOKEN}",
            json={"minAmount": "10", "maxAmount": "5"},
            headers={"X-Caller": OPERATOR},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidConfiguration"

    def test_malformed_address_path(self, client):
        response = client.get("/ledger/platform/not-an-address")
        assert response.status_code == 422

    def test_collect_requires_destination(self, client):
        response = client.post(
            f"/ledger/platform/{TREASURY}/collect", headers={"X-Caller": OPERATOR}
        )
        assert response.status_code == 422
