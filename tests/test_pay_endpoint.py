"""Tests for POST /api/phonepe/pay."""

import json
import re

import pytest

from app.providers.errors import PhonePeError

PAY_URL = "/api/phonepe/pay"


def _body(**order_overrides):
    order = {
        "amount": 499.49,
        "customer_details": {"customer_name": "Asha Rao"},
        "product_name": "Tulsi Mala",
    }
    order.update(order_overrides)
    return {"orderData": order, "returnUrl": "https://shop.example/thanks"}


@pytest.mark.asyncio
async def test_success_returns_gateway_response(client, gateway):
    response = await client.post(PAY_URL, json=_body())

    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "PENDING"
    assert data["orderId"].startswith("OMO")
    assert data["redirectUrl"].endswith(data["orderId"])
    assert "expireAt" in data

    assert len(gateway.pay_calls) == 1
    sent = gateway.pay_calls[0]
    assert re.match(r"^MUID-[0-9a-f]{8}$", sent.merchant_order_id)
    assert sent.amount == 49900
    assert sent.redirect_url == "https://shop.example/thanks"
    assert sent.meta_info.udf1 == "Tulsi Mala"
    assert sent.meta_info.udf2 == "Asha Rao"


@pytest.mark.asyncio
async def test_each_request_gets_new_order_id(client, gateway):
    await client.post(PAY_URL, json=_body())
    await client.post(PAY_URL, json=_body())
    assert gateway.pay_calls[0].merchant_order_id != gateway.pay_calls[1].merchant_order_id


class TestInvalidBody:
    @pytest.mark.asyncio
    async def test_missing_order_data(self, client, gateway):
        response = await client.post(PAY_URL, json={"returnUrl": "https://shop.example/r"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid request body."}
        assert gateway.pay_calls == []

    @pytest.mark.asyncio
    async def test_missing_return_url(self, client, gateway):
        response = await client.post(PAY_URL, json={"orderData": _body()["orderData"]})
        assert response.status_code == 400
        assert gateway.pay_calls == []

    @pytest.mark.asyncio
    async def test_empty_return_url(self, client, gateway):
        body = _body()
        body["returnUrl"] = ""
        response = await client.post(PAY_URL, json=body)
        assert response.status_code == 400
        assert gateway.pay_calls == []

    @pytest.mark.asyncio
    async def test_empty_object(self, client, gateway):
        response = await client.post(PAY_URL, json={})
        assert response.status_code == 400
        assert gateway.pay_calls == []

    @pytest.mark.asyncio
    async def test_not_json(self, client, gateway):
        response = await client.post(
            PAY_URL,
            content=b"amount=10",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert gateway.pay_calls == []


class TestGatewayErrors:
    @pytest.mark.asyncio
    async def test_error_status_passed_through(self, client, gateway):
        gateway.pay_error = PhonePeError(
            message="Bad Request - Amount should be at least 100 paisa",
            code="BAD_REQUEST",
            http_status_code=400,
        )
        response = await client.post(PAY_URL, json=_body())

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Bad Request - Amount should be at least 100 paisa",
            "code": "BAD_REQUEST",
        }

    @pytest.mark.asyncio
    async def test_error_without_status_is_500(self, client, gateway):
        gateway.pay_error = PhonePeError(message="Unknown failure", code="INTERNAL_SERVER_ERROR")
        response = await client.post(PAY_URL, json=_body())

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_SERVER_ERROR"

    @pytest.mark.asyncio
    async def test_unauthorized_credentials(self, client, gateway):
        gateway.pay_error = PhonePeError(message="Client Not Found", code="401", http_status_code=401)
        response = await client.post(PAY_URL, json=_body())
        assert response.status_code == 401


class TestGenericErrors:
    @pytest.mark.asyncio
    async def test_malformed_order_data(self, client, gateway):
        """orderData without customer_details fails before the gateway is called."""
        body = {"orderData": {"amount": 10, "product_name": "Diya"}, "returnUrl": "https://shop.example/r"}
        response = await client.post(PAY_URL, json=body)

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "An unexpected error occurred."
        assert "customer_details" in data["error"]
        assert gateway.pay_calls == []

    @pytest.mark.asyncio
    async def test_network_failure(self, client, gateway):
        gateway.pay_error = ConnectionError("connection reset by peer")
        response = await client.post(PAY_URL, json=_body())

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "An unexpected error occurred.",
            "error": "connection reset by peer",
        }


@pytest.mark.asyncio
async def test_oversized_body_rejected(client, gateway, monkeypatch):
    from app.config import settings

    monkeypatch.setattr(settings, "max_body_bytes", 64)
    response = await client.post(PAY_URL, json=_body(product_name="x" * 200))

    assert response.status_code == 413
    assert gateway.pay_calls == []


@pytest.mark.asyncio
async def test_cors_allows_any_origin(client):
    response = await client.options(
        PAY_URL,
        headers={"Origin": "https://shop.example", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_streamed_body_without_length_rejected(client, gateway, monkeypatch):
    """Chunked uploads are capped by the bytes actually received."""
    from app.config import settings

    monkeypatch.setattr(settings, "max_body_bytes", 64)
    payload = json.dumps(_body(product_name="x" * 600)).encode("utf-8")

    async def chunks():
        for start in range(0, len(payload), 100):
            yield payload[start:start + 100]

    response = await client.post(PAY_URL, content=chunks(), headers={"Content-Type": "application/json"})

    assert response.status_code == 413
    assert response.json() == {"success": False, "message": "Request body too large."}
    assert gateway.pay_calls == []


@pytest.mark.asyncio
async def test_streamed_body_under_cap_accepted(client, gateway):
    payload = json.dumps(_body()).encode("utf-8")

    async def chunks():
        for start in range(0, len(payload), 16):
            yield payload[start:start + 16]

    response = await client.post(PAY_URL, content=chunks(), headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert gateway.pay_calls[0].amount == 49900
