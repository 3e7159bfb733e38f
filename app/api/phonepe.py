"""
PhonePe checkout endpoints.

POST /phonepe/pay     — Start a checkout and return the gateway's response.
POST /phonepe/webhook — Authenticate a gateway webhook and update order records.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from app.config import settings
from app.engine.checkout import OrderRequest, build_pay_request
from app.engine.webhook import dispatch_callback
from app.providers.base import PaymentGateway
from app.providers.errors import PhonePeError
from app.tracking.store import get_tracker
from app.tracking.tracker import OrderTracker

logger = logging.getLogger("phonepe_relay.api")

router = APIRouter(prefix="/phonepe", tags=["phonepe"])


class PayRequest(BaseModel):
    order_data: Optional[dict[str, Any]] = Field(default=None, alias="orderData")
    return_url: Optional[str] = Field(default=None, alias="returnUrl")

    model_config = {"populate_by_name": True}


def get_gateway(request: Request) -> PaymentGateway:
    """The gateway client created at startup."""
    return request.app.state.gateway


def invalid_body_response() -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": "Invalid request body."})


def _error_response(error: Exception) -> JSONResponse:
    """Translate a failed pay call into the relay's error body."""
    if isinstance(error, PhonePeError):
        logger.error(
            "PhonePeError: message=%s code=%s http_status_code=%s data=%s",
            error.message,
            error.code,
            error.http_status_code,
            error.data,
        )
        return JSONResponse(
            status_code=error.http_status_code or 500,
            content={"success": False, "message": error.message, "code": error.code},
        )

    logger.exception("Generic error: %s", error)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "An unexpected error occurred.", "error": str(error)},
    )


@router.post("/pay")
async def pay(body: PayRequest, gateway: PaymentGateway = Depends(get_gateway)):
    """
    Start a PhonePe checkout for an order.

    The gateway's pay response (order id, state, redirect URL) is returned
    as-is so the storefront can redirect the customer.
    """
    if body.order_data is None or not body.return_url:
        return invalid_body_response()

    try:
        order = OrderRequest.from_payload(body.order_data)
        request = build_pay_request(order, body.return_url)

        logger.info(
            "Initiating payment for %s with amount %d PAISE",
            request.merchant_order_id,
            request.amount,
        )
        response = await gateway.pay(request)
        logger.info("PhonePe pay response: %s", response)
    except Exception as e:
        return _error_response(e)

    return response.to_dict()


@router.post("/webhook")
async def webhook(
    request: Request,
    gateway: PaymentGateway = Depends(get_gateway),
    tracker: OrderTracker = Depends(get_tracker),
):
    """
    Receive a PhonePe webhook.

    The body is read raw because the gateway authenticates the exact bytes it
    sent. Any authenticated callback is acknowledged with 200, whether or not
    it changed an order, so the gateway stops retrying.
    """
    logger.info("Received webhook from PhonePe")

    authorization = request.headers.get("authorization")
    if not authorization:
        logger.warning("Webhook received without Authorization header")
        return PlainTextResponse("Unauthorized", status_code=401)

    try:
        raw_body = await request.body()
        callback = gateway.validate_callback(
            settings.webhook_username,
            settings.webhook_password,
            authorization,
            raw_body.decode("utf-8", errors="replace"),
        )
        logger.info("Webhook validation successful: type=%s payload=%s", callback.type, callback.payload)

        await dispatch_callback(callback, tracker)
    except PhonePeError as e:
        logger.error("Webhook validation failed: %s", e.message)
        return JSONResponse(status_code=401, content={"success": False, "message": e.message})
    except Exception:
        logger.exception("Webhook processing error")
        return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error."})

    return {"success": True, "message": "Webhook processed."}
