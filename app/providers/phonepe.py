"""
PhonePe Standard Checkout (v2) client.

Talks to the gateway over HTTPS:
  - OAuth client-credentials token, cached until shortly before expiry
  - POST /checkout/v2/pay to create a checkout order
  - Webhook authentication against the SHA-256 of "username:password"

Gateway rejections surface as PhonePeError; transport failures are left as
httpx exceptions for the caller to treat as generic errors.
"""

import hashlib
import hmac
import json
import logging
import time
from typing import Any, Optional

import httpx

from app.providers.base import (
    CallbackResponse,
    Env,
    PaymentGateway,
    StandardCheckoutPayRequest,
    StandardCheckoutPayResponse,
)
from app.providers.errors import PhonePeError

logger = logging.getLogger("phonepe_relay.phonepe")

OAUTH_HOSTS = {
    Env.SANDBOX: "https://api-preprod.phonepe.com/apis/pg-sandbox",
    Env.PRODUCTION: "https://api.phonepe.com/apis/identity-manager",
}
PG_HOSTS = {
    Env.SANDBOX: "https://api-preprod.phonepe.com/apis/pg-sandbox",
    Env.PRODUCTION: "https://api.phonepe.com/apis/pg",
}

TOKEN_PATH = "/v1/oauth/token"
PAY_PATH = "/checkout/v2/pay"
TOKEN_REFRESH_MARGIN = 60  # seconds before expires_at


def _error_from_response(response: httpx.Response) -> PhonePeError:
    """Translate a non-2xx gateway response into a PhonePeError."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        return PhonePeError(
            message=response.reason_phrase or "PhonePe request failed",
            code=str(response.status_code),
            http_status_code=response.status_code,
        )

    return PhonePeError(
        message=body.get("message") or response.reason_phrase or "PhonePe request failed",
        code=body.get("code") or body.get("errorCode"),
        http_status_code=response.status_code,
        data=body.get("data") or body.get("context"),
    )


def callback_type(body: dict[str, Any]) -> str:
    """
    Resolve the callback type of a webhook body.

    Webhooks name their event as a dotted string ("checkout.order.completed");
    the callback type is its upper-snake form ("CHECKOUT_ORDER_COMPLETED").
    """
    if body.get("type"):
        return str(body["type"])
    event = body.get("event") or ""
    return str(event).upper().replace(".", "_")


class PhonePeClient(PaymentGateway):
    """HTTP client for the PhonePe payment gateway."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        client_version: str,
        env: Env = Env.SANDBOX,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not client_id or not client_secret or not client_version:
            raise PhonePeError(
                message="Client ID, client secret and client version are required",
                code="INVALID_CONFIGURATION",
            )

        self._client_id = client_id
        self._client_secret = client_secret
        self._client_version = str(client_version)
        self._env = env
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

        self._access_token: Optional[str] = None
        self._token_type = "O-Bearer"
        self._token_expires_at = 0.0

    @property
    def env(self) -> Env:
        return self._env

    async def _authorization(self) -> str:
        if self._access_token is None or time.time() >= self._token_expires_at - TOKEN_REFRESH_MARGIN:
            await self._fetch_token()
        return f"{self._token_type} {self._access_token}"

    async def _fetch_token(self) -> None:
        response = await self._http.post(
            OAUTH_HOSTS[self._env] + TOKEN_PATH,
            data={
                "client_id": self._client_id,
                "client_version": self._client_version,
                "client_secret": self._client_secret,
                "grant_type": "client_credentials",
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if response.is_error:
            raise _error_from_response(response)

        body = response.json()
        self._access_token = body["access_token"]
        self._token_type = body.get("token_type") or "O-Bearer"
        self._token_expires_at = float(body.get("expires_at") or 0)
        logger.debug("Fetched PhonePe access token (expires_at=%s)", body.get("expires_at"))

    async def pay(self, request: StandardCheckoutPayRequest) -> StandardCheckoutPayResponse:
        authorization = await self._authorization()
        response = await self._http.post(
            PG_HOSTS[self._env] + PAY_PATH,
            json=request.to_dict(),
            headers={"Authorization": authorization},
        )
        if response.is_error:
            raise _error_from_response(response)
        return StandardCheckoutPayResponse.from_dict(response.json())

    def validate_callback(
        self,
        username: str,
        password: str,
        authorization: str,
        body: str,
    ) -> CallbackResponse:
        expected = hashlib.sha256(f"{username}:{password}".encode("utf-8")).hexdigest()
        if not hmac.compare_digest(expected.encode("utf-8"), authorization.encode("utf-8")):
            raise PhonePeError(
                message="Invalid Callback",
                code="INVALID_CALLBACK",
                http_status_code=417,
            )

        parsed = json.loads(body)
        return CallbackResponse(
            type=callback_type(parsed),
            payload=parsed.get("payload") or {},
        )

    async def close(self) -> None:
        await self._http.aclose()


def build_gateway(settings) -> PhonePeClient:
    """Construct the process-wide gateway client from application settings."""
    client = PhonePeClient(
        client_id=settings.phonepe_client_id,
        client_secret=settings.phonepe_client_secret,
        client_version=settings.phonepe_client_version,
        env=Env.from_setting(settings.phonepe_env),
        timeout=settings.phonepe_timeout_seconds,
    )
    logger.info("PhonePe client initialized in %s mode", client.env.value)
    return client
