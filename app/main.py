"""
PhonePe Checkout Relay — thin HTTP layer between a storefront and PhonePe.

Two endpoints: one starts a Standard Checkout payment, the other receives
and authenticates PhonePe webhooks and records order outcomes.

Start the server:
    python -m app

Or with uvicorn directly:
    uvicorn app.main:app --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.body_limit import BodySizeLimitMiddleware
from app.api.health import router as health_router
from app.api.phonepe import invalid_body_response
from app.api.phonepe import router as phonepe_router
from app.config import settings
from app.providers.errors import PhonePeError
from app.providers.phonepe import build_gateway
from app.tracking.store import close_store, create_order_events_table

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("phonepe_relay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the gateway client and database tables; exit if the client can't be built."""
    try:
        app.state.gateway = build_gateway(settings)
    except PhonePeError as e:
        logger.error("Error initializing PhonePe client: %s", e.message)
        raise SystemExit(1)

    await create_order_events_table()
    yield
    await app.state.gateway.close()
    await close_store()


app = FastAPI(
    title="PhonePe Checkout Relay",
    description=(
        "Starts PhonePe Standard Checkout payments for a storefront and records "
        "order outcomes from authenticated PhonePe webhooks."
    ),
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(BodySizeLimitMiddleware, settings=settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    return invalid_body_response()


app.include_router(health_router)
app.include_router(phonepe_router, prefix="/api")
