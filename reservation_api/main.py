"""FastAPI application: entry point for the reservation service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from reservation_api import config
from reservation_api.api import auth, notifications, payments, reservations, resources, reviews
from reservation_api.domain.errors import BookingError
from reservation_api.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from reservation_api.observability.logging import configure_logging
from reservation_api.wiring import (  # noqa: F401  (re-exported for tests)
    notification_repo,
    payment_repo,
    reservation_repo,
    resource_repo,
    review_repo,
    seed_admin,
    user_repo,
)

configure_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Reservation API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next) -> Response:
    cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
    token = set_correlation_id(cid)
    try:
        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = cid
        return response
    finally:
        reset_correlation_id(token)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    logger.info(
        "request rejected",
        extra={"extra_fields": {"path": request.url.path, "status": exc.status_code}},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(auth.router)
app.include_router(resources.router)
app.include_router(reservations.router)
app.include_router(payments.router)
app.include_router(reviews.router)
app.include_router(notifications.router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


seed_admin()
