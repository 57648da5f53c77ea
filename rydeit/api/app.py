"""
FastAPI application factory.

* Registers routes for quotes, bikes, bookings and admin.
* Maps domain exceptions onto HTTP status codes.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from rydeit.api.middleware import limiter
from rydeit.api.routes import admin, bikes, bookings, quotes
from rydeit.domain.entities import InvalidStateTransition
from rydeit.domain.pricing import InvalidDurationError, InvalidRateError
from rydeit.domain.validation import BookingValidationError
from rydeit.infrastructure.locks import LockNotAcquired

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def _unprocessable(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _conflict(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _catalog_fault(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Fleet catalog integrity fault on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=500, content={"detail": "Vehicle rate is misconfigured"}
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Rydeit Rental API",
        description=(
            "Two-wheeler rentals for a single-city operator.  Quotes tiered "
            "rental prices, takes bookings with an advance payment and tracks "
            "each ride from payment verification to drop-off."
        ),
        version="1.0.0",
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(InvalidDurationError, _unprocessable)
    app.add_exception_handler(BookingValidationError, _unprocessable)
    app.add_exception_handler(InvalidRateError, _catalog_fault)
    app.add_exception_handler(InvalidStateTransition, _conflict)
    app.add_exception_handler(LockNotAcquired, _conflict)

    # Routers
    app.include_router(quotes.router, prefix="/api/v1")
    app.include_router(bikes.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
