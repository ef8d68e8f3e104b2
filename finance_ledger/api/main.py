"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_ledger.api.dependencies import get_request_id
from finance_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_ledger.api.v1 import loans, net_worth, recurring, transactions
from finance_ledger.domain.exceptions import (
    DomainException,
    InsufficientFundsError,
    InvalidArgumentError,
    NotFoundError,
)
from finance_ledger.infrastructure.observability.logging import setup_logging
from finance_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def _error_response(request: Request, status_code: int, exc: Exception) -> JSONResponse:
    logging.warning(
        f"{type(exc).__name__}: {exc}",
        extra={"request_id": get_request_id(request), "status_code": status_code},
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(request, 404, exc)


async def bad_request_handler(request: Request, exc: DomainException) -> JSONResponse:
    return _error_response(request, 400, exc)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.exception(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Ledger",
        description="Account balances, loans, recurring expenses and net worth",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Domain errors map onto HTTP status codes in one place
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InsufficientFundsError, bad_request_handler)
    app.add_exception_handler(InvalidArgumentError, bad_request_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(recurring.router, prefix="/v1", tags=["recurring-expenses"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(net_worth.router, prefix="/v1", tags=["net-worth"])

    return app


app = create_app()
