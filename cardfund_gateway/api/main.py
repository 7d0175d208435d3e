"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cardfund_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cardfund_gateway.api.v1 import expenses, fund, simulate
from cardfund_gateway.infrastructure.observability.logging import setup_logging
from cardfund_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="CardFund Gateway",
        description="Credit card fund and installment affordability service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(fund.router, prefix="/v1", tags=["fund"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])
    app.include_router(simulate.router, prefix="/v1", tags=["simulation"])

    return app


app = create_app()
