"""FastAPI application factory"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from lending_gateway.api.middleware import REQUEST_ID_HEADER, RequestIDMiddleware, MetricsMiddleware
from lending_gateway.api.v1 import admin, auth, loans, payments
from lending_gateway.infrastructure.observability.logging import setup_logging
from lending_gateway.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = (
    (auth.router, "auth"),
    (loans.router, "loans"),
    (payments.router, "payments"),
    (admin.router, "admin"),
)


def create_app() -> FastAPI:
    """Build the app: middleware stack, health/metrics endpoints and v1 routers"""
    app = FastAPI(
        title="Lending Gateway",
        description="Loan origination, repayment schedules and credit scoring",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first: CORS, then request id, then metrics
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
