"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finsight.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finsight.api.v1 import analytics, records
from finsight.infrastructure.database.models import Base
from finsight.infrastructure.database.session import engine
from finsight.infrastructure.observability.logging import setup_logging
from finsight.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup"""
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finsight",
        description="Personal finance analytics: health score, forecasts, anomalies and budget advice",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
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
    app.include_router(records.router, prefix="/v1", tags=["records"])
    app.include_router(analytics.router, prefix="/v1", tags=["analytics"])

    return app


app = create_app()
