"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.orm import sessionmaker
from starlette.responses import Response

from household_finance.api.errors import register_exception_handlers
from household_finance.api.middleware import RequestIDMiddleware, MetricsMiddleware
from household_finance.api.v1 import accounts, credit_cards, investments, reports, transactions
from household_finance.infrastructure.database.session import build_engine, build_session_factory
from household_finance.infrastructure.observability.logging import setup_logging
from household_finance.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database engine for the life of the process unless one was injected"""
    engine = None
    if app.state.session_factory is None:
        engine = build_engine(settings)
        app.state.session_factory = build_session_factory(engine)
    yield
    if engine is not None:
        engine.dispose()


def create_app(session_factory: sessionmaker | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Household Finance",
        description="Accounts, credit cards, invoices, investments and transactions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(credit_cards.router, prefix="/v1", tags=["credit-cards"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(investments.router, prefix="/v1", tags=["investments"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
