from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transactions_api.config import Settings
from transactions_api.db import Base, build_engine, build_session_factory
from transactions_api.errors import register_exception_handlers
from transactions_api.logging_config import configure_logging
from transactions_api.routers import transactions
from transactions_api.services.timezones import GeoTimezoneLookup, TimezoneLookup


def create_app(settings: Optional[Settings] = None, timezone_lookup: Optional[TimezoneLookup] = None) -> FastAPI:
    settings = settings or Settings.load()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Transactions Web API",
        description="Imports transactions from CSV, filters them by date range across time zones, and exports them to Excel.",
        version="0.1.0",
    )

    engine = build_engine(settings.database_url)
    if settings.create_tables:
        Base.metadata.create_all(bind=engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.timezone_lookup = timezone_lookup or GeoTimezoneLookup()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(transactions.router, prefix="/api/transaction", tags=["transactions"])

    @app.get("/health", tags=["health"])
    async def get_health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
