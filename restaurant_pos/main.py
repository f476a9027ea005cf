"""FastAPI entrypoint for the restaurant point-of-sale station."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request

from restaurant_pos.api.v1.api import api_router
from restaurant_pos.core.config import settings
from restaurant_pos.core.errors import SchemaError, StoreConnectionError
from restaurant_pos.db import session as db_session
from restaurant_pos.db.connection import ActiveConnection, ConnectionManager
from restaurant_pos.services.settings_service import ensure_default_settings
from restaurant_pos.services.station import StationContext

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup() -> None:
    try:
        active: ActiveConnection = ConnectionManager.from_settings(settings).acquire()
    except (StoreConnectionError, SchemaError):
        logger.exception("[BOOTSTRAP] No usable store; aborting startup.")
        raise

    app.state.connection = active
    db_session.bind_session_factory(active.engine)
    with db_session.SessionLocal() as session:
        try:
            installed = ensure_default_settings(session)
            logger.info("[BOOTSTRAP] default settings installed: %s", "yes" if installed else "no")
        except Exception:
            session.rollback()
            logger.exception("[BOOTSTRAP] Installing default settings failed; continuing startup.")
        app.state.station = StationContext.load(session)
    logger.info("Restaurant POS started on %s store", active.store.name)


@app.on_event("shutdown")
def shutdown() -> None:
    active: ActiveConnection | None = getattr(app.state, "connection", None)
    if active is not None:
        active.release()


@app.get("/health")
def health(request: Request) -> dict[str, str]:
    active: ActiveConnection = request.app.state.connection
    return {"status": "ok", "store": active.store.name}
