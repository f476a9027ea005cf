"""Primary/fallback store selection at process start."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from restaurant_pos.core.config import Settings, settings
from restaurant_pos.core.errors import StoreConnectionError
from restaurant_pos.db.schema import ensure_schema
from restaurant_pos.db.store import EmbeddedStore, NetworkedStore, Store

logger = logging.getLogger(__name__)

# A missing DBAPI driver surfaces as ImportError, a refused socket as OSError.
PROBE_ERRORS: tuple[type[BaseException], ...] = (SQLAlchemyError, ImportError, OSError)


@dataclass
class ActiveConnection:
    """The store chosen for the process lifetime."""

    store: Store

    @property
    def engine(self) -> Engine:
        return self.store.engine

    def release(self) -> None:
        self.store.dispose()


class ConnectionManager:
    """Open the primary store, falling back to the embedded one."""

    def __init__(self, primary: Store, fallback: Store) -> None:
        self.primary = primary
        self.fallback = fallback

    @classmethod
    def from_settings(cls, config: Settings = settings) -> ConnectionManager:
        return cls(
            primary=NetworkedStore(
                config.primary_database_url,
                probe_timeout_seconds=config.db_probe_timeout_seconds,
            ),
            fallback=EmbeddedStore(
                config.fallback_database_url,
                probe_timeout_seconds=config.db_probe_timeout_seconds,
            ),
        )

    def acquire(self) -> ActiveConnection:
        """Return the active connection, bootstrapping the schema when needed.

        The primary is tried exactly once. Raises StoreConnectionError when
        neither store answers the probe and SchemaError when bootstrap fails.
        """
        try:
            self.primary.probe()
        except PROBE_ERRORS as exc:
            logger.warning(
                "[BOOTSTRAP] primary store %s unavailable (%s); switching to fallback store",
                self.primary.describe(),
                exc,
            )
            self.primary.dispose()
        else:
            return self._activate(self.primary)

        try:
            self.fallback.probe()
        except PROBE_ERRORS as exc:
            self.fallback.dispose()
            raise StoreConnectionError(
                f"Neither {self.primary.describe()} nor {self.fallback.describe()} is reachable"
            ) from exc

        return self._activate(self.fallback)

    def _activate(self, store: Store) -> ActiveConnection:
        if store.requires_bootstrap:
            ensure_schema(store.engine)
        logger.info("[BOOTSTRAP] using %s store %s", store.name, store.describe())
        return ActiveConnection(store=store)
