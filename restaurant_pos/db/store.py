"""SQL store backends selectable at startup."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url

logger = logging.getLogger(__name__)

# Connect-timeout argument names per DBAPI driver.
CONNECT_TIMEOUT_ARGS: dict[str, str] = {
    "mysqlconnector": "connection_timeout",
    "pymysql": "connect_timeout",
    "mysqldb": "connect_timeout",
}


class Store:
    """One SQL database reachable through a lazily created engine."""

    name: str = "store"
    requires_bootstrap: bool = False

    def __init__(self, url: str, *, probe_timeout_seconds: int = 3) -> None:
        self.url = url
        self.probe_timeout_seconds = probe_timeout_seconds
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self.create_engine()
        return self._engine

    def create_engine(self) -> Engine:
        raise NotImplementedError

    def probe(self) -> None:
        """Round-trip a trivial query, raising on any failure."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def describe(self) -> str:
        return make_url(self.url).render_as_string(hide_password=True)


class NetworkedStore(Store):
    """Primary store on a database server, assumed to be provisioned."""

    name = "primary"

    def create_engine(self) -> Engine:
        driver: str = make_url(self.url).get_driver_name()
        connect_args: dict[str, int] = {}
        timeout_arg: str | None = CONNECT_TIMEOUT_ARGS.get(driver)
        if timeout_arg is not None:
            connect_args[timeout_arg] = self.probe_timeout_seconds
        return create_engine(self.url, connect_args=connect_args, pool_pre_ping=True)


class EmbeddedStore(Store):
    """File-backed SQLite store used when the primary is unreachable."""

    name = "fallback"
    requires_bootstrap = True

    def create_engine(self) -> Engine:
        engine = create_engine(self.url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
