"""Session factory and transaction helpers bound to the active store."""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from restaurant_pos.core.errors import PersistError

# Bound to the active engine once the connection manager has chosen a store.
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def bind_session_factory(engine: Engine) -> None:
    """Point new sessions at the active store."""
    SessionLocal.configure(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and ensure proper cleanup."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def write_transaction(db: Session, action: str) -> Iterator[Session]:
    """Commit once after the block, roll back on every error path.

    Database failures are re-raised as PersistError with the cause chained.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistError(f"{action} failed") from exc
    except Exception:
        db.rollback()
        raise
