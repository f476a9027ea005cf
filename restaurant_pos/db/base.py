"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before the schema is created.
from restaurant_pos.models import app_setting as _app_setting  # noqa: E402,F401
from restaurant_pos.models import menu as _menu  # noqa: E402,F401
from restaurant_pos.models import order as _order  # noqa: E402,F401
from restaurant_pos.models import payment as _payment  # noqa: E402,F401
from restaurant_pos.models import table as _table  # noqa: E402,F401
