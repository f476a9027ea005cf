"""Persisted station settings helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restaurant_pos.db.session import write_transaction
from restaurant_pos.models.app_setting import AppSetting
from restaurant_pos.schemas.settings import RestaurantSettings

logger = logging.getLogger(__name__)

RESTAURANT_NAME_KEY: str = "restaurant_name"
SETTINGS_KEYS: tuple[str, ...] = tuple(RestaurantSettings.model_fields)
TRUE_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES: frozenset[str] = frozenset({"0", "false", "no", "off", ""})


def default_settings() -> RestaurantSettings:
    """Return the built-in settings bundle installed on first run."""
    return RestaurantSettings(
        restaurant_name="مطعم",
        restaurant_name_ar="مطعم",
        currency="ج.م",
        tax_rate=0.14,
        service_charge_rate=0.10,
        language="ar",
        theme_color="#10b981",
        print_receipt=True,
        print_kitchen=True,
    )


def parse_rate(value: str) -> float:
    """Parse a 0..1 fraction."""
    rate: float = float(value)
    if not 0 <= rate <= 1:
        raise ValueError(f"rate {value!r} is outside 0..1")
    return rate


def parse_flag(value: str) -> bool:
    normalized: str = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def format_value(value: Any) -> str:
    """Serialize a settings field for the key-value table."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


PARSERS: dict[str, Callable[[str], Any]] = {
    "restaurant_name": str,
    "restaurant_name_ar": str,
    "currency": str,
    "tax_rate": parse_rate,
    "service_charge_rate": parse_rate,
    "language": str,
    "theme_color": str,
    "print_receipt": parse_flag,
    "print_kitchen": parse_flag,
}


def load_settings(db: Session) -> RestaurantSettings:
    """Read the settings record, falling back to the default bundle.

    Unknown keys are ignored and unparsable values keep their zero value. When
    no restaurant name ends up set, the whole record is replaced with
    ``default_settings()`` rather than filling single fields.
    """
    try:
        rows: list[AppSetting] = db.query(AppSetting).all()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Settings table unreadable (%s); using default settings.", exc)
        return default_settings()

    values: dict[str, Any] = {}
    for row in rows:
        parser = PARSERS.get(row.key)
        if parser is None:
            continue
        try:
            values[row.key] = parser(row.value or "")
        except ValueError:
            logger.warning("Ignoring unparsable setting %s=%r", row.key, row.value)

    loaded = RestaurantSettings(**values)
    if not loaded.restaurant_name:
        return default_settings()
    return loaded


def upsert_setting(db: Session, key: str, value: str, updated_at: datetime) -> AppSetting:
    """Insert or replace one key and flush it into the open transaction."""
    setting: AppSetting | None = db.query(AppSetting).filter(AppSetting.key == key).first()
    if setting is None:
        setting = AppSetting(key=key, value=value, updated_at=updated_at)
        db.add(setting)
    else:
        setting.value = value
        setting.updated_at = updated_at
    db.flush()
    return setting


def save_settings(db: Session, new_settings: RestaurantSettings, *, now: datetime | None = None) -> None:
    """Persist all settings fields in one transaction.

    Raises PersistError after rolling back if any single write fails, so a
    partially saved record is never visible.
    """
    written_at: datetime = now or datetime.now(timezone.utc)
    payload: dict[str, Any] = new_settings.model_dump()
    with write_transaction(db, "Saving settings"):
        for key in SETTINGS_KEYS:
            upsert_setting(db, key, format_value(payload[key]), written_at)
    logger.info("Saved %d settings keys", len(SETTINGS_KEYS))


def ensure_default_settings(db: Session) -> bool:
    """Install the default bundle when no restaurant name is stored yet.

    Returns True when defaults were written.
    """
    existing: AppSetting | None = db.query(AppSetting).filter(AppSetting.key == RESTAURANT_NAME_KEY).first()
    if existing is not None and existing.value:
        return False
    save_settings(db, default_settings())
    return True
