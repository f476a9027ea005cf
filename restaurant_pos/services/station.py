"""Per-station settings and language state."""

from __future__ import annotations

from sqlalchemy.orm import Session

from restaurant_pos.core.errors import ValidationError
from restaurant_pos.schemas.settings import RestaurantSettings
from restaurant_pos.services.settings_service import load_settings, save_settings

SUPPORTED_LANGUAGES: tuple[str, ...] = ("ar", "en")
DEFAULT_LANGUAGE: str = "ar"


def ensure_supported_language(language: str) -> str:
    if language not in SUPPORTED_LANGUAGES:
        raise ValidationError(f"Unsupported language {language!r}")
    return language


class StationContext:
    """Settings and active language of the running station.

    One instance lives on the application state and is handed to every call
    that needs localisation.
    """

    def __init__(self, settings: RestaurantSettings) -> None:
        self._settings = settings.model_copy()
        self.language: str = settings.language or DEFAULT_LANGUAGE

    @classmethod
    def load(cls, db: Session) -> StationContext:
        return cls(load_settings(db))

    def get_settings(self) -> RestaurantSettings:
        return self._settings.model_copy()

    def update_settings(self, db: Session, new_settings: RestaurantSettings) -> RestaurantSettings:
        """Persist new settings, then swap them in; language follows them."""
        ensure_supported_language(new_settings.language)
        if not new_settings.restaurant_name.strip():
            raise ValidationError("Restaurant name must not be empty")
        save_settings(db, new_settings)
        self._settings = new_settings.model_copy()
        self.language = new_settings.language
        return self.get_settings()

    def get_language(self) -> str:
        return self.language

    def set_language(self, language: str) -> str:
        """Switch the active language for this process only."""
        self.language = ensure_supported_language(language)
        self._settings = self._settings.model_copy(update={"language": language})
        return self.language
