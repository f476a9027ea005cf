"""Application configuration."""

import tempfile
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the station backend."""

    app_name: str = getenv("APP_NAME", "Restaurant POS")
    app_env: str = getenv("APP_ENV", "dev")
    primary_database_url: str = getenv(
        "PRIMARY_DATABASE_URL",
        "mysql+mysqlconnector://root:@localhost:3306/restaurant_pos",
    )
    fallback_database_url: str = getenv("FALLBACK_DATABASE_URL", "sqlite:///./restaurant_pos.db")
    db_probe_timeout_seconds: int = int(getenv("DB_PROBE_TIMEOUT_SECONDS", "3"))
    print_command: str = getenv("PRINT_COMMAND", "lp")
    receipt_printer: str = getenv("RECEIPT_PRINTER", "default")
    kitchen_printer: str = getenv("KITCHEN_PRINTER", "kitchen")
    print_spool_dir: str = getenv("PRINT_SPOOL_DIR", tempfile.gettempdir())
    print_timeout_seconds: int = int(getenv("PRINT_TIMEOUT_SECONDS", "15"))
    ticket_font_path: str = getenv("TICKET_FONT_PATH", "")


settings: Settings = Settings()
