import os
from dataclasses import dataclass


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///bookshelf.db")
    database_echo: bool = _env_bool("DATABASE_ECHO", "False")

    # Lending
    loan_period_days: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))
    store_retry_attempts: int = int(os.getenv("STORE_RETRY_ATTEMPTS", "2"))
    store_retry_backoff: float = float(os.getenv("STORE_RETRY_BACKOFF", "0.2"))

    # ISBN lookup (Open Library)
    isbn_lookup_url: str = os.getenv("ISBN_LOOKUP_URL", "https://openlibrary.org/api/books")
    isbn_lookup_timeout: float = float(os.getenv("ISBN_LOOKUP_TIMEOUT", "10"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # API
    cors_origins: tuple = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
        if origin.strip()
    )


settings = Settings()
