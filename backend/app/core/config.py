"""Application configuration.

Environment variables override all defaults. A local .env file in backend/
is loaded first when python-dotenv can find one.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

_BACKEND_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    def __init__(self, **overrides):
        # Database Configuration
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./customers.db")
        # SQLite writers wait this long for the database lock, then fail
        self.DB_BUSY_TIMEOUT_SECONDS: float = float(os.getenv("DB_BUSY_TIMEOUT_SECONDS", "15"))

        # Routing
        self.API_PREFIX: str = os.getenv("API_PREFIX", "/api")

        # CORS (Angular dev server by default)
        self.CORS_ORIGINS: List[str] = _split_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:4200")
        )

        # Preview responses fall back to this when the bytes are not a known image format
        self.PREVIEW_DEFAULT_MEDIA_TYPE: str = os.getenv("PREVIEW_DEFAULT_MEDIA_TYPE", "image/png")

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise ValueError(f"Unknown setting: {key}")
            setattr(self, key, value)

    @property
    def DEBUG(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()
