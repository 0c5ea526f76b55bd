"""
Database settings.

Values come from the process environment, with a ``.env`` file loaded
first when present:

- ``ENROLLMENT_DB_URL``  (default ``sqlite+aiosqlite:///:memory:``)
- ``ENROLLMENT_DB_ECHO`` (``1``/``true``/``yes`` enable SQL echo)
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class DatabaseSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    expire_on_commit: bool = False

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> DatabaseSettings:
        """Build settings from ``ENROLLMENT_DB_*`` environment variables."""
        load_dotenv(dotenv_path)
        return cls(
            url=os.getenv("ENROLLMENT_DB_URL", DEFAULT_DATABASE_URL),
            echo=os.getenv("ENROLLMENT_DB_ECHO", "").strip().lower() in _TRUTHY,
        )
