from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _split(value: str) -> frozenset[str]:
    return frozenset(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./planboard.db"
    log_level: str = "INFO"
    read_only_users: frozenset[str] = field(default_factory=frozenset)
    default_page_limit: int = 10
    max_page_limit: int = 100


@lru_cache
def get_settings() -> Settings:
    """Read settings from the environment once per process."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./planboard.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        read_only_users=_split(os.getenv("READ_ONLY_USERS", "")),
        default_page_limit=int(os.getenv("DEFAULT_PAGE_LIMIT", "10")),
        max_page_limit=int(os.getenv("MAX_PAGE_LIMIT", "100")),
    )
