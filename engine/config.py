"""
Runtime configuration, read from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_RATE_TABLES_PATH = Path(__file__).resolve().parent / "data" / "rate_tables.json"


@dataclass(frozen=True)
class Settings:
    environment: str = "dev"
    log_level: str = "INFO"
    port: int = 8080
    rate_tables_path: str = str(DEFAULT_RATE_TABLES_PATH)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            port=int(os.environ.get("PORT", 8080)),
            rate_tables_path=os.environ.get("RATE_TABLES_PATH", str(DEFAULT_RATE_TABLES_PATH)),
        )
