"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment or passed
explicitly (tests build it directly with a temporary db_path).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the meal planner.

    No module-level globals: construct via from_env() or pass explicitly
    in tests.
    """

    # Database
    db_path: str = "meals.db"
    foreign_keys: bool = True

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> Settings:
        """Build Settings from environment variables (and an optional .env)."""
        from dotenv import load_dotenv
        load_dotenv(env_file)

        return cls(
            db_path=os.getenv("DB_PATH", "meals.db"),
            foreign_keys=os.getenv("DB_FOREIGN_KEYS", "true").strip().lower()
            not in {"0", "false", "no", "off"},
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
