"""Tests for settings loading and logging setup."""

import logging

from infrastructure.config import Settings
from infrastructure.logging_config import LOG_FORMAT, configure_logging


def test_defaults() -> None:
    settings = Settings()

    assert settings.db_path == "meals.db"
    assert settings.foreign_keys is True
    assert settings.log_level == "INFO"


def test_from_env_reads_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DB_PATH", str(tmp_path / "plans.db"))
    monkeypatch.setenv("DB_FOREIGN_KEYS", "off")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env(env_file=tmp_path / "missing.env")

    assert settings.db_path == str(tmp_path / "plans.db")
    assert settings.foreign_keys is False
    assert settings.log_level == "DEBUG"


def test_from_env_loads_dotenv_file(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv("DB_PATH", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("DB_PATH=from-dotenv.db\n")

    try:
        settings = Settings.from_env(env_file=env_file)
    finally:
        monkeypatch.delenv("DB_PATH", raising=False)

    assert settings.db_path == "from-dotenv.db"


def test_configure_logging_sets_level_and_keeps_single_handler(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging("warning")
    configure_logging("debug")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT


def test_configure_logging_falls_back_to_info_for_unknown_level(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)

    configure_logging("chatty")

    assert root.level == logging.INFO
