"""Engine settings, read from the environment (and a .env file if present)."""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from rich.console import Console
from rich.logging import RichHandler

load_dotenv()

_TRUE = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


class EngineSettings(BaseModel):
    """Runtime configuration for the engine and the REPL."""
    seed: Optional[int] = None  # Fixed dice seed for reproducible sessions
    log_level: str = "WARNING"
    strict_catalog: bool = True  # Raise on dangling catalog ids instead of logging
    history_dir: Path = Field(default_factory=lambda: Path.home() / ".kingdom_engine")
    kingdom_name: str = "Stolen Lands"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from KINGDOM_* environment variables."""
        settings = cls(
            seed=_env_int("KINGDOM_SEED"),
            log_level=os.getenv("KINGDOM_LOG_LEVEL", "WARNING").upper(),
            strict_catalog=_env_flag("KINGDOM_STRICT_CATALOG", True),
        )
        if os.getenv("KINGDOM_HISTORY_DIR"):
            settings.history_dir = Path(os.getenv("KINGDOM_HISTORY_DIR")).expanduser()
        if os.getenv("KINGDOM_NAME"):
            settings.kingdom_name = os.getenv("KINGDOM_NAME")
        return settings


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Route engine logs through rich."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )
