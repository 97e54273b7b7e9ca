# =============================================================================
# taskhub_core/config/settings.py
# Runtime settings: Supabase credentials, table names, cache location
# =============================================================================
"""
Settings are read from a ``secrets.toml`` file and then overridden by
environment variables.

Expected secrets.toml format:
    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [taskhub]
    locale = "id"
    session_cache_path = ".cache/session.json"
    connection_timeout = 5
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from taskhub_core.errors import ConfigurationError, get_message
from taskhub_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SECRETS_PATH = Path(".taskhub") / "secrets.toml"
DEFAULT_SESSION_CACHE_PATH = Path(".cache") / "session.json"

ANONYMOUS_USER_ID = "anonymous"


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    anonymous_user_id: str = ANONYMOUS_USER_ID
    tasks_table: str = "tasks"
    products_table: str = "products"
    session_cache_path: Path = DEFAULT_SESSION_CACHE_PATH
    connection_timeout: float = 5.0
    locale: str = "id"

    @property
    def is_configured(self) -> bool:
        """True when both Supabase URL and key are present."""
        return bool(self.supabase_url and self.supabase_key)

    def require_supabase(self) -> None:
        """Raise ConfigurationError if the Supabase credentials are missing."""
        for key, value in (("supabase.url", self.supabase_url), ("supabase.key", self.supabase_key)):
            if not value:
                raise ConfigurationError(
                    get_message("config.missing_supabase", self.locale, config_key=key),
                    config_key=key,
                )


def _read_secrets(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return toml.load(str(path))
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigurationError(
            f"Could not read secrets file {path}: {e}",
            config_key=str(path),
        ) from e


def load_settings(secrets_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from secrets.toml and environment variables.

    Environment variables win over the file:
        SUPABASE_URL, SUPABASE_KEY, TASKHUB_LOCALE, TASKHUB_SESSION_CACHE

    Args:
        secrets_path: Path to secrets.toml (default: .taskhub/secrets.toml,
            or TASKHUB_SECRETS if set)

    Returns:
        Settings instance
    """
    path = Path(secrets_path or os.getenv("TASKHUB_SECRETS") or DEFAULT_SECRETS_PATH)
    secrets = _read_secrets(path)

    supabase = secrets.get("supabase", {})
    app = secrets.get("taskhub", {})

    settings = Settings(
        supabase_url=supabase.get("url"),
        supabase_key=supabase.get("key"),
        tasks_table=app.get("tasks_table", "tasks"),
        products_table=app.get("products_table", "products"),
        session_cache_path=Path(app.get("session_cache_path", DEFAULT_SESSION_CACHE_PATH)),
        connection_timeout=float(app.get("connection_timeout", 5.0)),
        locale=app.get("locale", "id"),
    )

    overrides: Dict[str, Any] = {}
    if os.getenv("SUPABASE_URL"):
        overrides["supabase_url"] = os.getenv("SUPABASE_URL")
    if os.getenv("SUPABASE_KEY"):
        overrides["supabase_key"] = os.getenv("SUPABASE_KEY")
    if os.getenv("TASKHUB_LOCALE"):
        overrides["locale"] = os.getenv("TASKHUB_LOCALE")
    if os.getenv("TASKHUB_SESSION_CACHE"):
        overrides["session_cache_path"] = Path(os.getenv("TASKHUB_SESSION_CACHE"))

    if overrides:
        settings = replace(settings, **overrides)

    if not settings.is_configured:
        logger.warning("Supabase credentials not found in %s or environment", path)

    return settings


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings (loaded once)."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
