# taskhub_core/auth/session_cache.py
"""
Local Session Cache: a small key-value store persisted as one JSON file.

The session layer keeps exactly one key in it, ``"user"``, holding the
serialized User record so a cold start can show the logged-in UI before the
auth notifications arrive.
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional

from taskhub_core.logging import get_logger
from taskhub_core.models import User

logger = get_logger(__name__)

USER_KEY = "user"


class LocalSessionCache:
    """Key-value persistence surface backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load cached entries from disk."""
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return data if isinstance(data, dict) else {}
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Ignoring unreadable session cache {self.path}: {e}")
                return {}
        return {}

    def _save(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        if key in self._data:
            del self._data[key]
            self._save()

    # ------------------------------------------------------------------
    # User record helpers
    # ------------------------------------------------------------------

    def load_user(self) -> Optional[User]:
        raw = self.get(USER_KEY)
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw) if isinstance(raw, str) else raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed cached user: {e}")
            self.remove(USER_KEY)
            return None

    def save_user(self, user: User) -> None:
        self.set(USER_KEY, json.dumps(user.to_dict()))

    def clear_user(self) -> None:
        self.remove(USER_KEY)
