"""
Session layer for TaskHub.

SessionManager holds the current Supabase identity (real or anonymous) and
the shaped User record; LocalSessionCache persists that record between runs.
"""

from .session_cache import LocalSessionCache, USER_KEY
from .session_manager import SessionManager

__all__ = [
    "LocalSessionCache",
    "USER_KEY",
    "SessionManager",
]
