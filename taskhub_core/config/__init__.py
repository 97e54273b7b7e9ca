from .settings import (
    Settings,
    ANONYMOUS_USER_ID,
    load_settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "ANONYMOUS_USER_ID",
    "load_settings",
    "get_settings",
    "reset_settings",
]
