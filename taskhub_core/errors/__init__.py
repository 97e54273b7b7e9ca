# =============================================================================
# taskhub_core/errors/__init__.py
# Centralized Error Handling for TaskHub
# =============================================================================

from .exceptions import (
    TaskHubError,
    ValidationError,
    AuthError,
    StorageError,
    ConnectivityError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    require_connection,
)

from .messages import get_message, entity_label

__all__ = [
    # Exceptions
    "TaskHubError",
    "ValidationError",
    "AuthError",
    "StorageError",
    "ConnectivityError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "require_connection",
    # Messages
    "get_message",
    "entity_label",
]
