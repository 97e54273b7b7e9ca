# =============================================================================
# taskhub_core/errors/handlers.py
# Error Handling Utilities for TaskHub
# =============================================================================

from __future__ import annotations
import functools
import traceback
from typing import Optional, Callable, Awaitable, TypeVar

from taskhub_core.logging import get_logger
from .exceptions import TaskHubError, ConnectivityError
from .messages import DEFAULT_LOCALE, get_message

logger = get_logger(__name__)

T = TypeVar("T")


def handle_error(
    error: Exception,
    log_error: bool = True,
    user_message: Optional[str] = None,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        log_error: Whether to log the error
        user_message: Custom message for the user (uses error message if None)
        locale: Language of the support hint added to non-recoverable errors

    Returns:
        The message a caller should present to the user
    """
    if isinstance(error, TaskHubError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=error,
        )

    if not recoverable:
        return f"{message}. {get_message('support.contact', locale)}."
    return message


def require_connection(
    probe_attr: str = "probe",
    message_key: str = "network.offline",
):
    """
    Decorator for async service methods: run the connectivity probe first
    and raise ConnectivityError instead of calling the method when offline.

    The decorated object must expose the probe as ``self.<probe_attr>``;
    ``self.locale`` (optional) selects the message language.

    Usage:
        class TaskService(BaseService):
            @require_connection()
            async def add_task(self, ...):
                ...
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs) -> T:
            probe = getattr(self, probe_attr, None)
            if probe is not None and not await probe.is_connected():
                locale = getattr(self, "locale", DEFAULT_LOCALE)
                raise ConnectivityError(
                    get_message(message_key, locale),
                    status=probe.status.value,
                )
            return await func(self, *args, **kwargs)

        return wrapper

    return decorator
