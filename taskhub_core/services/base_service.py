# =============================================================================
# taskhub_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from typing import Optional, Dict, Any, Callable, Awaitable
from dataclasses import dataclass

from taskhub_core.logging import get_logger, LogContext
from taskhub_core.errors import handle_error, TaskHubError
from taskhub_core.errors.messages import DEFAULT_LOCALE


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Provides consistent structure for all service method returns.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, TaskHubError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=e.details,
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
        )


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging
    - Error handling
    - Result standardization

    Usage:
        class MyService(BaseService):
            async def do_something(self) -> ServiceResult:
                return await self.run("Doing something", self._do_something)
    """

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self.logger = get_logger(self.__class__.__name__)
        self.locale = locale

    def log_operation(self, operation: str) -> LogContext:
        """
        Create a logging context for an operation.

        Usage:
            with self.log_operation("Loading tasks"):
                ...
        """
        return LogContext(self.logger, operation)

    async def run(
        self,
        operation: str,
        func: Callable[..., Awaitable[Any]],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Await a coroutine function with error handling and logging.

        A ServiceResult returned by ``func`` is passed through; any other
        value is wrapped in ServiceResult.ok().

        Returns:
            ServiceResult with success/failure status
        """
        try:
            with self.log_operation(operation):
                result = await func(*args, **kwargs)
        except TaskHubError as e:
            # LogContext has already logged the failure
            failed = ServiceResult.from_exception(e)
            failed.error = handle_error(e, log_error=False, locale=self.locale)
            return failed
        except Exception as e:
            self.logger.error(f"{operation} failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e))

        if isinstance(result, ServiceResult):
            return result
        return ServiceResult.ok(result)
