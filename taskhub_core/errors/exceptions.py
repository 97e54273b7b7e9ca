# =============================================================================
# taskhub_core/errors/exceptions.py
# Custom Exception Hierarchy for TaskHub
# =============================================================================

from typing import Optional, Dict, Any


class TaskHubError(Exception):
    """
    Base exception for all TaskHub errors.

    Attributes:
        message: Human-readable (localized) error description
        code: Machine-readable error code (e.g., "STORE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "TH_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# INPUT EXCEPTIONS
# =============================================================================

class ValidationError(TaskHubError):
    """Raised when caller-supplied data fails a local precondition"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field

        super().__init__(
            message=message,
            code="VAL_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# REMOTE SERVICE EXCEPTIONS
# =============================================================================

class AuthError(TaskHubError):
    """Raised when credentials are rejected or no identity can be established"""

    def __init__(
        self,
        message: str,
        email: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if email:
            details["email"] = email
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class StorageError(TaskHubError):
    """Raised when a remote CRUD call fails"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if operation:
            details["operation"] = operation
        if record_id:
            details["record_id"] = record_id

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class ConnectivityError(TaskHubError):
    """Raised by callers when the connectivity probe reports no network"""

    def __init__(
        self,
        message: str,
        status: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if status:
            details["status"] = status

        super().__init__(
            message=message,
            code="NET_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(TaskHubError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
