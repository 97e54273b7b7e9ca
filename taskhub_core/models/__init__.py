from .entities import (
    Task,
    Product,
    User,
    Identity,
    COMPLETION_MARKERS,
    COMPLETED_SUFFIX,
)

__all__ = [
    "Task",
    "Product",
    "User",
    "Identity",
    "COMPLETION_MARKERS",
    "COMPLETED_SUFFIX",
]
