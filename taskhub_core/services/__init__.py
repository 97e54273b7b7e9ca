# =============================================================================
# taskhub_core/services/__init__.py
# Service Layer for TaskHub
# =============================================================================
"""
Screen-facing services.

Each mutating call checks connectivity first (ConnectivityError -> failed
ServiceResult with code NET_001), performs the repository call, and returns
the reloaded list so the screen always shows what the store holds.

Usage Example:
-------------
    from taskhub_core import TaskHub

    hub = await TaskHub.create()
    result = await hub.task_service.add("Beli susu", date="25/12/2025")
    if not result:
        print(result.error)
"""

from .base_service import BaseService, ServiceResult
from .collection_service import CollectionService
from .task_service import TaskService
from .product_service import ProductService

__all__ = [
    "BaseService",
    "ServiceResult",
    "CollectionService",
    "TaskService",
    "ProductService",
]
