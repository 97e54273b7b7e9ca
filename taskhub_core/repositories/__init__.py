from .base import EntityRepository
from .task_repository import TaskRepository
from .product_repository import ProductRepository

__all__ = ["EntityRepository", "TaskRepository", "ProductRepository"]
