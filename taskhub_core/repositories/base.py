# =============================================================================
# taskhub_core/repositories/base.py
# Typed facade over the collection gateway
# =============================================================================

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from taskhub_core.data import CollectionGateway
from taskhub_core.logging import get_logger

E = TypeVar("E")


class EntityRepository(ABC, Generic[E]):
    """
    Binds one collection and maps its rows to an entity type.

    No validation happens here: length limits and price checks belong to
    the forms that collect the data.

    Usage:
        class TaskRepository(EntityRepository[Task]):
            collection = "tasks"
            ...
    """

    collection: str = ""

    def __init__(self, gateway: CollectionGateway, collection: Optional[str] = None):
        self.gateway = gateway
        if collection:
            self.collection = collection
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def from_record(self, record: Dict[str, Any]) -> E:
        """Build an entity from a normalized row."""

    @abstractmethod
    def to_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Map entity attribute values to column values."""

    async def list(self) -> List[E]:
        records = await self.gateway.list(self.collection)
        return [self.from_record(r) for r in records]

    async def get(self, record_id: str) -> Optional[E]:
        record = await self.gateway.get(self.collection, record_id)
        return self.from_record(record) if record is not None else None

    async def update(self, record_id: str, **changes: Any) -> E:
        record = await self.gateway.update(self.collection, record_id, self.to_fields(changes))
        return self.from_record(record)

    async def delete(self, record_id: str) -> None:
        await self.gateway.delete(self.collection, record_id)
