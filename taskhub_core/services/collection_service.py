# =============================================================================
# taskhub_core/services/collection_service.py
# Screen-level operations shared by the task and product services
# =============================================================================
"""
The list screens follow one pattern: check connectivity, run the repository
call, then reload the whole list so the screen shows what the store now
holds. CollectionService implements that pattern once.
"""

from __future__ import annotations
from typing import Any, Generic, List, Optional, TypeVar

from taskhub_core.config import Settings, get_settings
from taskhub_core.errors import require_connection
from taskhub_core.network import ConnectivityProbe
from taskhub_core.repositories import EntityRepository
from .base_service import BaseService, ServiceResult

E = TypeVar("E")


class CollectionService(BaseService, Generic[E]):
    """Connectivity-gated CRUD with refresh-after-mutation."""

    entity_name: str = "item"

    def __init__(
        self,
        repository: EntityRepository[E],
        probe: Optional[ConnectivityProbe] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__((settings or get_settings()).locale)
        self.repository = repository
        self.probe = probe

    async def load(self) -> ServiceResult:
        """Fetch the full list, newest first."""
        return await self.run(f"Loading {self.entity_name}s", self._load)

    async def edit(self, record_id: str, **changes: Any) -> ServiceResult:
        """Apply a partial update; data is the refreshed list."""
        return await self.run(f"Updating {self.entity_name} {record_id}", self._edit, record_id, changes)

    async def remove(self, record_id: str) -> ServiceResult:
        """Delete one entry; data is the refreshed list."""
        return await self.run(f"Deleting {self.entity_name} {record_id}", self._remove, record_id)

    @require_connection()
    async def _load(self) -> List[E]:
        return await self.repository.list()

    @require_connection()
    async def _edit(self, record_id: str, changes: dict) -> ServiceResult:
        updated = await self.repository.update(record_id, **changes)
        return ServiceResult.ok(await self.repository.list(), metadata={"updated": updated})

    @require_connection()
    async def _remove(self, record_id: str) -> ServiceResult:
        await self.repository.delete(record_id)
        return ServiceResult.ok(await self.repository.list(), metadata={"id": record_id})

    async def _created(self, record_id: str) -> ServiceResult:
        return ServiceResult.ok(await self.repository.list(), metadata={"id": record_id})
