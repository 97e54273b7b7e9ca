# =============================================================================
# taskhub_core/services/task_service.py
# Task screens: add, edit, complete, delete, dashboard statistics
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from taskhub_core.config import Settings
from taskhub_core.errors import require_connection
from taskhub_core.models import Task, COMPLETED_SUFFIX
from taskhub_core.network import ConnectivityProbe
from taskhub_core.repositories import TaskRepository
from .base_service import ServiceResult
from .collection_service import CollectionService


class TaskService(CollectionService[Task]):
    """
    Operations behind the task list, task forms and the dashboard.

    Usage:
        service = TaskService(TaskRepository(gateway), probe)
        result = await service.add("Beli susu", date="25/12/2025")
        if result:
            tasks = result.data
    """

    entity_name = "task"

    def __init__(
        self,
        repository: TaskRepository,
        probe: Optional[ConnectivityProbe] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(repository, probe, settings)

    async def add(self, title: str, description: str = "", date: Any = "") -> ServiceResult:
        """Create a task; data is the refreshed list, metadata["id"] the new id."""
        return await self.run("Creating task", self._add, title, description, date)

    async def mark_completed(self, task: Task) -> ServiceResult:
        """
        Mark a task done by appending the completion marker to its
        description. Tasks that already carry a marker are left as they are;
        data is the refreshed list either way.
        """
        if task.is_marked_complete:
            result = await self.load()
            if result:
                result.metadata = {"id": task.id, "unchanged": True}
            return result
        return await self.run(f"Completing task {task.id}", self._mark_completed, task)

    async def stats(self) -> ServiceResult:
        """Dashboard counters: total, completed and pending tasks."""
        return await self.run("Computing task statistics", self._stats)

    @require_connection()
    async def _add(self, title: str, description: str, date: Any) -> ServiceResult:
        task_id = await self.repository.create(title=title, description=description, date=date)
        return await self._created(task_id)

    @require_connection()
    async def _mark_completed(self, task: Task) -> ServiceResult:
        description = (task.description or "") + COMPLETED_SUFFIX
        updated = await self.repository.update(task.id, description=description)
        return ServiceResult.ok(await self.repository.list(), metadata={"updated": updated})

    async def _stats(self) -> Dict[str, int]:
        tasks = await self.repository.list()
        completed = sum(1 for task in tasks if task.is_marked_complete)
        return {
            "total": len(tasks),
            "completed": completed,
            "pending": len(tasks) - completed,
        }
