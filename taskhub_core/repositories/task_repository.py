# =============================================================================
# taskhub_core/repositories/task_repository.py
# Task repository: the `tasks` table as Task entities
# =============================================================================

from __future__ import annotations
from datetime import date
from typing import Any, Dict

from taskhub_core.data import format_task_date, parse_date_value
from taskhub_core.models import Task
from .base import EntityRepository


def _date_text(raw: Any) -> str:
    """Canonical DD/MM/YYYY text for any raw date value."""
    if isinstance(raw, date):
        return format_task_date(raw)
    value = parse_date_value(raw)
    return value.to_text() if value is not None else ""


class TaskRepository(EntityRepository[Task]):
    """CRUD for tasks."""

    collection = "tasks"

    def from_record(self, record: Dict[str, Any]) -> Task:
        return Task(
            id=str(record["id"]),
            title=record.get("title") or "",
            description=record.get("description") or "",
            date=_date_text(record.get("date")),
            completed=bool(record.get("completed") or False),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    def to_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        fields = {k: v for k, v in values.items() if k in Task.EDITABLE_FIELDS}
        if "date" in fields:
            fields["date"] = _date_text(fields["date"])
        return fields

    async def create(
        self,
        title: str,
        description: str = "",
        date: Any = "",
        completed: bool = False,
    ) -> str:
        """Create a task and return its id."""
        fields = self.to_fields(
            {"title": title, "description": description, "date": date, "completed": completed}
        )
        return await self.gateway.create(self.collection, fields)
