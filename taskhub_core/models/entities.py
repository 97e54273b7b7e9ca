# =============================================================================
# taskhub_core/models/entities.py
# Entity shapes: Task, Product, and the session records User / Identity
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple

from taskhub_core.data.timestamps import parse_date_value

# Free-text completion markers, matched case-insensitively in title or
# description. The `completed` column is not consulted (see DESIGN.md).
COMPLETION_MARKERS: Tuple[str, ...] = ("selesai", "done", "complete")
COMPLETED_SUFFIX = " [SELESAI]"


@dataclass
class Task:
    """A to-do item stored in the `tasks` table."""
    id: str
    title: str
    description: str = ""
    date: str = ""
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    EDITABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "description", "date", "completed")

    @property
    def is_marked_complete(self) -> bool:
        """True when title or description carries a completion marker."""
        text = f"{self.title or ''}\n{self.description or ''}".lower()
        return any(marker in text for marker in COMPLETION_MARKERS)

    @property
    def due_date(self) -> Optional[datetime]:
        """The `date` text resolved to an instant, if it is a valid date."""
        value = parse_date_value(self.date)
        return value.to_instant() if value is not None else None

    def fields(self) -> Dict[str, Any]:
        """Editable fields as a plain dict."""
        return {name: getattr(self, name) for name in self.EDITABLE_FIELDS}


@dataclass
class Product:
    """A catalogue entry stored in the `products` table."""
    id: str
    name: str
    description: str = ""
    price: float = 0.0
    category: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    EDITABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "description", "price", "category")

    def fields(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.EDITABLE_FIELDS}


@dataclass(frozen=True)
class Identity:
    """The remote principal writes are stamped with."""
    uid: str
    email: Optional[str] = None
    is_anonymous: bool = False


@dataclass(frozen=True)
class User:
    """
    Shaped user record persisted in the local session cache.

    `username` is derived from the local part of the email address.
    """
    id: str
    username: str
    email: str
    uid: str = field(default="")

    @classmethod
    def from_login(cls, uid: str, email: str) -> User:
        return cls(id=uid, username=email.split("@")[0], email=email, uid=uid)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            username=str(data.get("username") or ""),
            email=str(data.get("email") or ""),
            uid=str(data.get("uid") or data["id"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
