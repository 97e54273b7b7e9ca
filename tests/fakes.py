# =============================================================================
# tests/fakes.py
# In-memory stand-ins for the Supabase async client
# =============================================================================

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

# =============================================================================
# IN-MEMORY SUPABASE
# =============================================================================

class FakeAPIError(Exception):
    """Shape of postgrest.APIError: code + message."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class FakeAuthError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _parse_ts(value: Any) -> datetime:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return datetime.min.replace(tzinfo=timezone.utc)


class FakeQuery:
    """Mimics the postgrest request builder chain."""

    def __init__(self, db: "FakeSupabase", table: str, action: str, payload: Any = None):
        self._db = db
        self._table = table
        self._action = action
        self._payload = payload
        self._filters: List[tuple] = []
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self._limit = size
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(str(row.get(col)) == str(val) for col, val in self._filters)

    async def execute(self) -> SimpleNamespace:
        self._db.calls.append((self._table, self._action, self._payload))
        errors = self._db.errors.get(self._action)
        if errors:
            raise errors.pop(0)

        rows = self._db.tables.setdefault(self._table, [])

        if self._action == "insert":
            row = {"id": str(uuid.uuid4()), **self._payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [row for row in rows if self._matches(row)]

        if self._action == "select":
            if self._order is not None:
                column, desc = self._order
                matched = sorted(matched, key=lambda r: _parse_ts(r.get(column)), reverse=desc)
            if self._limit is not None:
                matched = matched[: self._limit]
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self._action == "update":
            for row in matched:
                row.update(self._payload)
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self._action == "delete":
            self._db.tables[self._table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[dict(r) for r in matched])

        raise AssertionError(f"unsupported action {self._action}")


class FakeTable:
    def __init__(self, db: "FakeSupabase", name: str):
        self._db = db
        self._name = name

    def select(self, columns: str = "*") -> FakeQuery:
        return FakeQuery(self._db, self._name, "select")

    def insert(self, payload: Dict[str, Any]) -> FakeQuery:
        return FakeQuery(self._db, self._name, "insert", dict(payload))

    def update(self, payload: Dict[str, Any]) -> FakeQuery:
        return FakeQuery(self._db, self._name, "update", dict(payload))

    def delete(self) -> FakeQuery:
        return FakeQuery(self._db, self._name, "delete")


class FakeAuth:
    """Mimics the GoTrue async client used by SessionManager."""

    def __init__(self):
        self.users: Dict[str, Dict[str, str]] = {}
        self.session: Optional[SimpleNamespace] = None
        self.anonymous_enabled = True
        self._listeners: List[Any] = []

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners):
            callback(event, self.session)

    def _start(self, user: SimpleNamespace) -> SimpleNamespace:
        self.session = SimpleNamespace(user=user, access_token="token")
        self._emit("SIGNED_IN")
        return SimpleNamespace(user=user, session=self.session)

    async def get_session(self):
        return self.session

    async def sign_in_anonymously(self, credentials=None):
        if not self.anonymous_enabled:
            raise FakeAuthError("Anonymous sign-ins are disabled")
        user = SimpleNamespace(id=str(uuid.uuid4()), email=None, is_anonymous=True)
        return self._start(user)

    async def sign_in_with_password(self, credentials):
        account = self.users.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        user = SimpleNamespace(id=account["id"], email=credentials["email"], is_anonymous=False)
        return self._start(user)

    async def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.users:
            raise FakeAuthError("User already registered")
        self.users[email] = {"id": str(uuid.uuid4()), "password": credentials["password"]}
        user = SimpleNamespace(id=self.users[email]["id"], email=email, is_anonymous=False)
        return self._start(user)

    async def sign_out(self, options=None):
        self.session = None
        self._emit("SIGNED_OUT")

    def on_auth_state_change(self, callback):
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return SimpleNamespace(unsubscribe=unsubscribe)


class FakeSupabase:
    """In-memory stand-in for supabase.AsyncClient."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.errors: Dict[str, List[Exception]] = {}
        self.calls: List[tuple] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeTable:
        return FakeTable(self, name)

    def fail_next(self, action: str, *errors: Exception) -> None:
        """Queue errors raised by the next `action` executions."""
        self.errors.setdefault(action, []).extend(errors)

    def calls_for(self, action: str) -> List[tuple]:
        return [call for call in self.calls if call[1] == action]

