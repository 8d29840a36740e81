"""
In-memory stand-ins for the Supabase client and the Expo push client.

FakeSupabase implements the slice of the postgrest query builder the
services use: select/insert/update/upsert/delete, the eq/neq/in_/lt/lte/gte
filters, order, limit, single/maybe_single, count="exact", and one level of
embedded resources (``expense_splits(...)`` on expenses, ``profiles(*)`` on
house_members).
"""

import copy
import re
import uuid
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from app.modules.push.expo_client import PushGatewayError
from app.modules.push.schemas import PushTicket

# (parent table, embedded name) -> (child table, child column, parent column, many)
EMBEDS = {
    ("expenses", "expense_splits"): ("expense_splits", "expense_id", "id", True),
    ("house_members", "profiles"): ("profiles", "id", "user_id", False),
}

_EMBED_RE = re.compile(r"(\w+)(?:!\w+)?\s*\(")


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.action = "select"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.embeds: List[str] = []
        self.count_mode: Optional[str] = None
        self.filters = []
        self.order_by = []
        self.limit_n: Optional[int] = None
        self.single_mode: Optional[str] = None

    # actions
    def select(self, columns: str = "*", count: Optional[str] = None, head: bool = False):
        self.action = "select"
        self.embeds = _EMBED_RE.findall(columns)
        self.count_mode = count
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def upsert(self, payload, on_conflict: Optional[str] = None):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def lt(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) < value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) <= value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) >= value)
        return self

    def is_(self, column, value):
        expected = None if value == "null" else value
        self.filters.append(lambda r: r.get(column) is expected)
        return self

    def order(self, column, desc: bool = False):
        self.order_by.append((column, desc))
        return self

    def limit(self, n: int):
        self.limit_n = n
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    # execution
    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def _embed(self, row):
        row = dict(row)
        for name in self.embeds:
            spec = EMBEDS.get((self.table_name, name))
            if not spec:
                continue
            child_table, child_col, parent_col, many = spec
            children = [copy.deepcopy(c) for c in self.db.rows(child_table) if c.get(child_col) == row.get(parent_col)]
            row[name] = children if many else (children[0] if children else None)
        return row

    def execute(self):
        self.db.calls.append((self.table_name, self.action))
        if self.table_name in self.db.fail_tables:
            raise Exception(f"{self.table_name} unavailable")
        rows = self.db.rows(self.table_name)

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in payload:
                item = dict(item)
                item.setdefault("id", str(uuid.uuid4()))
                rows.append(item)
                created.append(copy.deepcopy(item))
            return SimpleNamespace(data=created, count=None)

        if self.action == "upsert":
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            item = dict(self.payload)
            for row in rows:
                if all(row.get(k) == item.get(k) for k in keys):
                    row.update(item)
                    return SimpleNamespace(data=[copy.deepcopy(row)], count=None)
            item.setdefault("id", str(uuid.uuid4()))
            rows.append(item)
            return SimpleNamespace(data=[copy.deepcopy(item)], count=None)

        matched = [r for r in rows if self._matches(r)]

        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[copy.deepcopy(r) for r in matched], count=None)

        if self.action == "delete":
            self.db.tables[self.table_name] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[copy.deepcopy(r) for r in matched], count=None)

        for column, desc in reversed(self.order_by):
            matched = sorted(matched, key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        count = len(matched) if self.count_mode == "exact" else None
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        data = [self._embed(copy.deepcopy(r)) for r in matched]

        if self.single_mode == "single":
            if len(data) != 1:
                raise Exception("JSON object requested, multiple (or no) rows returned")
            return SimpleNamespace(data=data[0], count=count)
        if self.single_mode == "maybe":
            return SimpleNamespace(data=data[0] if data else None, count=count)
        return SimpleNamespace(data=data, count=count)


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def list(self, path: str):
        if self.name in self.storage.failing:
            raise Exception(f"bucket {self.name} unavailable")
        prefix = f"{path}/"
        return [{"name": p[len(prefix):]} for p in self.storage.files.get(self.name, []) if p.startswith(prefix)]

    def remove(self, paths: List[str]):
        remaining = [p for p in self.storage.files.get(self.name, []) if p not in paths]
        self.storage.files[self.name] = remaining
        self.storage.removed.extend(paths)
        return [{"name": p} for p in paths]


class FakeStorage:
    def __init__(self):
        self.files: Dict[str, List[str]] = {}
        self.failing = set()
        self.removed: List[str] = []

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeAdmin:
    def __init__(self):
        self.deleted: List[str] = []
        self.fail = False

    def delete_user(self, user_id: str):
        if self.fail:
            raise Exception("admin api down")
        self.deleted.append(user_id)


class FakeAuth:
    def __init__(self):
        self.admin = FakeAdmin()
        self.users: Dict[str, Dict[str, Any]] = {}

    def get_user(self, jwt: str):
        user = self.users.get(jwt)
        if not user:
            raise Exception("invalid JWT: token is expired")
        return SimpleNamespace(user=SimpleNamespace(
            id=user["id"], email=user.get("email"), user_metadata={}, app_metadata={}
        ))


class FakeSupabase:
    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.storage = FakeStorage()
        self.auth = FakeAuth()
        self.fail_tables = set()
        self.calls = []

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class FakePushClient:
    """Records sent messages; set ``fail`` to make every send raise like a gateway 500."""

    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, messages):
        if self.fail:
            raise PushGatewayError("Failed to send push notifications: upstream error", status_code=500)
        self.sent.extend(messages)
        return [PushTicket(status="ok", id=str(i)) for i, _ in enumerate(messages)]
