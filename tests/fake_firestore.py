from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from itertools import count
from typing import Any

from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1.base_query import FieldFilter


_AUTO_IDS = count(1)


@dataclass
class FakeSnapshot:
    id: str
    exists: bool
    data: dict | None = None

    def to_dict(self) -> dict | None:
        return self.data


def _matches(data: dict, field_path: str, op: str, value: Any) -> bool:
    if field_path not in data:
        return False
    actual = data[field_path]
    if op == "==":
        return actual == value
    if op == "!=":
        return actual != value
    if op == "<":
        return actual < value
    if op == "<=":
        return actual <= value
    if op == ">":
        return actual > value
    if op == ">=":
        return actual >= value
    if op == "in":
        return actual in value
    if op == "not-in":
        return actual not in value
    if op == "array_contains":
        return value in actual
    if op == "array_contains_any":
        return any(item in actual for item in value)
    raise ValueError(f"unsupported op: {op}")


@dataclass
class FakeQuery:
    path: str
    db: dict[str, dict]
    filters: tuple[tuple[str, str, Any], ...] = ()
    orders: tuple[tuple[str, str], ...] = ()
    cursor: tuple[list, bool] | None = None
    limit_count: int | None = None
    calls: tuple[str, ...] = ()

    def _copy(self, call: str, **changes: Any) -> "FakeQuery":
        values = {
            "path": self.path,
            "db": self.db,
            "filters": self.filters,
            "orders": self.orders,
            "cursor": self.cursor,
            "limit_count": self.limit_count,
            "calls": self.calls + (call,),
        }
        values.update(changes)
        return FakeQuery(**values)

    def where(self, field_path: str | None = None, op_string: str | None = None, value: Any = None, *, filter: FieldFilter | None = None) -> "FakeQuery":
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return self._copy("where", filters=self.filters + ((field_path, op_string, value),))

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "FakeQuery":
        return self._copy("order_by", orders=self.orders + ((field_path, direction),))

    def start_at(self, fields: Any) -> "FakeQuery":
        return self._copy("start_at", cursor=(_cursor_values(fields, self.orders), True))

    def start_after(self, fields: Any) -> "FakeQuery":
        return self._copy("start_after", cursor=(_cursor_values(fields, self.orders), False))

    def limit(self, count: int) -> "FakeQuery":
        return self._copy("limit", limit_count=count)

    def _direct_children(self) -> list[tuple[str, dict]]:
        prefix = f"{self.path}/"
        return [
            (key[len(prefix):], data)
            for key, data in self.db.items()
            if key.startswith(prefix) and "/" not in key[len(prefix):]
        ]

    def _compare(self, left: dict, right: dict) -> int:
        for field_path, direction in self.orders:
            a, b = left.get(field_path), right.get(field_path)
            if a == b:
                continue
            result = -1 if a < b else 1
            return -result if direction == "DESCENDING" else result
        return 0

    def _passes_cursor(self, data: dict) -> bool:
        if self.cursor is None:
            return True
        values, inclusive = self.cursor
        position = {field_path: value for (field_path, _), value in zip(self.orders, values)}
        result = self._compare(data, position)
        return result >= 0 if inclusive else result > 0

    async def get(self) -> list[FakeSnapshot]:
        rows = [
            (doc_id, data)
            for doc_id, data in self._direct_children()
            if all(_matches(data, f, op, v) for f, op, v in self.filters)
        ]
        if self.orders:
            rows = [row for row in rows if all(f in row[1] for f, _ in self.orders)]
            rows.sort(key=cmp_to_key(lambda a, b: self._compare(a[1], b[1])))
        rows = [row for row in rows if self._passes_cursor(row[1])]
        if self.limit_count is not None:
            rows = rows[: self.limit_count]
        return [FakeSnapshot(id=doc_id, exists=True, data=dict(data)) for doc_id, data in rows]


def _cursor_values(fields: Any, orders: tuple[tuple[str, str], ...]) -> list:
    if isinstance(fields, dict):
        return [fields.get(field_path) for field_path, _ in orders]
    return list(fields)


@dataclass
class FakeCollectionRef(FakeQuery):
    parent: "FakeDocumentRef | None" = None

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def document(self, document_id: str | None = None) -> "FakeDocumentRef":
        if document_id is None:
            document_id = f"auto{next(_AUTO_IDS):04d}"
        return FakeDocumentRef(path=f"{self.path}/{document_id}", db=self.db, parent=self)


@dataclass
class FakeDocumentRef:
    path: str
    db: dict[str, dict] = field(default_factory=dict)
    parent: FakeCollectionRef | None = None

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def collection(self, name: str) -> FakeCollectionRef:
        return FakeCollectionRef(path=f"{self.path}/{name}", db=self.db, parent=self)

    async def set(self, data: dict, merge: bool = False) -> None:
        if merge and self.path in self.db:
            merged = dict(self.db[self.path])
            merged.update(data)
            self.db[self.path] = merged
            return
        self.db[self.path] = dict(data)

    async def update(self, data: dict) -> None:
        if self.path not in self.db:
            raise NotFound(f"No document to update: {self.path}")
        merged = dict(self.db[self.path])
        merged.update(data)
        self.db[self.path] = merged

    async def get(self) -> FakeSnapshot:
        if self.path not in self.db:
            return FakeSnapshot(id=self.id, exists=False, data=None)
        return FakeSnapshot(id=self.id, exists=True, data=dict(self.db[self.path]))

    async def delete(self) -> None:
        self.db.pop(self.path, None)


@dataclass
class FakeFirestoreClient:
    db: dict[str, dict] = field(default_factory=dict)

    def collection(self, name: str) -> FakeCollectionRef:
        return FakeCollectionRef(path=name, db=self.db)
