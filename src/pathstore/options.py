from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


FILTER_OPERATORS = frozenset(
    {
        "<",
        "<=",
        "==",
        "!=",
        ">=",
        ">",
        "in",
        "not-in",
        "array_contains",
        "array_contains_any",
    }
)
_OPERATOR_ALIASES = {
    "array-contains": "array_contains",
    "array-contains-any": "array_contains_any",
    "not_in": "not-in",
}
_DIRECTIONS = {
    "asc": "ASCENDING",
    "ascending": "ASCENDING",
    "desc": "DESCENDING",
    "descending": "DESCENDING",
}


def normalize_operator(op: str) -> str:
    normalized = op.strip().lower()
    normalized = _OPERATOR_ALIASES.get(normalized, normalized)
    if normalized not in FILTER_OPERATORS:
        raise ValueError(f"Unsupported filter operator: {op}")
    return normalized


class QueryFilter(BaseModel):
    """One AND-ed `where` clause. Accepts a `(field, op, value)` triple."""

    model_config = ConfigDict(frozen=True)

    field_path: str = Field(min_length=1)
    op: str
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _from_triple(cls, data: Any) -> Any:
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            if len(data) != 3:
                raise ValueError("filter must be a (field, operator, value) triple")
            field_path, op, value = data
            return {"field_path": field_path, "op": op, "value": value}
        return data

    @field_validator("op")
    @classmethod
    def _check_op(cls, value: str) -> str:
        return normalize_operator(value)


class OrderBy(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    direction: str | None = None

    @field_validator("direction")
    @classmethod
    def _check_direction(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = _DIRECTIONS.get(value.strip().lower())
        if normalized is None:
            raise ValueError(f"direction must be asc or desc: {value}")
        return normalized


class AddDataOptions(BaseModel):
    """Write request. `value` is kept by identity and augmented in place."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    path: str
    value: Any = None
    timestamp_field: str | None = Field(default=None, alias="timestamp")
    merge: bool = False
    update: bool = False
    delete: bool = False

    @field_validator("value")
    @classmethod
    def _check_value(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, MutableMapping):
            raise ValueError("value must be a mutable mapping")
        return value


class GetDataOptions(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    path: str
    limit: int | None = Field(default=None, gt=0)
    filters: list[QueryFilter] = Field(default_factory=list, alias="andQueries")
    order_by: OrderBy | None = Field(default=None, alias="orderBy")
    start_at: Any = Field(default=None, alias="startAt")
    start_after: Any = Field(default=None, alias="startAfter")

    def has_query_clauses(self) -> bool:
        return any(
            (
                bool(self.filters),
                self.order_by is not None,
                self.start_at is not None,
                self.start_after is not None,
                self.limit is not None,
            )
        )
