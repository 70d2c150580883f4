from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Sequence

from google.cloud.firestore_v1.base_query import FieldFilter

from pathstore.options import OrderBy, QueryFilter


def cursor_fields(value: Any) -> Any:
    """Shape a cursor for `start_at`/`start_after`.

    Mappings, lists, tuples and snapshots go through unchanged; a scalar is one
    value for a single orderBy field.
    """

    if isinstance(value, (Mapping, list, tuple)) or hasattr(value, "to_dict"):
        return value
    return [value]


def apply_filters(query: Any, filters: Sequence[QueryFilter]) -> Any:
    for query_filter in filters:
        query = query.where(
            filter=FieldFilter(query_filter.field_path, query_filter.op, query_filter.value)
        )
    return query


def apply_order_by(query: Any, order_by: OrderBy) -> Any:
    if order_by.direction:
        return query.order_by(order_by.field, direction=order_by.direction)
    return query.order_by(order_by.field)


def build_query(
    collection: Any,
    filters: Sequence[QueryFilter] = (),
    *,
    order_by: OrderBy | None = None,
    start_at: Any = None,
    start_after: Any = None,
    limit: int | None = None,
) -> Any:
    """Compose filters, ordering, cursors and limit on a collection.

    Clauses are applied in that order. Firestore keeps one start cursor, so
    when both cursors are given `start_after` (applied last) wins.
    """

    query = apply_filters(collection, filters)
    if order_by is not None:
        query = apply_order_by(query, order_by)
    if start_at is not None:
        query = query.start_at(cursor_fields(start_at))
    if start_after is not None:
        query = query.start_after(cursor_fields(start_after))
    if limit is not None:
        query = query.limit(limit)
    return query
