from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping, Union

from google.cloud import firestore

from pathstore.options import AddDataOptions


DEFAULT_ID_FIELD = "id"

IdPolicy = Union[bool, str]


@dataclass(frozen=True)
class DeleteDocument:
    pass


@dataclass(frozen=True)
class UpdateDocument:
    fields: MutableMapping[str, Any]


@dataclass(frozen=True)
class ReplaceDocument:
    value: MutableMapping[str, Any]
    merge: bool = False
    timestamp_field: str | None = None


WriteOperation = Union[DeleteDocument, UpdateDocument, ReplaceDocument]


def plan_write(options: AddDataOptions) -> WriteOperation:
    """Delete beats update, update beats set."""

    if options.delete:
        return DeleteDocument()
    if options.update:
        return UpdateDocument(fields=_require_value(options))
    return ReplaceDocument(
        value=_require_value(options),
        merge=options.merge,
        timestamp_field=options.timestamp_field or None,
    )


def _require_value(options: AddDataOptions) -> MutableMapping[str, Any]:
    if options.value is None:
        raise ValueError(f"value is required to write {options.path}")
    return options.value


def id_field_for(policy: IdPolicy) -> str | None:
    if policy is True:
        return DEFAULT_ID_FIELD
    if policy is False or policy is None:
        return None
    field_name = str(policy).strip()
    return field_name or None


def inject_id(value: MutableMapping[str, Any] | None, document_id: str, policy: IdPolicy) -> None:
    field_name = id_field_for(policy)
    if field_name is None or value is None:
        return
    if value.get(field_name):
        return
    value[field_name] = document_id


async def apply_write(document_ref: Any, operation: WriteOperation) -> None:
    if isinstance(operation, DeleteDocument):
        await document_ref.delete()
    elif isinstance(operation, UpdateDocument):
        await document_ref.update(operation.fields)
    elif isinstance(operation, ReplaceDocument):
        if operation.timestamp_field:
            operation.value[operation.timestamp_field] = firestore.SERVER_TIMESTAMP
        await document_ref.set(operation.value, merge=operation.merge)
    else:
        raise TypeError(f"Unsupported write operation: {operation!r}")
