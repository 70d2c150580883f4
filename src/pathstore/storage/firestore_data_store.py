from __future__ import annotations

import logging
from typing import Any, Mapping

from pathstore.errors import DocumentRequiredError, InvalidQueryError
from pathstore.options import AddDataOptions, GetDataOptions
from pathstore.storage.firestore_paths import resolve_path
from pathstore.storage.firestore_query import build_query
from pathstore.storage.firestore_write import (
    IdPolicy,
    apply_write,
    inject_id,
    plan_write,
)


LOGGER = logging.getLogger(__name__)


class FirestoreDataStore:
    """Path-addressed reads and writes over one Firestore async client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def add_data(
        self,
        options: AddDataOptions | Mapping[str, Any],
        id_policy: IdPolicy = True,
    ) -> Any:
        """Write `options.value` at `options.path` and return the value.

        A collection path gets a new auto-id document. With `id_policy` the
        document id is copied into the value (`id` for True, or the given
        field name) unless the value already carries one.
        """

        options = AddDataOptions.model_validate(options)
        resolved = resolve_path(self._client, options.path)
        if not resolved.addresses_document and (options.delete or options.update):
            raise DocumentRequiredError(
                f"Document id must be provided to delete or update: {options.path}"
            )
        operation = plan_write(options)

        document_ref = resolved.document if resolved.addresses_document else resolved.collection.document()
        inject_id(options.value, document_ref.id, id_policy)

        LOGGER.debug(
            "add_data: path=%s document_id=%s operation=%s",
            options.path,
            document_ref.id,
            type(operation).__name__,
        )
        try:
            await apply_write(document_ref, operation)
        except Exception:
            LOGGER.exception(
                "add_data failed: path=%s document_id=%s operation=%s",
                options.path,
                document_ref.id,
                type(operation).__name__,
            )
            raise
        return options.value

    async def get_data(self, options: GetDataOptions | Mapping[str, Any]) -> list[dict[str, Any]]:
        """Return document payloads for a document path or a collection query.

        A missing document yields an empty list. On a document path the
        ordering, cursors and limit are ignored; only a point read is made.
        """

        options = GetDataOptions.model_validate(options)
        resolved = resolve_path(self._client, options.path)

        if resolved.addresses_document and options.filters:
            raise InvalidQueryError(f"Filters can not run on a document path: {options.path}")

        LOGGER.debug("get_data: %s", options)
        try:
            if resolved.addresses_document:
                snapshot = await resolved.document.get()
                if not snapshot.exists:
                    return []
                return [snapshot.to_dict() or {}]

            query = resolved.collection
            if options.has_query_clauses():
                query = build_query(
                    resolved.collection,
                    options.filters,
                    order_by=options.order_by,
                    start_at=options.start_at,
                    start_after=options.start_after,
                    limit=options.limit,
                )
            snapshots = await query.get()
        except Exception:
            LOGGER.exception("get_data failed: path=%s", options.path)
            raise
        return [snapshot.to_dict() or {} for snapshot in snapshots]
