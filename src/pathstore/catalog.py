from __future__ import annotations

import asyncio
from typing import Any, Sequence

from pathstore.storage.firestore_data_store import FirestoreDataStore


COLLECTION_PRODUCTS = "products"
COLLECTION_SESSIONS = "sessions"
SUBCOLLECTION_CART = "cart"


def cart_path(session_id: str) -> str:
    return f"{COLLECTION_SESSIONS}/{session_id}/{SUBCOLLECTION_CART}"


async def _find_product(store: FirestoreDataStore, product_id: str) -> dict[str, Any] | None:
    rows = await store.get_data(
        {
            "path": COLLECTION_PRODUCTS,
            "filters": [("product_id", "==", product_id)],
        }
    )
    return rows[0] if rows else None


async def get_products(
    store: FirestoreDataStore,
    product_ids: str | Sequence[str],
) -> dict[str, Any] | None | list[dict[str, Any] | None]:
    """Fetch products by `product_id`.

    A single id returns one product (or None); a sequence of ids is fetched
    concurrently and returned in the same order.
    """

    if isinstance(product_ids, str):
        return await _find_product(store, product_ids)
    return list(await asyncio.gather(*(_find_product(store, product_id) for product_id in product_ids)))


async def find_products_by_tags(
    store: FirestoreDataStore,
    tags: Sequence[str],
    *,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    if not tags:
        return []
    return await store.get_data(
        {
            "path": COLLECTION_PRODUCTS,
            "filters": [("tags", "array_contains_any", list(tags))],
            "limit": limit,
        }
    )


async def get_cart(store: FirestoreDataStore, session_id: str) -> list[dict[str, Any]]:
    return await store.get_data({"path": cart_path(session_id)})


async def set_cart_item(
    store: FirestoreDataStore,
    session_id: str,
    product_id: str,
    quantity: int,
) -> dict[str, Any] | None:
    """Upsert one cart line keyed by product id; quantity <= 0 removes it."""

    path = f"{cart_path(session_id)}/{product_id}"
    if quantity <= 0:
        return await store.add_data({"path": path, "delete": True}, id_policy=False)
    return await store.add_data(
        {
            "path": path,
            "value": {"product_id": product_id, "quantity": quantity},
            "timestamp": "updated_at",
            "merge": True,
        },
        id_policy=False,
    )
