from __future__ import annotations

import logging
from typing import Any

import firebase_admin
from firebase_admin import firestore_async

from pathstore.settings import AppSettings, load_settings
from pathstore.storage.firestore_data_store import FirestoreDataStore


LOGGER = logging.getLogger(__name__)


def configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(level=getattr(logging, settings.log_level), format="%(message)s")


def _get_or_initialize_app(settings: AppSettings) -> Any:
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {"projectId": settings.firestore_project_id} if settings.firestore_project_id else None
        return firebase_admin.initialize_app(options=options)


def create_firestore_client(settings: AppSettings | None = None) -> Any:
    """Build the process-wide Firestore async client.

    Call once at startup and share the result; the client is never closed
    before process exit.
    """

    settings = settings or load_settings()
    app = _get_or_initialize_app(settings)
    if settings.firestore_database:
        client = firestore_async.client(app=app, database_id=settings.firestore_database)
    else:
        client = firestore_async.client(app=app)
    LOGGER.info(
        "Firestore client ready: project=%s database=%s",
        settings.firestore_project_id or "(default)",
        settings.firestore_database or "(default)",
    )
    return client


def create_data_store(settings: AppSettings | None = None) -> FirestoreDataStore:
    settings = settings or load_settings()
    return FirestoreDataStore(create_firestore_client(settings))
