"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from journal_backend.app_settings import SettingsService
from journal_backend.config import get_settings
from journal_backend.db import DbClient, InMemoryDbClient, PostgresDbClient
from journal_backend.firestore_db import FirestoreDbClient
from journal_backend.journals import local_now

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_settings_service: SettingsService | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so in-memory state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    backend = settings.resolved_store_backend()
    if backend == "firestore":
        _db_client = FirestoreDbClient.from_default_app(settings.firestore_project)
    elif backend == "sql":
        if not settings.database_url:
            raise RuntimeError("STORE_BACKEND=sql requires DATABASE_URL")
        _db_client = PostgresDbClient(settings.database_url)
    else:
        _db_client = InMemoryDbClient()
    logger.info("Using %s store", backend)
    return _db_client


def get_settings_service() -> SettingsService:
    """
    Return the process-wide settings service bound to the DB client.
    """
    global _settings_service
    if _settings_service:
        return _settings_service
    _settings_service = SettingsService(get_db_client())
    return _settings_service


def get_clock() -> Callable[[], datetime]:
    timezone_name = get_settings().timezone
    return lambda: local_now(timezone_name)
