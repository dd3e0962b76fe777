"""
Global application settings (journal categories, attendance window, school
name, theme) persisted as a single document in the store.
"""

from __future__ import annotations

import logging
from typing import Optional

from journal_backend.db import DbClient
from journal_backend.schemas import AppSettings, dump, parse_payload
from journal_shared.firebase_constants import APP_SETTINGS_DOC

logger = logging.getLogger(__name__)


def default_app_settings() -> AppSettings:
    return AppSettings()


class SettingsService:
    """
    Owns the settings document: loads it once (writing defaults on first
    access) and persists every change before caching it.
    """

    def __init__(self, db: DbClient):
        self.db = db
        self._current: Optional[AppSettings] = None

    def load(self) -> AppSettings:
        stored = self.db.get_app_data(APP_SETTINGS_DOC)
        if stored is None:
            settings = default_app_settings()
            self.db.save_app_data(APP_SETTINGS_DOC, dump(settings))
            logger.info("No stored settings found, saved defaults")
        else:
            settings = parse_payload(AppSettings, stored)
        self._current = settings
        return settings

    def get(self) -> AppSettings:
        if self._current is None:
            return self.load()
        return self._current

    def reload(self) -> AppSettings:
        self._current = None
        return self.load()

    def update(self, settings: AppSettings) -> AppSettings:
        self.db.save_app_data(APP_SETTINGS_DOC, dump(settings))
        self._current = settings
        logger.info(
            "Settings updated: %d categories, attendance %s-%s",
            len(settings.categories),
            settings.attendance_window.start_time,
            settings.attendance_window.end_time,
        )
        return settings

    def categories(self) -> list[str]:
        return list(self.get().categories)
