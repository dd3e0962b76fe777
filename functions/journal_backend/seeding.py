"""
Seeding of the built-in demo dataset and full application reset.

Every seed target is guarded by a marker record claimed with an atomic
insert-if-absent, so concurrent cold starts seed a target at most once.
A marker outlives the data it guarded; only a reset clears markers.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from journal_backend.app_settings import SettingsService, default_app_settings
from journal_backend.db import DbClient
from journal_backend.schemas import dump
from journal_shared.constants import INITIAL_JOURNAL_ENTRIES, USERS
from journal_shared.firebase_constants import (
    APP_SETTINGS_DOC,
    SEED_TARGET_CATEGORIES,
    SEED_TARGET_JOURNALS,
    SEED_TARGET_USERS,
)

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    users: bool = False
    journals: bool = False
    categories: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


def _seed_guarded(
    db: DbClient,
    target: str,
    is_empty: Callable[[], bool],
    insert: Callable[[], None],
) -> bool:
    if not is_empty():
        logger.debug("%s is not empty, skipping seeding", target)
        return False
    if not db.claim_seed_marker(target):
        logger.info("%s was already seeded by another request", target)
        return False
    try:
        insert()
    except Exception:
        # Give the next request a chance to seed.
        db.release_seed_marker(target)
        raise
    logger.info("Seeded %s", target)
    return True


def seed_users_if_empty(db: DbClient) -> bool:
    return _seed_guarded(
        db,
        SEED_TARGET_USERS,
        lambda: db.count_users() == 0,
        lambda: db.insert_users(copy.deepcopy(USERS)),
    )


def seed_journals_if_empty(db: DbClient) -> bool:
    return _seed_guarded(
        db,
        SEED_TARGET_JOURNALS,
        lambda: db.count_journals() == 0,
        lambda: db.insert_journals(copy.deepcopy(INITIAL_JOURNAL_ENTRIES)),
    )


def seed_categories_if_missing(db: DbClient) -> bool:
    return _seed_guarded(
        db,
        SEED_TARGET_CATEGORIES,
        lambda: db.get_app_data(APP_SETTINGS_DOC) is None,
        lambda: db.save_app_data(APP_SETTINGS_DOC, dump(default_app_settings())),
    )


def seed_all(db: DbClient) -> SeedResult:
    """
    Seed every empty target. Targets are seeded independently; a failure
    part way leaves the earlier targets seeded.
    """
    return SeedResult(
        users=seed_users_if_empty(db),
        journals=seed_journals_if_empty(db),
        categories=seed_categories_if_missing(db),
    )


def reset_application_data(
    db: DbClient, settings_service: Optional[SettingsService] = None
) -> SeedResult:
    """Wipe users, journals and settings unconditionally, then reseed."""
    logger.warning("Resetting application data")
    journals_deleted = db.delete_all_journals()
    users_deleted = db.delete_all_users()
    db.delete_app_data(APP_SETTINGS_DOC)
    db.clear_seed_markers()
    logger.info(
        "Cleared %d journals and %d users", journals_deleted, users_deleted
    )
    result = seed_all(db)
    if settings_service is not None:
        settings_service.reload()
    return result
