"""
Login by natural key (NIP, NISN or NIK) and plaintext password.

There is no session or token: the caller keeps the returned user as its
identity.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from journal_backend.db import DbClient
from journal_backend.errors import AuthError, ValidationError
from journal_backend.schemas import LoginRequest, User
from journal_backend.seeding import seed_users_if_empty
from journal_backend.users import parse_user
from journal_shared.types import LOGIN_IDENTIFIER_FIELDS

logger = logging.getLogger(__name__)


def _find_by_identifier(db: DbClient, identifier: str) -> Optional[dict]:
    for field in LOGIN_IDENTIFIER_FIELDS:
        record = db.find_user_by_field(field, identifier)
        if record is not None:
            return record
    return None


def _passwords_match(stored: Optional[str], supplied: str) -> bool:
    if stored is None:
        return False
    return secrets.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


def login(db: DbClient, request: LoginRequest) -> User:
    identifier = request.identifier.strip()
    if not identifier:
        raise ValidationError("Bad request: identifier is required.")
    seed_users_if_empty(db)
    record = _find_by_identifier(db, identifier)
    if record is None:
        logger.info("Login failed: unknown identifier")
        raise AuthError("User not found.")
    if not _passwords_match(record.get("password"), request.password):
        logger.info("Login failed: wrong password for user %s", record.get("id"))
        raise AuthError("Incorrect password.")
    logger.info("User %s logged in", record.get("id"))
    return parse_user(record)
