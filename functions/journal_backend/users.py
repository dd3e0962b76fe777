"""
User management: listing (with lazy seeding), creation, replacement,
deletion and bulk import.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from journal_backend.db import DbClient
from journal_backend.errors import JournalApiError, NotFoundError, ValidationError
from journal_backend.schemas import (
    USER_ADAPTER,
    AdminUser,
    ImportRowError,
    ParentUser,
    StudentUser,
    TeacherUser,
    User,
    parse_payload,
)
from journal_backend.seeding import seed_users_if_empty
from journal_shared.constants import AVATAR_URL_TEMPLATE, MAX_IMPORT_ROWS

logger = logging.getLogger(__name__)

_ID_PREFIXES = {
    StudentUser: "student",
    TeacherUser: "teacher",
    ParentUser: "parent",
    AdminUser: "admin",
}


def parse_user(record: Any) -> User:
    return parse_payload(USER_ADAPTER, record)


def generate_user_id(user: User) -> str:
    return f"{_ID_PREFIXES[type(user)]}-{uuid.uuid4().hex[:12]}"


def _ensure_natural_key_free(db: DbClient, user: User, user_id: str) -> None:
    holder = db.find_user_by_field(user.natural_key_field, user.natural_key)
    if holder and holder.get("id") != user_id:
        raise ValidationError(
            f"{user.natural_key_field} {user.natural_key} is already in use."
        )


def list_users(db: DbClient) -> list[User]:
    seed_users_if_empty(db)
    return [parse_user(record) for record in db.list_users()]


def get_user(db: DbClient, user_id: str) -> User:
    record = db.get_user(user_id)
    if record is None:
        raise NotFoundError("User not found")
    return parse_user(record)


def create_user(db: DbClient, user: User) -> User:
    if not user.password:
        raise ValidationError("Bad request: password is required.")
    user_id = user.id or generate_user_id(user)
    if db.get_user(user_id) is not None:
        raise ValidationError(f"User with id {user_id} already exists.")
    _ensure_natural_key_free(db, user, user_id)
    user = user.model_copy(
        update={
            "id": user_id,
            "avatar": user.avatar or AVATAR_URL_TEMPLATE.format(seed=user_id),
        }
    )
    created = db.insert_user(user.to_document())
    logger.info("Created user %s (%s)", user_id, user.role)
    return parse_user(created)


def update_user(db: DbClient, user: User, path_id: Optional[str] = None) -> User:
    """
    Replace every field of an existing user. The path id wins over the body
    id; the two must agree when both are given.
    """
    if path_id and user.id and user.id != path_id:
        raise ValidationError("Bad request: user ID in body does not match the URL.")
    user_id = path_id or user.id
    if not user_id:
        raise ValidationError("Bad request: Missing user ID.")
    existing = db.get_user(user_id)
    if existing is None:
        raise NotFoundError("User not found")
    _ensure_natural_key_free(db, user, user_id)
    update: dict[str, Any] = {
        "id": user_id,
        "avatar": user.avatar or AVATAR_URL_TEMPLATE.format(seed=user_id),
    }
    if user.password is None:
        # Clients never see the stored password, so absent means unchanged.
        update["password"] = existing.get("password")
    user = user.model_copy(update=update)
    replaced = db.replace_user(user_id, user.to_document())
    if replaced is None:
        raise NotFoundError("User not found")
    logger.info("Updated user %s", user_id)
    return parse_user(replaced)


def delete_user(db: DbClient, user_id: str) -> None:
    # Journals written by the user are left in place.
    if not db.delete_user(user_id):
        raise NotFoundError("User not found")
    logger.info("Deleted user %s", user_id)


@dataclass
class ImportResult:
    users: list[User] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.users)

    @property
    def failed(self) -> int:
        return len(self.errors)


def import_users(db: DbClient, rows: list[Any]) -> ImportResult:
    """
    Create users one by one, continuing past rows that fail so the caller
    gets a success and failure count rather than an all-or-nothing result.
    """
    if len(rows) > MAX_IMPORT_ROWS:
        raise ValidationError(
            f"Bad request: at most {MAX_IMPORT_ROWS} users can be imported at once."
        )
    result = ImportResult()
    for index, row in enumerate(rows):
        try:
            result.users.append(create_user(db, parse_user(row)))
        except JournalApiError as exc:
            logger.warning("Failed to import user row %d: %s", index, exc.message)
            result.errors.append(ImportRowError(index=index, message=exc.message))
    logger.info("Imported %d of %d users", result.imported, len(rows))
    return result
