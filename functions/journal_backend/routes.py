"""
HTTP routes for the journal backend API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Callable, Optional, Union

from fastapi import APIRouter, Body, Depends, Query

from journal_backend import attendance, auth, journals, seeding, users
from journal_backend.app_settings import SettingsService
from journal_backend.db import DbClient
from journal_backend.dependencies import get_clock, get_db_client, get_settings_service
from journal_backend.errors import ValidationError
from journal_backend.schemas import (
    AdminUser,
    AppSettings,
    AttendanceRequest,
    AttendanceStatusResponse,
    BackupResponse,
    ImportUsersResponse,
    JournalEntry,
    JournalEntryCreate,
    JournalReview,
    JournalRevision,
    LoginRequest,
    MessageResponse,
    ParentUser,
    SeedResponse,
    StudentUser,
    TeacherUser,
    User,
)
from journal_shared.types import JournalStatus

router = APIRouter()

RESET_ACTION = "reset_application_data"

UserBody = Annotated[
    Union[StudentUser, TeacherUser, ParentUser, AdminUser],
    Body(discriminator="role"),
]
Clock = Callable[[], datetime]


# Auth


@router.post("/login", response_model=User)
def login(payload: LoginRequest, db: DbClient = Depends(get_db_client)):
    return auth.login(db, payload)


# Users


@router.get("/users", response_model=list[User])
def list_users(db: DbClient = Depends(get_db_client)):
    """
    All users ordered by name. Seeds the built-in users on first read of an
    empty store.
    """
    return users.list_users(db)


@router.post("/users", response_model=User, status_code=201)
def create_user(user: UserBody, db: DbClient = Depends(get_db_client)):
    return users.create_user(db, user)


@router.post("/users/import", response_model=ImportUsersResponse)
def import_users(
    rows: list[dict[str, Any]] = Body(...),
    db: DbClient = Depends(get_db_client),
):
    result = users.import_users(db, rows)
    return ImportUsersResponse(
        imported=result.imported,
        failed=result.failed,
        errors=result.errors,
        users=result.users,
    )


@router.put("/users", response_model=User)
def update_user(user: UserBody, db: DbClient = Depends(get_db_client)):
    return users.update_user(db, user)


@router.put("/users/{user_id}", response_model=User)
def update_user_by_path(
    user_id: str, user: UserBody, db: DbClient = Depends(get_db_client)
):
    return users.update_user(db, user, path_id=user_id)


@router.delete("/users", response_model=MessageResponse)
def delete_users(
    id: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    db: DbClient = Depends(get_db_client),
    settings_service: SettingsService = Depends(get_settings_service),
):
    """
    Delete one user by ``id``, or wipe and reseed everything with
    ``action=reset_application_data``.
    """
    if action == RESET_ACTION:
        seeding.reset_application_data(db, settings_service)
        return MessageResponse(message="Application data has been reset successfully.")
    if action:
        raise ValidationError(f"Bad request: unknown action {action}.")
    if not id:
        raise ValidationError("Bad request: Missing or invalid id.")
    users.delete_user(db, id)
    return MessageResponse(message="User deleted successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: str, db: DbClient = Depends(get_db_client)):
    users.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


# Journals


@router.get("/journals", response_model=list[JournalEntry])
def list_journals(
    student_id: Optional[str] = Query(None, alias="studentId"),
    status: Optional[JournalStatus] = Query(None),
    date: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    db: DbClient = Depends(get_db_client),
):
    return journals.list_journals(db, student_id=student_id, status=status, date=date)


@router.post("/journals", response_model=JournalEntry, status_code=201)
def create_journal(
    payload: JournalEntryCreate,
    db: DbClient = Depends(get_db_client),
    clock: Clock = Depends(get_clock),
):
    return journals.create_journal(db, payload, clock())


@router.put("/journals", response_model=JournalEntry)
def replace_journal(entry: JournalEntry, db: DbClient = Depends(get_db_client)):
    return journals.replace_journal(db, entry)


@router.put("/journals/{journal_id}", response_model=JournalEntry)
def replace_journal_by_path(
    journal_id: str, entry: JournalEntry, db: DbClient = Depends(get_db_client)
):
    return journals.replace_journal(db, entry, path_id=journal_id)


@router.patch("/journals/{journal_id}", response_model=JournalEntry)
def revise_journal(
    journal_id: str,
    revision: JournalRevision,
    db: DbClient = Depends(get_db_client),
):
    return journals.revise_journal(db, journal_id, revision)


@router.post("/journals/{journal_id}/review", response_model=JournalEntry)
def review_journal(
    journal_id: str,
    review: JournalReview,
    db: DbClient = Depends(get_db_client),
):
    return journals.review_journal(db, journal_id, review)


@router.delete("/journals", response_model=MessageResponse)
def delete_journal_by_query(
    id: Optional[str] = Query(None), db: DbClient = Depends(get_db_client)
):
    if not id:
        raise ValidationError("Bad request: Missing or invalid id.")
    journals.delete_journal(db, id)
    return MessageResponse(message="Journal deleted successfully")


@router.delete("/journals/{journal_id}", response_model=MessageResponse)
def delete_journal(journal_id: str, db: DbClient = Depends(get_db_client)):
    journals.delete_journal(db, journal_id)
    return MessageResponse(message="Journal deleted successfully")


# Settings, seeding and maintenance


@router.get("/journal-categories", response_model=list[str])
def journal_categories(
    settings_service: SettingsService = Depends(get_settings_service),
):
    return settings_service.categories()


@router.get("/settings", response_model=AppSettings)
def get_app_settings(
    settings_service: SettingsService = Depends(get_settings_service),
):
    return settings_service.get()


@router.put("/settings", response_model=AppSettings)
def update_app_settings(
    payload: AppSettings,
    settings_service: SettingsService = Depends(get_settings_service),
):
    return settings_service.update(payload)


@router.post("/seed-data", response_model=SeedResponse)
def seed_data(
    db: DbClient = Depends(get_db_client),
    settings_service: SettingsService = Depends(get_settings_service),
):
    result = seeding.seed_all(db)
    if result.categories:
        settings_service.reload()
    return SeedResponse(
        message="Data seeding process completed.", seeded=result.as_dict()
    )


@router.get("/attendance/status", response_model=AttendanceStatusResponse)
def attendance_status(
    settings_service: SettingsService = Depends(get_settings_service),
    clock: Clock = Depends(get_clock),
):
    return attendance.attendance_status(settings_service.get(), clock())


@router.post("/attendance", response_model=JournalEntry, status_code=201)
def record_attendance(
    payload: AttendanceRequest,
    db: DbClient = Depends(get_db_client),
    settings_service: SettingsService = Depends(get_settings_service),
    clock: Clock = Depends(get_clock),
):
    return attendance.record_attendance(db, settings_service.get(), payload, clock())


@router.get("/backup", response_model=BackupResponse)
def backup(
    db: DbClient = Depends(get_db_client),
    settings_service: SettingsService = Depends(get_settings_service),
):
    return BackupResponse(
        users=users.list_users(db),
        journals=journals.list_journals(db),
        settings=settings_service.get(),
    )
