"""
Daily attendance check-in, accepted only inside the configured window.
"""

from __future__ import annotations

import logging
from datetime import datetime

from journal_backend import journals
from journal_backend.db import DbClient
from journal_backend.errors import NotFoundError, ValidationError
from journal_backend.schemas import (
    AppSettings,
    AttendanceRequest,
    AttendanceStatusResponse,
    AttendanceWindow,
    JournalEntry,
    JournalEntryCreate,
    StudentUser,
)
from journal_backend.users import get_user
from journal_shared.constants import (
    FALLBACK_CATEGORY,
    PRESENT_ACTIVITY,
    PRESENT_REFLECTION,
)
from journal_shared.types import Attendance, Mood

logger = logging.getLogger(__name__)


def is_window_open(window: AttendanceWindow, now: datetime) -> bool:
    """Inclusive at both ends, compared at minute resolution."""
    current = now.strftime("%H:%M")
    return window.start_time <= current <= window.end_time


def attendance_status(settings: AppSettings, now: datetime) -> AttendanceStatusResponse:
    window = settings.attendance_window
    return AttendanceStatusResponse(
        open=is_window_open(window, now),
        start_time=window.start_time,
        end_time=window.end_time,
        now=now.strftime("%H:%M"),
    )


def record_attendance(
    db: DbClient, settings: AppSettings, request: AttendanceRequest, now: datetime
) -> JournalEntry:
    window = settings.attendance_window
    if not is_window_open(window, now):
        raise ValidationError(
            f"Attendance is only open from {window.start_time} to {window.end_time}."
        )
    try:
        student = get_user(db, request.student_id)
    except NotFoundError:
        raise NotFoundError("Student not found") from None
    if not isinstance(student, StudentUser):
        raise ValidationError("Bad request: attendance can only be recorded for students.")

    category = settings.categories[0] if settings.categories else FALLBACK_CATEGORY
    if request.attendance == Attendance.PRESENT:
        entry = JournalEntryCreate(
            student_id=student.id,
            category=category,
            activity=PRESENT_ACTIVITY,
            attendance=Attendance.PRESENT,
            mood=Mood.HAPPY,
            reflection=PRESENT_REFLECTION,
        )
    elif request.attendance in (Attendance.EXCUSED, Attendance.SICK):
        reason = (request.reason or "").strip()
        if not reason:
            raise ValidationError(
                f"Bad request: a reason is required for {request.attendance}."
            )
        entry = JournalEntryCreate(
            student_id=student.id,
            category=category,
            activity=reason,
            attendance=request.attendance,
            mood=Mood.NEUTRAL,
        )
    else:
        raise ValidationError(
            f"Bad request: students cannot record {request.attendance} themselves."
        )
    logger.info("Attendance %s recorded for %s", request.attendance, student.id)
    return journals.create_journal(db, entry, now)
