"""
Journal entries: listing (with lazy seeding), student submissions and
edits, teacher reviews, replacement and deletion.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from journal_backend.db import DbClient
from journal_backend.errors import NotFoundError, ValidationError
from journal_backend.schemas import (
    JournalEntry,
    JournalEntryCreate,
    JournalReview,
    JournalRevision,
    parse_payload,
)
from journal_backend.seeding import seed_journals_if_empty
from journal_shared.types import JournalStatus

logger = logging.getLogger(__name__)


def local_now(timezone_name: str) -> datetime:
    return datetime.now(ZoneInfo(timezone_name))


def parse_journal(record: Any) -> JournalEntry:
    return parse_payload(JournalEntry, record)


def _store_form(entry: JournalEntry) -> dict:
    return entry.model_dump(by_alias=True, mode="json")


def list_journals(
    db: DbClient,
    *,
    student_id: Optional[str] = None,
    status: Optional[JournalStatus] = None,
    date: Optional[str] = None,
) -> list[JournalEntry]:
    """All entries, newest first, optionally narrowed by student, status or day."""
    seed_journals_if_empty(db)
    entries = [parse_journal(record) for record in db.list_journals()]
    if student_id:
        entries = [e for e in entries if e.student_id == student_id]
    if status:
        entries = [e for e in entries if e.status == status]
    if date:
        entries = [e for e in entries if e.date == date]
    return entries


def get_journal(db: DbClient, journal_id: str) -> JournalEntry:
    record = db.get_journal(journal_id)
    if record is None:
        raise NotFoundError("Journal not found")
    return parse_journal(record)


def create_journal(
    db: DbClient, payload: JournalEntryCreate, now: datetime
) -> JournalEntry:
    """
    Persist a new entry. Date, submission time and status always come from
    the server, whatever the client sent.
    """
    entry = JournalEntry(
        student_id=payload.student_id,
        date=now.date().isoformat(),
        submission_time=now.strftime("%H:%M:%S"),
        category=payload.category,
        activity=payload.activity,
        attendance=payload.attendance,
        behavior_note=payload.behavior_note,
        mood=payload.mood,
        reflection=payload.reflection,
        status=JournalStatus.PENDING,
    )
    created = db.insert_journal(_store_form(entry))
    logger.info("Created journal %s for %s", created["id"], entry.student_id)
    return parse_journal(created)


def replace_journal(
    db: DbClient, entry: JournalEntry, path_id: Optional[str] = None
) -> JournalEntry:
    if path_id and entry.id and entry.id != path_id:
        raise ValidationError(
            "Bad request: journal ID in body does not match the URL."
        )
    journal_id = path_id or entry.id
    if not journal_id:
        raise ValidationError("Bad request: Missing journal ID.")
    entry = entry.model_copy(update={"id": journal_id})
    replaced = db.replace_journal(journal_id, _store_form(entry))
    if replaced is None:
        raise NotFoundError("Journal not found")
    return parse_journal(replaced)


def revise_journal(
    db: DbClient, journal_id: str, revision: JournalRevision
) -> JournalEntry:
    """Apply a student's content edit; the entry goes back to Pending."""
    entry = get_journal(db, journal_id)
    changes = revision.model_dump(exclude_none=True)
    changes["status"] = JournalStatus.PENDING
    entry = entry.model_copy(update=changes)
    replaced = db.replace_journal(journal_id, _store_form(entry))
    if replaced is None:
        raise NotFoundError("Journal not found")
    logger.info("Journal %s revised, status reset to Pending", journal_id)
    return parse_journal(replaced)


def review_journal(
    db: DbClient, journal_id: str, review: JournalReview
) -> JournalEntry:
    """Record a teacher's verdict. Only status and comment change."""
    entry = get_journal(db, journal_id)
    changes: dict[str, Any] = {"status": JournalStatus(review.status)}
    if review.teacher_comment is not None:
        changes["teacher_comment"] = review.teacher_comment
    entry = entry.model_copy(update=changes)
    replaced = db.replace_journal(journal_id, _store_form(entry))
    if replaced is None:
        raise NotFoundError("Journal not found")
    logger.info("Journal %s reviewed: %s", journal_id, review.status)
    return parse_journal(replaced)


def delete_journal(db: DbClient, journal_id: str) -> None:
    if not db.delete_journal(journal_id):
        raise NotFoundError("Journal not found")
    logger.info("Deleted journal %s", journal_id)
