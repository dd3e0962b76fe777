"""
Database abstraction for Postgres and an in-memory test implementation.

Records cross this boundary as plain dicts in their wire (camelCase) form,
always carrying an ``id`` key on the way out.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Optional, Protocol

from sqlalchemy import JSON, Column, Float, String, create_engine, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from journal_backend.errors import StoreError
from journal_shared.types import LOGIN_IDENTIFIER_FIELDS

logger = logging.getLogger(__name__)


class DbClient(Protocol):
    """Interface for database access."""

    def count_users(self) -> int:
        ...

    def list_users(self) -> list[dict]:
        ...

    def get_user(self, user_id: str) -> Optional[dict]:
        ...

    def find_user_by_field(self, field: str, value: str) -> Optional[dict]:
        ...

    def insert_user(self, user: dict) -> dict:
        ...

    def insert_users(self, users: Iterable[dict]) -> None:
        ...

    def replace_user(self, user_id: str, user: dict) -> Optional[dict]:
        ...

    def delete_user(self, user_id: str) -> bool:
        ...

    def delete_all_users(self) -> int:
        ...

    def count_journals(self) -> int:
        ...

    def list_journals(self) -> list[dict]:
        ...

    def get_journal(self, journal_id: str) -> Optional[dict]:
        ...

    def insert_journal(self, journal: dict) -> dict:
        ...

    def insert_journals(self, journals: Iterable[dict]) -> None:
        ...

    def replace_journal(self, journal_id: str, journal: dict) -> Optional[dict]:
        ...

    def delete_journal(self, journal_id: str) -> bool:
        ...

    def delete_all_journals(self) -> int:
        ...

    def get_app_data(self, key: str) -> Optional[dict]:
        ...

    def save_app_data(self, key: str, value: dict) -> None:
        ...

    def delete_app_data(self, key: str) -> None:
        ...

    def claim_seed_marker(self, target: str) -> bool:
        ...

    def release_seed_marker(self, target: str) -> None:
        ...

    def clear_seed_markers(self) -> None:
        ...


def new_record_id() -> str:
    return uuid.uuid4().hex


def sort_journals(journals: Iterable[dict]) -> list[dict]:
    """Newest first: by date, then submission time, both descending."""
    return sorted(
        journals,
        key=lambda j: (j.get("date") or "", j.get("submissionTime") or ""),
        reverse=True,
    )


def sort_users(users: Iterable[dict]) -> list[dict]:
    return sorted(users, key=lambda u: u.get("name") or "")


def without_id(record: dict) -> dict:
    return {k: v for k, v in record.items() if k != "id"}


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.journals: Dict[str, dict] = {}
        self.app_data: Dict[str, dict] = {}
        self.seed_markers: set[str] = set()
        # Sync routes run on a thread pool; marker claims must be atomic.
        self._marker_lock = threading.Lock()

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.journals.clear()
        self.app_data.clear()
        self.seed_markers.clear()

    def count_users(self) -> int:
        return len(self.users)

    def list_users(self) -> list[dict]:
        return sort_users(copy.deepcopy(u) for u in self.users.values())

    def get_user(self, user_id: str) -> Optional[dict]:
        user = self.users.get(user_id)
        return copy.deepcopy(user) if user else None

    def find_user_by_field(self, field: str, value: str) -> Optional[dict]:
        for user in self.users.values():
            if user.get(field) == value:
                return copy.deepcopy(user)
        return None

    def insert_user(self, user: dict) -> dict:
        record = copy.deepcopy(user)
        if not record.get("id"):
            record["id"] = new_record_id()
        if record["id"] in self.users:
            raise StoreError(f"Duplicate user id {record['id']}")
        self.users[record["id"]] = record
        return copy.deepcopy(record)

    def insert_users(self, users: Iterable[dict]) -> None:
        for user in users:
            self.insert_user(user)

    def replace_user(self, user_id: str, user: dict) -> Optional[dict]:
        if user_id not in self.users:
            return None
        record = {**copy.deepcopy(user), "id": user_id}
        self.users[user_id] = record
        return copy.deepcopy(record)

    def delete_user(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None

    def delete_all_users(self) -> int:
        count = len(self.users)
        self.users.clear()
        return count

    def count_journals(self) -> int:
        return len(self.journals)

    def list_journals(self) -> list[dict]:
        return sort_journals(copy.deepcopy(j) for j in self.journals.values())

    def get_journal(self, journal_id: str) -> Optional[dict]:
        journal = self.journals.get(journal_id)
        return copy.deepcopy(journal) if journal else None

    def insert_journal(self, journal: dict) -> dict:
        record = copy.deepcopy(journal)
        if not record.get("id"):
            record["id"] = new_record_id()
        if record["id"] in self.journals:
            raise StoreError(f"Duplicate journal id {record['id']}")
        self.journals[record["id"]] = record
        return copy.deepcopy(record)

    def insert_journals(self, journals: Iterable[dict]) -> None:
        for journal in journals:
            self.insert_journal(journal)

    def replace_journal(self, journal_id: str, journal: dict) -> Optional[dict]:
        if journal_id not in self.journals:
            return None
        record = {**copy.deepcopy(journal), "id": journal_id}
        self.journals[journal_id] = record
        return copy.deepcopy(record)

    def delete_journal(self, journal_id: str) -> bool:
        return self.journals.pop(journal_id, None) is not None

    def delete_all_journals(self) -> int:
        count = len(self.journals)
        self.journals.clear()
        return count

    def get_app_data(self, key: str) -> Optional[dict]:
        value = self.app_data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def save_app_data(self, key: str, value: dict) -> None:
        self.app_data[key] = copy.deepcopy(value)

    def delete_app_data(self, key: str) -> None:
        self.app_data.pop(key, None)

    def claim_seed_marker(self, target: str) -> bool:
        with self._marker_lock:
            if target in self.seed_markers:
                return False
            self.seed_markers.add(target)
            return True

    def release_seed_marker(self, target: str) -> None:
        with self._marker_lock:
            self.seed_markers.discard(target)

    def clear_seed_markers(self) -> None:
        with self._marker_lock:
            self.seed_markers.clear()


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Database call failed")
            raise StoreError(f"Database error: {exc.__class__.__name__}") from exc

    @staticmethod
    def _user_row(user_id: str, user: dict) -> "UserRow":
        return UserRow(
            id=user_id,
            name=user.get("name") or "",
            role=user.get("role") or "",
            nisn=user.get("nisn"),
            nip=user.get("nip"),
            nik=user.get("nik"),
            data=without_id(user),
        )

    @staticmethod
    def _journal_row(journal_id: str, journal: dict) -> "JournalRow":
        return JournalRow(
            id=journal_id,
            student_id=journal.get("studentId") or "",
            date=journal.get("date") or "",
            submission_time=journal.get("submissionTime") or "",
            status=journal.get("status") or "",
            data=without_id(journal),
        )

    @staticmethod
    def _to_record(row) -> dict:
        return {**(row.data or {}), "id": row.id}

    def count_users(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(UserRow)) or 0

    def list_users(self) -> list[dict]:
        with self._session() as session:
            rows = session.scalars(select(UserRow).order_by(UserRow.name.asc()))
            return [self._to_record(row) for row in rows]

    def get_user(self, user_id: str) -> Optional[dict]:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            return self._to_record(row) if row else None

    def find_user_by_field(self, field: str, value: str) -> Optional[dict]:
        if field not in LOGIN_IDENTIFIER_FIELDS:
            raise ValueError(f"Unsupported lookup field: {field}")
        column = getattr(UserRow, field)
        with self._session() as session:
            row = session.scalars(select(UserRow).where(column == value).limit(1)).first()
            return self._to_record(row) if row else None

    def insert_user(self, user: dict) -> dict:
        user_id = user.get("id") or new_record_id()
        with self._session() as session:
            row = self._user_row(user_id, user)
            session.add(row)
            session.commit()
            return self._to_record(row)

    def insert_users(self, users: Iterable[dict]) -> None:
        with self._session() as session:
            for user in users:
                session.add(self._user_row(user.get("id") or new_record_id(), user))
            session.commit()

    def replace_user(self, user_id: str, user: dict) -> Optional[dict]:
        with self._session() as session:
            row = session.get(UserRow, user_id)
            if not row:
                return None
            fresh = self._user_row(user_id, user)
            row.name = fresh.name
            row.role = fresh.role
            row.nisn = fresh.nisn
            row.nip = fresh.nip
            row.nik = fresh.nik
            row.data = fresh.data
            session.commit()
            return self._to_record(row)

    def delete_user(self, user_id: str) -> bool:
        with self._session() as session:
            result = session.execute(delete(UserRow).where(UserRow.id == user_id))
            session.commit()
            return bool(result.rowcount)

    def delete_all_users(self) -> int:
        with self._session() as session:
            result = session.execute(delete(UserRow))
            session.commit()
            return result.rowcount or 0

    def count_journals(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(JournalRow)) or 0

    def list_journals(self) -> list[dict]:
        with self._session() as session:
            rows = session.scalars(
                select(JournalRow).order_by(
                    JournalRow.date.desc(), JournalRow.submission_time.desc()
                )
            )
            return [self._to_record(row) for row in rows]

    def get_journal(self, journal_id: str) -> Optional[dict]:
        with self._session() as session:
            row = session.get(JournalRow, journal_id)
            return self._to_record(row) if row else None

    def insert_journal(self, journal: dict) -> dict:
        journal_id = journal.get("id") or new_record_id()
        with self._session() as session:
            row = self._journal_row(journal_id, journal)
            session.add(row)
            session.commit()
            return self._to_record(row)

    def insert_journals(self, journals: Iterable[dict]) -> None:
        with self._session() as session:
            for journal in journals:
                session.add(
                    self._journal_row(journal.get("id") or new_record_id(), journal)
                )
            session.commit()

    def replace_journal(self, journal_id: str, journal: dict) -> Optional[dict]:
        with self._session() as session:
            row = session.get(JournalRow, journal_id)
            if not row:
                return None
            fresh = self._journal_row(journal_id, journal)
            row.student_id = fresh.student_id
            row.date = fresh.date
            row.submission_time = fresh.submission_time
            row.status = fresh.status
            row.data = fresh.data
            session.commit()
            return self._to_record(row)

    def delete_journal(self, journal_id: str) -> bool:
        with self._session() as session:
            result = session.execute(
                delete(JournalRow).where(JournalRow.id == journal_id)
            )
            session.commit()
            return bool(result.rowcount)

    def delete_all_journals(self) -> int:
        with self._session() as session:
            result = session.execute(delete(JournalRow))
            session.commit()
            return result.rowcount or 0

    def get_app_data(self, key: str) -> Optional[dict]:
        with self._session() as session:
            row = session.get(AppDataRow, key)
            return row.value if row else None

    def save_app_data(self, key: str, value: dict) -> None:
        with self._session() as session:
            existing = session.get(AppDataRow, key)
            if existing:
                existing.value = value
            else:
                session.add(AppDataRow(key=key, value=value))
            session.commit()

    def delete_app_data(self, key: str) -> None:
        with self._session() as session:
            session.execute(delete(AppDataRow).where(AppDataRow.key == key))
            session.commit()

    def claim_seed_marker(self, target: str) -> bool:
        # The primary key makes this an atomic insert-if-absent.
        with self._session() as session:
            session.add(SeedMarkerRow(target=target, created_at=time.time()))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                return False
            return True

    def release_seed_marker(self, target: str) -> None:
        with self._session() as session:
            session.execute(delete(SeedMarkerRow).where(SeedMarkerRow.target == target))
            session.commit()

    def clear_seed_markers(self) -> None:
        with self._session() as session:
            session.execute(delete(SeedMarkerRow))
            session.commit()


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False, index=True)
    nisn = Column(String, nullable=True, index=True)
    nip = Column(String, nullable=True, index=True)
    nik = Column(String, nullable=True, index=True)
    data = Column(JSON, nullable=False)


class JournalRow(Base):
    __tablename__ = "journals"

    id = Column(String, primary_key=True)
    student_id = Column(String, nullable=False, index=True)
    date = Column(String, nullable=False, index=True)
    submission_time = Column(String, nullable=False)
    status = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False)


class AppDataRow(Base):
    __tablename__ = "app_data"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)


class SeedMarkerRow(Base):
    __tablename__ = "seed_markers"

    target = Column(String, primary_key=True)
    created_at = Column(Float, nullable=False)
