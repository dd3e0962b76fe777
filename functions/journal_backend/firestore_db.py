"""
Firestore-backed implementation of the DbClient interface.

Document ids are the record ids; the ``id`` key is stripped before writes
and added back on reads.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

import firebase_admin
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from journal_backend.db import sort_journals, sort_users, without_id
from journal_backend.errors import StoreError
from journal_shared.firebase_constants import (
    APP_DATA_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    JOURNALS_COLLECTION,
    SEED_MARKERS_COLLECTION,
    USERS_COLLECTION,
)

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except google_exceptions.GoogleAPICallError as exc:
        logger.exception("Firestore call failed: %s", action)
        raise StoreError(f"Failed to {action}.") from exc


class FirestoreDbClient:
    def __init__(self, client):
        self.client = client

    @classmethod
    def from_default_app(cls, project: str | None = None) -> "FirestoreDbClient":
        """Build a client on the default Firebase app, initializing it once."""
        try:
            firebase_admin.get_app()
        except ValueError:
            firebase_admin.initialize_app(
                options={"projectId": project} if project else None
            )
        return cls(firestore.client())

    def _collection(self, name: str):
        return self.client.collection(name)

    @staticmethod
    def _to_record(snapshot) -> dict:
        return {**(snapshot.to_dict() or {}), "id": snapshot.id}

    def _count(self, name: str) -> int:
        result = self._collection(name).count().get()
        return int(result[0][0].value)

    def _get(self, name: str, doc_id: str) -> Optional[dict]:
        snapshot = self._collection(name).document(doc_id).get()
        return self._to_record(snapshot) if snapshot.exists else None

    def _insert(self, name: str, record: dict) -> dict:
        collection = self._collection(name)
        doc_ref = (
            collection.document(record["id"])
            if record.get("id")
            else collection.document()
        )
        data = without_id(record)
        doc_ref.create(data)
        return {**data, "id": doc_ref.id}

    def _insert_many(self, name: str, records: Iterable[dict]) -> None:
        collection = self._collection(name)
        batch = self.client.batch()
        pending = 0
        for record in records:
            doc_ref = (
                collection.document(record["id"])
                if record.get("id")
                else collection.document()
            )
            batch.set(doc_ref, without_id(record))
            pending += 1
            if pending == FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = self.client.batch()
                pending = 0
        if pending:
            batch.commit()

    def _replace(self, name: str, doc_id: str, record: dict) -> Optional[dict]:
        doc_ref = self._collection(name).document(doc_id)
        if not doc_ref.get().exists:
            return None
        data = without_id(record)
        doc_ref.set(data)
        return {**data, "id": doc_id}

    def _delete(self, name: str, doc_id: str) -> bool:
        doc_ref = self._collection(name).document(doc_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def _delete_all(self, name: str) -> int:
        deleted = 0
        while True:
            docs = list(self._collection(name).limit(FIRESTORE_BATCH_LIMIT).stream())
            if not docs:
                return deleted
            batch = self.client.batch()
            for doc in docs:
                batch.delete(doc.reference)
            batch.commit()
            deleted += len(docs)

    def count_users(self) -> int:
        with _store_errors("count users"):
            return self._count(USERS_COLLECTION)

    def list_users(self) -> list[dict]:
        with _store_errors("get users"):
            docs = self._collection(USERS_COLLECTION).stream()
            return sort_users(self._to_record(doc) for doc in docs)

    def get_user(self, user_id: str) -> Optional[dict]:
        with _store_errors("get user"):
            return self._get(USERS_COLLECTION, user_id)

    def find_user_by_field(self, field: str, value: str) -> Optional[dict]:
        with _store_errors("look up user"):
            query = (
                self._collection(USERS_COLLECTION)
                .where(filter=FieldFilter(field, "==", value))
                .limit(1)
            )
            for doc in query.stream():
                return self._to_record(doc)
            return None

    def insert_user(self, user: dict) -> dict:
        with _store_errors("create user"):
            return self._insert(USERS_COLLECTION, user)

    def insert_users(self, users: Iterable[dict]) -> None:
        with _store_errors("seed users"):
            self._insert_many(USERS_COLLECTION, users)

    def replace_user(self, user_id: str, user: dict) -> Optional[dict]:
        with _store_errors("update user"):
            return self._replace(USERS_COLLECTION, user_id, user)

    def delete_user(self, user_id: str) -> bool:
        with _store_errors("delete user"):
            return self._delete(USERS_COLLECTION, user_id)

    def delete_all_users(self) -> int:
        with _store_errors("clear users"):
            return self._delete_all(USERS_COLLECTION)

    def count_journals(self) -> int:
        with _store_errors("count journals"):
            return self._count(JOURNALS_COLLECTION)

    def list_journals(self) -> list[dict]:
        # Sorted client side; a two-field order_by needs a composite index.
        with _store_errors("get journals"):
            docs = self._collection(JOURNALS_COLLECTION).stream()
            return sort_journals(self._to_record(doc) for doc in docs)

    def get_journal(self, journal_id: str) -> Optional[dict]:
        with _store_errors("get journal"):
            return self._get(JOURNALS_COLLECTION, journal_id)

    def insert_journal(self, journal: dict) -> dict:
        with _store_errors("create journal"):
            return self._insert(JOURNALS_COLLECTION, journal)

    def insert_journals(self, journals: Iterable[dict]) -> None:
        with _store_errors("seed journals"):
            self._insert_many(JOURNALS_COLLECTION, journals)

    def replace_journal(self, journal_id: str, journal: dict) -> Optional[dict]:
        with _store_errors("update journal"):
            return self._replace(JOURNALS_COLLECTION, journal_id, journal)

    def delete_journal(self, journal_id: str) -> bool:
        with _store_errors("delete journal"):
            return self._delete(JOURNALS_COLLECTION, journal_id)

    def delete_all_journals(self) -> int:
        with _store_errors("clear journals"):
            return self._delete_all(JOURNALS_COLLECTION)

    def get_app_data(self, key: str) -> Optional[dict]:
        with _store_errors("get app data"):
            snapshot = self._collection(APP_DATA_COLLECTION).document(key).get()
            return snapshot.to_dict() if snapshot.exists else None

    def save_app_data(self, key: str, value: dict) -> None:
        with _store_errors("save app data"):
            self._collection(APP_DATA_COLLECTION).document(key).set(value)

    def delete_app_data(self, key: str) -> None:
        with _store_errors("delete app data"):
            self._collection(APP_DATA_COLLECTION).document(key).delete()

    def claim_seed_marker(self, target: str) -> bool:
        doc_ref = self._collection(SEED_MARKERS_COLLECTION).document(target)
        with _store_errors("claim seed marker"):
            try:
                doc_ref.create({"createdAt": SERVER_TIMESTAMP})
            except google_exceptions.AlreadyExists:
                return False
            return True

    def release_seed_marker(self, target: str) -> None:
        with _store_errors("release seed marker"):
            self._collection(SEED_MARKERS_COLLECTION).document(target).delete()

    def clear_seed_markers(self) -> None:
        with _store_errors("clear seed markers"):
            self._delete_all(SEED_MARKERS_COLLECTION)
