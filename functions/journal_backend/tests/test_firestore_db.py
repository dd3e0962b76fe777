import unittest
from unittest.mock import MagicMock

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from journal_backend.errors import StoreError
from journal_backend.firestore_db import FirestoreDbClient


def make_snapshot(doc_id, data, exists=True):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = data
    return snapshot


class FirestoreDbClientTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.collection = self.client.collection.return_value
        self.db = FirestoreDbClient(self.client)

    def test_count_uses_aggregation_query(self):
        aggregate = MagicMock()
        aggregate.value = 7
        self.collection.count.return_value.get.return_value = [[aggregate]]

        self.assertEqual(self.db.count_users(), 7)
        self.client.collection.assert_called_with("users")

    def test_get_missing_user(self):
        self.collection.document.return_value.get.return_value = make_snapshot(
            "ghost", None, exists=False
        )
        self.assertIsNone(self.db.get_user("ghost"))

    def test_get_user_adds_document_id(self):
        self.collection.document.return_value.get.return_value = make_snapshot(
            "student-1", {"name": "Budi", "role": "Siswa"}
        )
        self.assertEqual(
            self.db.get_user("student-1"),
            {"name": "Budi", "role": "Siswa", "id": "student-1"},
        )
        self.collection.document.assert_called_with("student-1")

    def test_insert_journal_without_id_uses_auto_id(self):
        doc_ref = MagicMock()
        doc_ref.id = "auto-1"
        self.collection.document.return_value = doc_ref

        created = self.db.insert_journal({"id": None, "studentId": "student-1"})

        self.collection.document.assert_called_once_with()
        doc_ref.create.assert_called_once_with({"studentId": "student-1"})
        self.assertEqual(created, {"studentId": "student-1", "id": "auto-1"})

    def test_insert_many_commits_in_batches(self):
        users = [{"id": f"u-{i}", "name": str(i)} for i in range(501)]
        self.db.insert_users(users)
        batch = self.client.batch.return_value
        self.assertEqual(batch.set.call_count, 501)
        self.assertEqual(batch.commit.call_count, 2)

    def test_find_user_by_field(self):
        query = self.collection.where.return_value.limit.return_value
        query.stream.return_value = [make_snapshot("admin-1", {"nip": "ADMIN001"})]

        found = self.db.find_user_by_field("nip", "ADMIN001")

        self.assertEqual(found, {"nip": "ADMIN001", "id": "admin-1"})
        self.collection.where.return_value.limit.assert_called_once_with(1)

    def test_list_journals_sorted_newest_first(self):
        self.collection.stream.return_value = [
            make_snapshot("a", {"date": "2024-07-28", "submissionTime": "08:00:00"}),
            make_snapshot("b", {"date": "2024-07-29", "submissionTime": "07:00:00"}),
            make_snapshot("c", {"date": "2024-07-29", "submissionTime": "09:00:00"}),
        ]
        ids = [j["id"] for j in self.db.list_journals()]
        self.assertEqual(ids, ["c", "b", "a"])

    def test_replace_missing_journal(self):
        self.collection.document.return_value.get.return_value = make_snapshot(
            "gone", None, exists=False
        )
        self.assertIsNone(self.db.replace_journal("gone", {"id": "gone"}))
        self.collection.document.return_value.set.assert_not_called()

    def test_delete_all_loops_until_empty(self):
        docs = [make_snapshot(f"d-{i}", {}) for i in range(3)]
        self.collection.limit.return_value.stream.side_effect = [docs, []]

        self.assertEqual(self.db.delete_all_journals(), 3)
        batch = self.client.batch.return_value
        self.assertEqual(batch.delete.call_count, 3)

    def test_claim_seed_marker(self):
        doc_ref = self.collection.document.return_value
        self.assertTrue(self.db.claim_seed_marker("users"))
        doc_ref.create.assert_called_once_with({"createdAt": SERVER_TIMESTAMP})
        self.client.collection.assert_called_with("seed-markers")

        doc_ref.create.side_effect = google_exceptions.AlreadyExists("exists")
        self.assertFalse(self.db.claim_seed_marker("users"))

    def test_api_errors_become_store_errors(self):
        self.collection.stream.side_effect = google_exceptions.ServiceUnavailable(
            "down"
        )
        with self.assertRaises(StoreError) as ctx:
            self.db.list_users()
        self.assertEqual(ctx.exception.message, "Failed to get users.")


if __name__ == "__main__":
    unittest.main()
