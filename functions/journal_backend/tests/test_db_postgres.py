import unittest

from journal_backend.db import PostgresDbClient
from journal_backend.errors import StoreError
from journal_shared.constants import INITIAL_JOURNAL_ENTRIES, USERS


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")

    def test_insert_and_get_user(self):
        created = self.db.insert_user(
            {"id": "student-9", "name": "Rina", "role": "Siswa", "nisn": "009"}
        )
        self.assertEqual(created["id"], "student-9")
        fetched = self.db.get_user("student-9")
        self.assertEqual(fetched["name"], "Rina")
        self.assertEqual(fetched["nisn"], "009")
        self.assertEqual(self.db.count_users(), 1)

    def test_insert_user_generates_id(self):
        created = self.db.insert_user({"name": "Tanpa Id", "role": "Admin", "nip": "X1"})
        self.assertTrue(created["id"])
        self.assertIsNotNone(self.db.get_user(created["id"]))

    def test_duplicate_user_id_raises_store_error(self):
        self.db.insert_user({"id": "admin-9", "name": "A", "role": "Admin", "nip": "A9"})
        with self.assertRaises(StoreError):
            self.db.insert_user(
                {"id": "admin-9", "name": "B", "role": "Admin", "nip": "B9"}
            )

    def test_list_users_sorted_by_name(self):
        self.db.insert_users(USERS)
        names = [user["name"] for user in self.db.list_users()]
        self.assertEqual(names, sorted(names))
        self.assertEqual(len(names), len(USERS))

    def test_find_user_by_identifier_fields(self):
        self.db.insert_users(USERS)
        self.assertEqual(self.db.find_user_by_field("nisn", "002")["id"], "student-2")
        self.assertEqual(self.db.find_user_by_field("nip", "ADMIN001")["id"], "admin-1")
        self.assertIsNone(self.db.find_user_by_field("nik", "does-not-exist"))
        with self.assertRaises(ValueError):
            self.db.find_user_by_field("email", "budi@sekolah.id")

    def test_replace_user_updates_lookup_columns(self):
        self.db.insert_users(USERS)
        replaced = self.db.replace_user(
            "student-1",
            {"id": "student-1", "name": "Budi", "role": "Siswa", "nisn": "101"},
        )
        self.assertEqual(replaced["nisn"], "101")
        self.assertIsNone(self.db.find_user_by_field("nisn", "001"))
        self.assertEqual(self.db.find_user_by_field("nisn", "101")["id"], "student-1")
        self.assertIsNone(self.db.replace_user("ghost", {"name": "x"}))

    def test_delete_user(self):
        self.db.insert_users(USERS)
        self.assertTrue(self.db.delete_user("parent-1"))
        self.assertFalse(self.db.delete_user("parent-1"))
        self.assertEqual(self.db.delete_all_users(), len(USERS) - 1)
        self.assertEqual(self.db.count_users(), 0)

    def test_journals_listed_newest_first(self):
        self.db.insert_journals(INITIAL_JOURNAL_ENTRIES)
        journals = self.db.list_journals()
        keys = [(j["date"], j["submissionTime"]) for j in journals]
        self.assertEqual(
            keys,
            [
                ("2024-07-29", "09:00:12"),
                ("2024-07-29", "08:30:00"),
                ("2024-07-28", "08:15:30"),
            ],
        )
        self.assertTrue(all(j["id"] for j in journals))

    def test_replace_and_delete_journal(self):
        created = self.db.insert_journal(dict(INITIAL_JOURNAL_ENTRIES[1]))
        updated = self.db.replace_journal(
            created["id"], {**created, "status": "Approved"}
        )
        self.assertEqual(updated["status"], "Approved")
        self.assertEqual(self.db.get_journal(created["id"])["status"], "Approved")
        self.assertTrue(self.db.delete_journal(created["id"]))
        self.assertIsNone(self.db.get_journal(created["id"]))
        self.assertIsNone(self.db.replace_journal(created["id"], created))

    def test_app_data_roundtrip(self):
        self.assertIsNone(self.db.get_app_data("app-settings"))
        self.db.save_app_data("app-settings", {"categories": ["A"]})
        self.db.save_app_data("app-settings", {"categories": ["B"]})
        self.assertEqual(self.db.get_app_data("app-settings"), {"categories": ["B"]})
        self.db.delete_app_data("app-settings")
        self.assertIsNone(self.db.get_app_data("app-settings"))

    def test_seed_marker_claimed_once(self):
        self.assertTrue(self.db.claim_seed_marker("users"))
        self.assertFalse(self.db.claim_seed_marker("users"))
        self.db.release_seed_marker("users")
        self.assertTrue(self.db.claim_seed_marker("users"))
        self.db.clear_seed_markers()
        self.assertTrue(self.db.claim_seed_marker("users"))


if __name__ == "__main__":
    unittest.main()
