import unittest
from unittest.mock import patch

from journal_backend.db import InMemoryDbClient
from scripts import manage_data


class ManageDataTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_seed_then_status(self):
        self.assertEqual(manage_data.run("seed", self.db), 0)
        self.assertEqual(
            manage_data.store_status(self.db),
            {"users": 12, "journals": 3, "settings": True},
        )

    def test_reset_requires_confirmation(self):
        manage_data.run("seed", self.db)
        self.db.delete_all_users()
        self.assertEqual(manage_data.run("reset", self.db), 2)
        self.assertEqual(self.db.count_users(), 0)

        self.assertEqual(manage_data.run("reset", self.db, assume_yes=True), 0)
        self.assertEqual(self.db.count_users(), 12)

    @patch("scripts.manage_data.get_db_client")
    def test_main_uses_configured_store(self, mock_get_db_client):
        mock_get_db_client.return_value = self.db
        self.assertEqual(manage_data.main(["status"]), 0)
        self.assertEqual(self.db.count_users(), 0)


if __name__ == "__main__":
    unittest.main()
