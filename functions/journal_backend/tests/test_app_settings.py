import unittest

from journal_backend.app_settings import SettingsService
from journal_backend.db import InMemoryDbClient
from journal_backend.errors import ValidationError
from journal_backend.schemas import AppSettings, parse_payload
from journal_shared.constants import INITIAL_JOURNAL_CATEGORIES


class SettingsServiceTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.service = SettingsService(self.db)

    def test_load_persists_defaults(self):
        settings = self.service.load()
        self.assertEqual(settings.categories, INITIAL_JOURNAL_CATEGORIES)
        stored = self.db.get_app_data("app-settings")
        self.assertEqual(stored["attendanceWindow"]["startTime"], "07:00")

    def test_load_reads_stored_document(self):
        self.db.save_app_data(
            "app-settings", {"categories": ["Pramuka"], "schoolName": "SD 3"}
        )
        settings = self.service.load()
        self.assertEqual(settings.categories, ["Pramuka"])
        self.assertEqual(settings.school_name, "SD 3")

    def test_update_persists_and_caches(self):
        updated = AppSettings(categories=["Seni"], theme="dark")

        self.service.update(updated)

        self.assertIs(self.service.get(), updated)
        self.assertEqual(self.db.get_app_data("app-settings")["theme"], "dark")
        self.assertEqual(SettingsService(self.db).categories(), ["Seni"])

    def test_reload_picks_up_external_changes(self):
        self.service.load()
        self.db.save_app_data("app-settings", {"categories": ["Baru"]})
        self.assertEqual(self.service.categories(), INITIAL_JOURNAL_CATEGORIES)
        self.assertEqual(self.service.reload().categories, ["Baru"])

    def test_invalid_stored_settings(self):
        self.db.save_app_data(
            "app-settings",
            {"attendanceWindow": {"startTime": "10:00", "endTime": "08:00"}},
        )
        with self.assertRaises(ValidationError):
            self.service.load()

    def test_categories_are_an_ordered_set(self):
        settings = parse_payload(AppSettings, {"categories": ["B", "A", " B ", "  "]})
        self.assertEqual(settings.categories, ["B", "A"])


if __name__ == "__main__":
    unittest.main()
