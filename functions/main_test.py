# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
# Standard library imports
import os
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

# Third-party library imports
from functions_framework import create_app

# Local application imports
from journal_backend.db import InMemoryDbClient
from journal_backend.errors import StoreError

MAIN_SOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "main.py")

FIXED_NOW = datetime(2024, 8, 1, 7, 30, 0, tzinfo=ZoneInfo("Asia/Jakarta"))


class MainApiTestCase(unittest.TestCase):

    @patch("firebase_admin.initialize_app")
    def setUp(self, initialize_app_mock):
        # Create a test client for the api function using functions-framework.
        self.client = create_app("api", MAIN_SOURCE).test_client()
        self.db = InMemoryDbClient()
        db_patcher = patch("main.get_db_client", return_value=self.db)
        db_patcher.start()
        self.addCleanup(db_patcher.stop)
        now_patcher = patch("main._now", return_value=FIXED_NOW)
        now_patcher.start()
        self.addCleanup(now_patcher.stop)


class TestMainUsers(MainApiTestCase):

    def test_list_users_seeds_and_strips_passwords(self):
        # Act
        response = self.client.get("/users")

        # Assert
        self.assertEqual(response.status_code, 200, response.get_data(as_text=True))
        users = response.get_json()
        self.assertEqual(len(users), 12)
        self.assertTrue(all("password" not in user for user in users))
        names = [user["name"] for user in users]
        self.assertEqual(names, sorted(names))

    def test_api_prefix_is_accepted(self):
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 200)

    def test_create_user_assigns_id(self):
        # Arrange
        payload = {
            "name": "Dewi Anggraini",
            "role": "Siswa",
            "nisn": "010",
            "password": "rahasia",
            "class": "Kelas 5B",
        }

        # Act
        response = self.client.post("/users", json=payload)

        # Assert
        self.assertEqual(response.status_code, 201, response.get_data(as_text=True))
        created = response.get_json()
        self.assertTrue(created["id"].startswith("student-"))
        self.assertNotIn("password", created)
        self.assertEqual(self.db.get_user(created["id"])["password"], "rahasia")

    def test_update_user_with_mismatched_ids_is_rejected(self):
        self.client.get("/users")
        payload = {"id": "student-2", "name": "Budi", "role": "Siswa", "nisn": "001"}

        response = self.client.put("/users/student-1", json=payload)

        self.assertEqual(response.status_code, 400)
        self.assertIn("message", response.get_json())

    def test_delete_user_returns_no_content(self):
        self.client.get("/users")

        response = self.client.delete("/users", query_string={"id": "student-3"})

        self.assertEqual(response.status_code, 204)
        self.assertIsNone(self.db.get_user("student-3"))

    def test_delete_unknown_user(self):
        response = self.client.delete("/users/nobody")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"message": "User not found"})

    def test_reset_application_data(self):
        self.client.get("/users")
        self.client.delete("/users/student-1")

        response = self.client.delete(
            "/users", query_string={"action": "reset_application_data"}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(),
            {"message": "Application data has been reset successfully."},
        )
        self.assertIsNotNone(self.db.get_user("student-1"))
        self.assertEqual(self.db.count_journals(), 3)


class TestMainJournals(MainApiTestCase):

    def test_create_journal_is_stamped_by_server(self):
        # Arrange
        payload = {
            "studentId": "student-1",
            "category": "Kegiatan Literasi",
            "activity": "Membaca buku.",
            "mood": "Senang",
            "status": "Approved",
            "date": "1999-01-01",
        }

        # Act
        response = self.client.post("/journals", json=payload)

        # Assert
        self.assertEqual(response.status_code, 201, response.get_data(as_text=True))
        entry = response.get_json()
        self.assertEqual(entry["status"], "Pending")
        self.assertEqual(entry["date"], "2024-08-01")
        self.assertEqual(entry["submissionTime"], "07:30:00")

    def test_review_journal(self):
        entry = self.client.post(
            "/journals",
            json={
                "studentId": "student-2",
                "category": "Kegiatan Ibadah",
                "activity": "Sholat berjamaah.",
                "mood": "Bersyukur",
            },
        ).get_json()

        response = self.client.post(
            f"/journals/{entry['id']}/review",
            json={"status": "Approved", "teacherComment": "Bagus!"},
        )

        self.assertEqual(response.status_code, 200)
        reviewed = response.get_json()
        self.assertEqual(reviewed["status"], "Approved")
        self.assertEqual(reviewed["teacherComment"], "Bagus!")
        self.assertEqual(reviewed["activity"], "Sholat berjamaah.")

    def test_method_not_allowed_lists_allowed_methods(self):
        response = self.client.patch("/journals")

        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.headers["Allow"], "GET, POST, PUT, DELETE")

    def test_unknown_route(self):
        response = self.client.get("/nothing-here")

        self.assertEqual(response.status_code, 404)


class TestMainLoginAndSettings(MainApiTestCase):

    def test_login_success(self):
        response = self.client.post(
            "/login", json={"identifier": "ADMIN001", "password": "password123"}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["id"], "admin-1")
        self.assertNotIn("password", response.get_json())

    def test_login_wrong_password(self):
        response = self.client.post(
            "/login", json={"identifier": "001", "password": "wrong"}
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"message": "Incorrect password."})

    def test_login_without_body(self):
        response = self.client.post("/login")

        self.assertEqual(response.status_code, 400)

    def test_record_attendance_inside_window(self):
        self.client.get("/users")

        response = self.client.post(
            "/attendance", json={"studentId": "student-4", "attendance": "Hadir"}
        )

        self.assertEqual(response.status_code, 201, response.get_data(as_text=True))
        entry = response.get_json()
        self.assertEqual(entry["activity"], "Mencatat kehadiran.")
        self.assertEqual(entry["category"], "Kegiatan Pembelajaran")

    def test_update_settings(self):
        payload = {
            "categories": ["Olahraga", "Seni"],
            "attendanceWindow": {"startTime": "06:30", "endTime": "08:00"},
            "schoolName": "SD Negeri 1",
            "theme": "dark",
        }

        response = self.client.put("/settings", json=payload)

        self.assertEqual(response.status_code, 200)
        categories = self.client.get("/journal-categories").get_json()
        self.assertEqual(categories, ["Olahraga", "Seni"])

    def test_store_failure_becomes_internal_error(self):
        failing_db = MagicMock()
        failing_db.count_users.side_effect = StoreError("Failed to count users.")

        with patch("main.get_db_client", return_value=failing_db):
            response = self.client.get("/users")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"message": "Failed to count users."})


if __name__ == "__main__":
    unittest.main()
