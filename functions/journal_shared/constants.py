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

# Built-in demo dataset. Records are kept in their wire (camelCase) form so
# they can be written to any store without conversion.

from journal_shared.types import Attendance, JournalStatus, Mood, UserRole

DEFAULT_PASSWORD = "password123"
AVATAR_URL_TEMPLATE = "https://i.pravatar.cc/150?u={seed}"

FALLBACK_CATEGORY = "Lainnya"
PRESENT_ACTIVITY = "Mencatat kehadiran."
PRESENT_REFLECTION = "Siap untuk belajar hari ini."

DEFAULT_ATTENDANCE_START = "07:00"
DEFAULT_ATTENDANCE_END = "09:00"

MAX_TEXT_LENGTH = 4000
MAX_IMPORT_ROWS = 500

STUDENTS = [
    {
        "id": "student-1",
        "name": "Budi Santoso",
        "nisn": "001",
        "role": UserRole.STUDENT.value,
        "avatar": "https://i.pravatar.cc/150?u=student1",
        "email": "budi@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5A",
        "teacherId": "teacher-1",
        "parentId": "parent-1",
    },
    {
        "id": "student-2",
        "name": "Citra Lestari",
        "nisn": "002",
        "role": UserRole.STUDENT.value,
        "avatar": "https://i.pravatar.cc/150?u=student2",
        "email": "citra@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5A",
        "teacherId": "teacher-1",
        "parentId": "parent-2",
    },
    {
        "id": "student-3",
        "name": "Andi Pratama",
        "nisn": "003",
        "role": UserRole.STUDENT.value,
        "avatar": "https://i.pravatar.cc/150?u=student3",
        "email": "andi@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5A",
        "teacherId": "teacher-1",
        "parentId": "parent-3",
    },
    {
        "id": "student-4",
        "name": "Eka Yuliana",
        "nisn": "004",
        "role": UserRole.STUDENT.value,
        "avatar": "https://i.pravatar.cc/150?u=student4",
        "email": "eka@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5A",
        "teacherId": "teacher-1",
        "parentId": "parent-4",
    },
]

TEACHERS = [
    {
        "id": "teacher-1",
        "name": "Ibu Guru Anisa",
        "nip": "198501012010012001",
        "role": UserRole.TEACHER.value,
        "avatar": "https://i.pravatar.cc/150?u=teacher1",
        "email": "anisa@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5A",
        "subject": "Guru Kelas",
    },
    {
        "id": "teacher-2",
        "name": "Bapak Guru Budi",
        "nip": "198602022011021002",
        "role": UserRole.TEACHER.value,
        "avatar": "https://i.pravatar.cc/150?u=teacher2",
        "email": "gurubudi@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "class": "Kelas 5B",
        "subject": "Matematika",
    },
]

PARENTS = [
    {
        "id": "parent-1",
        "name": "Ayah Budi",
        "role": UserRole.PARENT.value,
        "avatar": "https://i.pravatar.cc/150?u=parent1",
        "email": "ayahbudi@email.com",
        "password": DEFAULT_PASSWORD,
        "nik": "3301011010800001",
        "childId": "student-1",
    },
    {
        "id": "parent-2",
        "name": "Ibu Citra",
        "role": UserRole.PARENT.value,
        "avatar": "https://i.pravatar.cc/150?u=parent2",
        "email": "ibucitra@email.com",
        "password": DEFAULT_PASSWORD,
        "nik": "3301015010820002",
        "childId": "student-2",
    },
    {
        "id": "parent-3",
        "name": "Bapak Andi",
        "role": UserRole.PARENT.value,
        "avatar": "https://i.pravatar.cc/150?u=parent3",
        "email": "bapakandi@email.com",
        "password": DEFAULT_PASSWORD,
        "nik": "3301011010850003",
        "childId": "student-3",
    },
    {
        "id": "parent-4",
        "name": "Ibu Eka",
        "role": UserRole.PARENT.value,
        "avatar": "https://i.pravatar.cc/150?u=parent4",
        "email": "ibueka@email.com",
        "password": DEFAULT_PASSWORD,
        "nik": "3301015010900004",
        "childId": "student-4",
    },
]

ADMINS = [
    {
        "id": "admin-1",
        "name": "Admin Sekolah",
        "role": UserRole.ADMIN.value,
        "avatar": "https://i.pravatar.cc/150?u=admin1",
        "email": "admin@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "nip": "ADMIN001",
    },
    {
        "id": "admin-2",
        "name": "Kepala Sekolah",
        "role": UserRole.ADMIN.value,
        "avatar": "https://i.pravatar.cc/150?u=admin2",
        "email": "kepsek@sekolah.id",
        "password": DEFAULT_PASSWORD,
        "nip": "ADMIN002",
    },
]

USERS = [*STUDENTS, *TEACHERS, *PARENTS, *ADMINS]

INITIAL_JOURNAL_CATEGORIES = [
    "Kegiatan Pembelajaran",
    "Kegiatan Ekstrakurikuler",
    "Kegiatan Organisasi",
    "Kegiatan Ibadah",
    "Kegiatan Literasi",
]

# Seed entries carry no id; the store assigns one on insert.
INITIAL_JOURNAL_ENTRIES = [
    {
        "studentId": "student-1",
        "date": "2024-07-28",
        "submissionTime": "08:15:30",
        "category": "Kegiatan Pembelajaran",
        "activity": "Belajar Matematika tentang pecahan.",
        "attendance": Attendance.PRESENT.value,
        "behaviorNote": "",
        "mood": Mood.NEUTRAL.value,
        "reflection": "Agak sulit memahami, tapi aku akan terus mencoba.",
        "teacherComment": "Bagus Budi, jangan menyerah! Coba kerjakan latihan tambahan ya.",
        "status": JournalStatus.APPROVED.value,
    },
    {
        "studentId": "student-1",
        "date": "2024-07-29",
        "submissionTime": "09:00:12",
        "category": "Kegiatan Ekstrakurikuler",
        "activity": "Latihan sepak bola bersama teman-teman.",
        "attendance": Attendance.PRESENT.value,
        "behaviorNote": "",
        "mood": Mood.EXCITED.value,
        "reflection": "Sangat menyenangkan bisa mencetak gol hari ini!",
        "status": JournalStatus.PENDING.value,
    },
    {
        "studentId": "student-2",
        "date": "2024-07-29",
        "submissionTime": "08:30:00",
        "category": "Kegiatan Pembelajaran",
        "activity": "Membaca buku cerita di perpustakaan.",
        "attendance": Attendance.PRESENT.value,
        "behaviorNote": "",
        "mood": Mood.HAPPY.value,
        "reflection": "Buku ceritanya sangat menarik dan menginspirasi.",
        "teacherComment": "Wah, bagus sekali Citra! Terus tingkatkan minat membacamu ya.",
        "status": JournalStatus.APPROVED.value,
    },
]
