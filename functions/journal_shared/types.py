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

from enum import StrEnum


class UserRole(StrEnum):
    STUDENT = "Siswa"
    TEACHER = "Guru"
    PARENT = "Orang Tua"
    ADMIN = "Admin"


class Mood(StrEnum):
    HAPPY = "Senang"
    GRATEFUL = "Bersyukur"
    NEUTRAL = "Biasa Saja"
    SAD = "Sedih"
    ANGRY = "Marah"
    EXCITED = "Semangat"


class Attendance(StrEnum):
    PRESENT = "Hadir"
    EXCUSED = "Izin"
    SICK = "Sakit"
    ABSENT = "Alpa"


class JournalStatus(StrEnum):
    """Review state of a journal entry."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REVISION_NEEDED = "Revision Needed"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


# Natural keys accepted as login identifiers, in lookup priority order.
LOGIN_IDENTIFIER_FIELDS = ("nip", "nisn", "nik")
