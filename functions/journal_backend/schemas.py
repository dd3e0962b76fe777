"""
Pydantic schemas for the journal backend.

Field names are snake_case in Python and camelCase on the wire; every model
accepts either form on input and serializes with aliases.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from journal_backend.errors import ValidationError, format_validation_errors
from journal_shared.constants import (
    DEFAULT_ATTENDANCE_END,
    DEFAULT_ATTENDANCE_START,
    INITIAL_JOURNAL_CATEGORIES,
    MAX_TEXT_LENGTH,
)
from journal_shared.types import Attendance, JournalStatus, Mood, Theme

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# Users


class UserBase(WireModel):
    id: Optional[str] = Field(default=None, max_length=128)
    name: str = Field(..., min_length=1, max_length=200)
    avatar: str = ""
    email: str = Field(default="", max_length=320)
    # Stored in plaintext and never serialized back to clients.
    password: Optional[str] = Field(default=None, exclude=True, max_length=256)

    natural_key_field: ClassVar[str]

    @property
    def natural_key(self) -> str:
        return getattr(self, self.natural_key_field)

    def to_document(self) -> dict:
        """Serialize for storage, keeping the password the wire form drops."""
        doc = self.model_dump(by_alias=True, mode="json")
        if self.password is not None:
            doc["password"] = self.password
        return doc


class StudentUser(UserBase):
    role: Literal["Siswa"]
    nisn: str = Field(..., min_length=1, max_length=64)
    class_name: str = Field(default="", alias="class")
    teacher_id: str = Field(default="", alias="teacherId")
    parent_id: str = Field(default="", alias="parentId")

    natural_key_field: ClassVar[str] = "nisn"


class TeacherUser(UserBase):
    role: Literal["Guru"]
    nip: str = Field(..., min_length=1, max_length=64)
    class_name: str = Field(default="", alias="class")
    subject: str = ""

    natural_key_field: ClassVar[str] = "nip"


class ParentUser(UserBase):
    role: Literal["Orang Tua"]
    nik: str = Field(..., min_length=1, max_length=64)
    child_id: str = Field(default="", alias="childId")

    natural_key_field: ClassVar[str] = "nik"


class AdminUser(UserBase):
    role: Literal["Admin"]
    nip: str = Field(..., min_length=1, max_length=64)

    natural_key_field: ClassVar[str] = "nip"


User = Annotated[
    Union[StudentUser, TeacherUser, ParentUser, AdminUser],
    Field(discriminator="role"),
]
USER_ADAPTER: TypeAdapter = TypeAdapter(User)
USER_LIST_ADAPTER: TypeAdapter = TypeAdapter(list[User])


class LoginRequest(WireModel):
    identifier: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=256)


class ImportRowError(WireModel):
    index: int
    message: str


class ImportUsersResponse(WireModel):
    imported: int
    failed: int
    errors: list[ImportRowError]
    users: list[User]


# Journals


class JournalEntry(WireModel):
    id: Optional[str] = Field(default=None, max_length=128)
    student_id: str = Field(..., alias="studentId", min_length=1)
    date: str = Field(..., pattern=DATE_PATTERN)
    submission_time: str = Field(..., alias="submissionTime", pattern=TIME_PATTERN)
    category: str = Field(..., min_length=1, max_length=200)
    activity: str = Field(..., max_length=MAX_TEXT_LENGTH)
    attendance: Attendance
    behavior_note: str = Field(
        default="", alias="behaviorNote", max_length=MAX_TEXT_LENGTH
    )
    mood: Mood
    reflection: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    teacher_comment: Optional[str] = Field(
        default=None, alias="teacherComment", max_length=MAX_TEXT_LENGTH
    )
    status: JournalStatus = JournalStatus.PENDING


class JournalEntryCreate(WireModel):
    """A new entry as submitted by a student; the server fills in the rest."""

    student_id: str = Field(..., alias="studentId", min_length=1)
    category: str = Field(..., min_length=1, max_length=200)
    activity: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    attendance: Attendance = Attendance.PRESENT
    behavior_note: str = Field(
        default="", alias="behaviorNote", max_length=MAX_TEXT_LENGTH
    )
    mood: Mood
    reflection: str = Field(default="", max_length=MAX_TEXT_LENGTH)


class JournalRevision(WireModel):
    category: Optional[str] = Field(default=None, min_length=1, max_length=200)
    activity: Optional[str] = Field(
        default=None, min_length=1, max_length=MAX_TEXT_LENGTH
    )
    behavior_note: Optional[str] = Field(
        default=None, alias="behaviorNote", max_length=MAX_TEXT_LENGTH
    )
    mood: Optional[Mood] = None
    reflection: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)


class JournalReview(WireModel):
    status: Literal["Approved", "Revision Needed"]
    teacher_comment: Optional[str] = Field(
        default=None, alias="teacherComment", max_length=MAX_TEXT_LENGTH
    )


# Settings and attendance


class AttendanceWindow(WireModel):
    start_time: str = Field(
        default=DEFAULT_ATTENDANCE_START, alias="startTime", pattern=HHMM_PATTERN
    )
    end_time: str = Field(
        default=DEFAULT_ATTENDANCE_END, alias="endTime", pattern=HHMM_PATTERN
    )

    @model_validator(mode="after")
    def _check_order(self) -> "AttendanceWindow":
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be earlier than endTime")
        return self


class AppSettings(WireModel):
    categories: list[str] = Field(
        default_factory=lambda: list(INITIAL_JOURNAL_CATEGORIES)
    )
    attendance_window: AttendanceWindow = Field(
        default_factory=AttendanceWindow, alias="attendanceWindow"
    )
    school_name: str = Field(default="", alias="schoolName", max_length=200)
    theme: Theme = Theme.LIGHT

    @field_validator("categories")
    @classmethod
    def _normalize_categories(cls, value: list[str]) -> list[str]:
        # Ordered set: trimmed, blanks dropped, first occurrence wins.
        seen: dict[str, None] = {}
        for item in value:
            item = item.strip()
            if item:
                seen.setdefault(item, None)
        return list(seen)


class AttendanceRequest(WireModel):
    student_id: str = Field(..., alias="studentId", min_length=1)
    attendance: Attendance
    reason: Optional[str] = Field(default=None, max_length=MAX_TEXT_LENGTH)


class AttendanceStatusResponse(WireModel):
    open: bool
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    now: str


class MessageResponse(WireModel):
    message: str


class SeedResponse(WireModel):
    message: str
    seeded: dict[str, bool]


class BackupResponse(WireModel):
    users: list[User]
    journals: list[JournalEntry]
    settings: AppSettings


def parse_payload(model: Any, data: Any) -> Any:
    """
    Validate ``data`` against a model class or TypeAdapter, raising the
    domain ValidationError on failure.
    """
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_python(data)
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Bad request: {format_validation_errors(exc.errors())}"
        ) from exc


def dump(model: Any) -> Any:
    """JSON-ready wire form of a model or a list of models."""
    if isinstance(model, list):
        return [dump(item) for item in model]
    return model.model_dump(by_alias=True, mode="json")
