"""Student, marks and report card records.

Field names are snake_case in Python and camelCase in the persisted JSON,
matching the records already written by earlier versions of the app.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------- Subjects ----------
SUBJECT_LABELS = {
    "hindi": "Hindi",
    "english": "English",
    "mathematics": "Mathematics",
    "science": "Science",
    "socialScience": "Social Science",
    "environmentalStudies": "Environmental Studies",
    "homeScience": "Home Science / Agriculture",
    "artMusic": "Art & Music",
    "sanskrit": "Sanskrit",
    "sports": "Sports / Physical Education",
}

# Canonical presentation order
SUBJECT_KEYS = tuple(SUBJECT_LABELS)

# Maximum marks per assessment period
MARK_LIMITS = {
    "session1": 10,
    "half_yearly": 30,
    "session2": 10,
    "final": 50,
}

PERIOD_LABELS = {
    "session1": "Session 1",
    "half_yearly": "Half Yearly",
    "session2": "Session 2",
    "final": "Final",
}

SUBJECT_MAX_MARKS = sum(MARK_LIMITS.values())


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self):
        return self.model_dump(mode="json", by_alias=True)


class SubjectMarks(CamelModel):
    session1: int = 0
    half_yearly: int = 0
    session2: int = 0
    final: int = 0


class SubjectResult(SubjectMarks):
    model_config = ConfigDict(frozen=True)

    total: int
    grade: str


class ExamTotals(SubjectMarks):
    """Sum of each assessment period across all subjects."""

    model_config = ConfigDict(frozen=True)


def default_subjects():
    return {key: SubjectMarks() for key in SUBJECT_KEYS}


def merge_subjects(current, edited):
    """Edited marks over the current ones, keeping subjects the form does not show."""
    return {**current, **edited}


class StudentDraft(CamelModel):
    """A student before the repository has assigned an id."""

    name: str
    father_name: str
    admission_number: str
    class_name: str = Field(alias="class")
    section: str
    dob: str | None = None
    gender: str | None = None
    address: str | None = None
    subjects: dict[str, SubjectMarks] = Field(default_factory=default_subjects)


class Student(StudentDraft):
    id: str
    date_added: datetime

    @field_validator("date_added")
    @classmethod
    def _assume_utc(cls, value):
        # Older records were saved without an offset
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ReportCardData(CamelModel):
    """Read-only view of a student's results. Built on demand, never stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    father_name: str
    admission_number: str
    class_name: str = Field(alias="class")
    section: str
    dob: str | None = None
    gender: str | None = None
    address: str | None = None
    date_added: datetime
    subjects: dict[str, SubjectResult]
    total_marks: int
    total_possible_marks: int
    percentage: float
    overall_grade: str
    remarks: str
    exam_totals: ExamTotals

    @property
    def roll_no(self):
        return self.admission_number


class SchoolInfo(CamelModel):
    name: str = "Your School Name"
    address: str = "School Address Here"
    # Images as base64 data URLs
    logo1: str | None = None
    logo2: str | None = None
