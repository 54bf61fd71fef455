"""Persistence for student records and school information.

Records are kept as JSON text in a key-value store. Reads that fail or
return malformed data degrade to an empty collection (or default school
information) and are logged, so the app stays usable. Writes are skipped
while the stored students cannot be read.
"""

import json
import locale
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from report_card.exceptions import StorageError
from report_card.logger import get_logger
from report_card.models import SchoolInfo, Student
from report_card.sample import new_id, sample_student

logger = get_logger(__name__)

STUDENTS_KEY = "report-card-students"
SCHOOL_INFO_KEY = "report-card-school-info"

SORT_KEYS = ("name", "class", "date")

_students_adapter = TypeAdapter(list[Student])


# ---------- Key-value stores ----------
class KeyValueStore(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, text: str) -> None: ...


class MemoryStore:
    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, text: str) -> None:
        self.data[key] = text


class FileStore:
    """One UTF-8 <key>.json file per key under data_dir."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(key, f"cannot read {path}: {e}") from e

    def save(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(key, f"cannot write {path}: {e}") from e


# ---------- Sorting ----------
def _collate(text):
    return locale.strxfrm(text.casefold())


def sort_students(students, sort_by):
    """Return a new list ordered by name, class (then section) or date added.

    Class is compared as text, so "10" sorts before "2". An unknown sort key
    keeps the input order.
    """
    if not students:
        return []
    if sort_by == "name":
        return sorted(students, key=lambda s: _collate(s.name))
    if sort_by == "class":
        return sorted(students, key=lambda s: (s.class_name, s.section))
    if sort_by == "date":
        return sorted(students, key=lambda s: s.date_added, reverse=True)
    return list(students)


# ---------- Repositories ----------
class StudentRepository:
    """Owns the student collection persisted under a single store key."""

    def __init__(self, store: KeyValueStore, key: str = STUDENTS_KEY):
        self.store = store
        self.key = key
        self._lock = threading.Lock()

    def load(self) -> list[Student]:
        """Read all students, raising StorageError if the stored data is unusable."""
        text = self.store.load(self.key)
        if not text:
            return []
        try:
            return _students_adapter.validate_json(text)
        except ValidationError as e:
            raise StorageError(self.key, f"malformed student data: {e.error_count()} errors") from e

    def list(self) -> list[Student]:
        try:
            return self.load()
        except StorageError:
            logger.exception("Error loading students")
            return []

    def _save(self, students):
        text = json.dumps([s.to_json_dict() for s in students], ensure_ascii=False)
        try:
            self.store.save(self.key, text)
        except StorageError:
            logger.exception("Error saving students")

    def _load_for_write(self):
        """Strict read before a write; None means the write must be skipped."""
        try:
            return self.load()
        except StorageError:
            logger.exception("Error loading students, not saving")
            return None

    def create(self, draft) -> Student:
        fields = draft.model_dump(exclude={"id", "date_added"})
        student = Student(**fields, id=new_id(), date_added=datetime.now(timezone.utc))
        with self._lock:
            students = self._load_for_write()
            if students is None:
                return student
            students.append(student)
            self._save(students)
        logger.info(f"Added student {student.id} ({student.name})")
        return student

    def update(self, student: Student) -> bool:
        with self._lock:
            students = self._load_for_write() or []
            for index, existing in enumerate(students):
                if existing.id == student.id:
                    students[index] = student
                    self._save(students)
                    logger.info(f"Updated student {student.id}")
                    return True
        return False

    def delete(self, student_id: str) -> bool:
        with self._lock:
            students = self._load_for_write()
            if students is None:
                return False
            remaining = [s for s in students if s.id != student_id]
            if len(remaining) == len(students):
                return False
            self._save(remaining)
        logger.info(f"Deleted student {student_id}")
        return True

    def find_by_id(self, student_id: str) -> Student | None:
        return next((s for s in self.list() if s.id == student_id), None)

    def sort(self, students, sort_by: str):
        return sort_students(students, sort_by)

    def add_sample(self, rng=None) -> Student:
        return self.create(sample_student(rng))


class SchoolInfoRepository:
    def __init__(self, store: KeyValueStore, key: str = SCHOOL_INFO_KEY):
        self.store = store
        self.key = key

    def get(self) -> SchoolInfo:
        try:
            text = self.store.load(self.key)
            if text:
                return SchoolInfo.model_validate_json(text)
        except StorageError:
            logger.exception("Error loading school info")
        except ValidationError:
            logger.exception("Malformed school info, using defaults")
        return SchoolInfo()

    def save(self, info: SchoolInfo) -> None:
        try:
            self.store.save(self.key, json.dumps(info.to_json_dict(), ensure_ascii=False))
        except StorageError:
            logger.exception("Error saving school info")


def file_repositories(data_dir):
    store = FileStore(data_dir)
    return StudentRepository(store), SchoolInfoRepository(store)
