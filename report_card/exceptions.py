"""Exception classes raised by the report card package."""


class ReportCardError(Exception):
    """Base exception for the package."""


class StorageError(ReportCardError):
    """The persistence layer could not read or write a key."""

    def __init__(self, key: str, message: str):
        self.key = key
        self.message = message
        super().__init__(f"{key}: {message}")


class InvalidStudentError(ReportCardError):
    """A student record cannot be aggregated into a report card."""

    def __init__(self, student_id: str | None, message: str = "Student has no known subjects"):
        self.student_id = student_id
        self.message = message
        super().__init__(f"{message} (id={student_id})")
