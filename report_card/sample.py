# Student ids and demonstration records

import random
import secrets
import string
import time
from datetime import date, datetime, timezone

from report_card.models import MARK_LIMITS, SUBJECT_KEYS, Student, SubjectMarks

_BASE36 = string.digits + string.ascii_lowercase

SAMPLE_NAMES = ["Rahul Sharma", "Priya Patel", "Amit Kumar", "Neha Singh", "Raj Malhotra"]
SAMPLE_FATHER_NAMES = ["Mr. Vikram Sharma", "Mr. Rajesh Patel", "Mr. Suresh Kumar", "Mr. Harish Singh", "Mr. Vijay Malhotra"]
SAMPLE_SECTIONS = ["A", "B", "C"]
SAMPLE_ADDRESS = "123 School Lane, New Delhi"


def to_base36(number):
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_id():
    """Millisecond timestamp followed by 10 random characters, both base 36."""
    timestamp = to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(10))
    return timestamp + suffix


def random_subject_marks(rng):
    return SubjectMarks(**{period: rng.randint(0, limit) for period, limit in MARK_LIMITS.items()})


def sample_student(rng=None):
    """A fully populated random student. Pass a seeded Random for repeatable data."""
    rng = rng or random.Random()
    index = rng.randrange(len(SAMPLE_NAMES))
    class_level = rng.randint(1, 12)
    dob = date(2010 - class_level, rng.randint(1, 12), rng.randint(1, 28))

    return Student(
        id=new_id(),
        name=SAMPLE_NAMES[index],
        father_name=SAMPLE_FATHER_NAMES[index],
        admission_number=f"A{rng.randrange(10000):04d}",
        class_name=str(class_level),
        section=rng.choice(SAMPLE_SECTIONS),
        date_added=datetime.now(timezone.utc),
        dob=dob.isoformat(),
        gender=rng.choice(["Male", "Female"]),
        address=SAMPLE_ADDRESS,
        subjects={key: random_subject_marks(rng) for key in SUBJECT_KEYS},
    )
