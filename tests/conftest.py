import random

import pytest

from report_card.models import SubjectMarks
from report_card.storage import MemoryStore, SchoolInfoRepository, StudentRepository
from tests.factories import make_student


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repo(store):
    return StudentRepository(store)


@pytest.fixture
def school_repo(store):
    return SchoolInfoRepository(store)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def full_marks_student():
    return make_student(marks=SubjectMarks(session1=10, half_yearly=30, session2=10, final=50))
