import os
import tempfile
from pathlib import Path

# окружение должно быть готово до импорта приложения (настройки кешируются)
_TMP = Path(tempfile.mkdtemp(prefix="schedule_bsuir_tests_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["LOG_DIR"] = str(_TMP / "logs")
os.environ["DB_LOGGING"] = "false"
os.environ["SEMESTER_START"] = "2025-02-09"

import pytest
from fastapi.testclient import TestClient

from schedule_bsuir.api import app, get_schedule_fetcher
from schedule_bsuir.database import engine
from schedule_bsuir.db.models import Base


class FakeUpstream:
    """Подмена внешнего API: отдает заранее заданный ответ."""

    def __init__(self):
        self.payload = {}
        self.error = None
        self.calls = []

    async def __call__(self, group_number):
        self.calls.append(group_number)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture(autouse=True)
def db_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upstream():
    fake = FakeUpstream()
    app.dependency_overrides[get_schedule_fetcher] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client(upstream):
    return TestClient(app)


@pytest.fixture
def make_raw_lesson():
    def _make(subject="Математика", **overrides):
        raw = {
            "subjectFullName": subject,
            "subject": subject[:4],
            "lessonTypeAbbrev": "ЛК",
            "startLessonTime": "09:00",
            "endLessonTime": "10:20",
            "auditories": ["101-1"],
            "dateLesson": None,
            "startLessonDate": None,
            "endLessonDate": None,
            "weekNumber": None,
        }
        raw.update(overrides)
        return raw

    return _make
