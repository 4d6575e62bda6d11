import logging

import pytest

from schedule_bsuir.logs.db_logger import DBLogHandler
from schedule_bsuir.services.errors import UpstreamUnavailable


def create_group(client, number="250501"):
    response = client.post("/api/groups", json={"groupNumber": number})
    assert response.status_code == 201
    return response.json()


def create_schedule(client, group_id, subject="Физика"):
    response = client.post(
        "/api/schedules",
        json={
            "subject": subject,
            "lessonType": "ЛК",
            "time": "09:00-10:20",
            "auditorium": "101-1",
            "groupId": group_id,
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/api/health").json() == {"status": "ok"}


def test_group_crud(client):
    group = create_group(client)
    assert group["groupNumber"] == "250501"
    assert group["schedules"] == []

    assert client.get(f"/api/groups/{group['id']}").json()["groupNumber"] == "250501"
    assert client.get("/api/groups/number/250501").json()["id"] == group["id"]
    assert [g["id"] for g in client.get("/api/groups").json()] == [group["id"]]

    updated = client.put(f"/api/groups/{group['id']}", json={"groupNumber": "250502"})
    assert updated.status_code == 200
    assert updated.json()["groupNumber"] == "250502"

    assert client.delete(f"/api/groups/{group['id']}").status_code == 204
    assert client.get(f"/api/groups/{group['id']}").status_code == 404


def test_group_number_must_be_unique(client):
    create_group(client, "250501")
    other = create_group(client, "250502")
    assert client.post("/api/groups", json={"groupNumber": "250501"}).status_code == 409
    assert client.put(f"/api/groups/{other['id']}", json={"groupNumber": "250501"}).status_code == 409


def test_unknown_group_is_404(client):
    response = client.get("/api/groups/number/999999")
    assert response.status_code == 404
    assert "999999" in response.json()["detail"]
    assert client.delete("/api/groups/42").status_code == 404


def test_schedule_crud(client):
    group = create_group(client)
    saved = create_schedule(client, group["id"])
    assert saved["groupId"] == group["id"]
    assert saved["lessonType"] == "ЛК"

    assert client.get(f"/api/schedules/{saved['id']}").json()["subject"] == "Физика"
    assert len(client.get(f"/api/schedules/group/{group['id']}").json()) == 1
    assert client.get(f"/api/groups/{group['id']}").json()["schedules"][0]["id"] == saved["id"]

    response = client.put(
        f"/api/schedules/{saved['id']}",
        json={
            "subject": "Химия",
            "lessonType": "ПЗ",
            "time": "10:35-11:55",
            "auditorium": "",
            "groupId": group["id"],
        },
    )
    assert response.status_code == 200
    assert response.json()["subject"] == "Химия"

    assert client.delete(f"/api/schedules/{saved['id']}").status_code == 204
    assert client.get(f"/api/schedules/{saved['id']}").status_code == 404
    assert client.get("/api/schedules").json() == []


def test_schedule_requires_existing_group(client):
    response = client.post(
        "/api/schedules",
        json={"subject": "Физика", "lessonType": "ЛК", "time": "09:00-10:20", "groupId": 99},
    )
    assert response.status_code == 404


def test_deleting_group_removes_its_schedules(client):
    group = create_group(client)
    create_schedule(client, group["id"])
    client.delete(f"/api/groups/{group['id']}")
    assert client.get("/api/schedules").json() == []


def test_day_schedule_filters_upstream_lessons(client, upstream, make_raw_lesson):
    group = create_group(client)
    upstream.payload = {
        "schedules": {
            "Среда": [
                make_raw_lesson("Высшая математика"),
                make_raw_lesson("Физика", startLessonDate="09.02.2025", endLessonDate="15.02.2025"),
                make_raw_lesson("Философия", dateLesson="12.03.2025", auditories=[]),
            ]
        }
    }

    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})

    assert response.status_code == 200
    body = response.json()
    assert body["groupNumber"] == "250501"
    assert body["date"] == "2025-03-12"
    assert body["groupId"] == group["id"]
    assert [s["subject"] for s in body["schedules"]] == ["Высшая математика", "Философия"]
    assert body["schedules"][1]["auditorium"] == ""
    assert body["schedules"][0]["time"] == "09:00-10:20"
    assert upstream.calls == ["250501"]


def test_day_schedule_without_upstream_data(client, upstream):
    create_group(client)
    upstream.payload = {"schedules": None}
    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})
    assert response.status_code == 200
    assert response.json()["schedules"] == []


def test_day_schedule_unknown_group(client, upstream):
    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})
    assert response.status_code == 404
    assert upstream.calls == []


def test_day_schedule_upstream_failure(client, upstream):
    create_group(client)
    upstream.error = UpstreamUnavailable("connection refused")
    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})
    assert response.status_code == 502


def test_day_schedule_rejects_bad_date(client):
    create_group(client)
    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "12.03.2025"})
    assert response.status_code == 422


def test_logs_endpoint(client):
    assert client.get("/api/logs/sql").json() == []


@pytest.fixture
def db_log_handler():
    handler = DBLogHandler()
    handler.setLevel(logging.WARNING)
    root = logging.getLogger()
    root.addHandler(handler)
    yield handler
    root.removeHandler(handler)


def test_fail_open_dates_are_recorded_in_logs(client, upstream, make_raw_lesson, db_log_handler):
    create_group(client)
    upstream.payload = {"schedules": {"Среда": [make_raw_lesson("Экология", dateLesson="32.13.2025")]}}

    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})
    assert [s["subject"] for s in response.json()["schedules"]] == ["Экология"]

    entries = client.get("/api/logs/sql").json()
    warnings = [e for e in entries if e["level"] == "WARNING" and "Экология" in e["msg"]]
    assert len(warnings) == 1
    assert "32.13.2025" in warnings[0]["msg"]

    last_id = entries[-1]["id"]
    assert client.get("/api/logs/sql", params={"after_id": last_id}).json() == []


def test_day_schedule_with_scalar_bucket(client, upstream):
    create_group(client)
    upstream.payload = {"schedules": {"Среда": 5}}
    response = client.get("/api/schedule", params={"groupNumber": "250501", "date": "2025-03-12"})
    assert response.status_code == 200
    assert response.json()["schedules"] == []
