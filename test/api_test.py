import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from Background import task
from utils.helper import mock_events

client = TestClient(task.app)

def setup_function():
    mock_events.clear()

@pytest.fixture
def clock(monkeypatch):
    current = {"now": datetime(2025, 7, 21, 9, 0)}
    monkeypatch.setattr(task, "current_time", lambda: current["now"])
    return current

def punch(employee_id, event_type, passcode):
    return client.post("/kiosk/action", json={"employee_id": employee_id, "type": event_type, "passcode": passcode})

def test_kiosk_employees_lists_active_only_without_codes():
    response = client.get("/kiosk/employees")

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "name": "Ada Brooks"}, {"id": 2, "name": "Sam Ortiz"}]

def test_kiosk_day_flow(clock):
    assert punch(1, "clock-in", "1234").status_code == 201
    clock["now"] = datetime(2025, 7, 21, 12, 0)
    assert punch(1, "break-start", "1234").status_code == 201
    clock["now"] = datetime(2025, 7, 21, 12, 30)
    assert punch(1, "break-end", "1234").status_code == 201

    clock["now"] = datetime(2025, 7, 21, 13, 0)
    working = client.get("/kiosk/entries/1").json()
    assert len(working["events"]) == 3
    assert working["summary"]["status"] == "working"
    assert working["summary"]["total_worked_minutes"] == pytest.approx(210)
    assert working["refresh_interval_seconds"] == 30

    clock["now"] = datetime(2025, 7, 21, 17, 0)
    response = punch(1, "clock-out", "1234")
    assert response.status_code == 201
    assert response.json()["type"] == "clock-out"
    assert response.json()["date"] == "2025-07-21"

    day = client.get("/timesheets/day/2025-07-21").json()
    assert day["1"]["status"] == "completed"
    assert day["1"]["total_worked_minutes"] == pytest.approx(450)
    assert day["1"]["total_break_minutes"] == pytest.approx(30)

def test_week_timesheet_accepts_any_day_of_week(clock):
    punch(2, "clock-in", "5678")
    clock["now"] = datetime(2025, 7, 21, 17, 0)
    punch(2, "clock-out", "5678")

    rows = client.get("/timesheets/week/2025-07-24").json()

    assert len(rows) == 1
    assert rows[0]["employee_id"] == 2
    assert rows[0]["days"]["2025-07-21"]["total_worked_minutes"] == pytest.approx(480)
    assert rows[0]["total_worked_minutes"] == pytest.approx(480)

def test_wrong_passcode_is_rejected(clock):
    response = punch(1, "clock-in", "0000")

    assert response.status_code == 401
    assert mock_events == []

def test_unknown_or_inactive_employee(clock):
    assert punch(99, "clock-in", "1234").status_code == 404
    assert punch(3, "clock-in", "0000").status_code == 404
    assert mock_events == []

def test_invalid_action_type(clock):
    response = punch(1, "lunch", "1234")

    assert response.status_code == 422
    assert mock_events == []

def test_editing_clock_out_updates_day_timesheet(clock):
    punch(1, "clock-in", "1234")
    clock["now"] = datetime(2025, 7, 21, 16, 0)
    clock_out = punch(1, "clock-out", "1234").json()
    assert client.get("/timesheets/day/2025-07-21").json()["1"]["total_worked_minutes"] == pytest.approx(420)

    response = client.patch(f"/kiosk/entries/{clock_out['id']}", json={"timestamp": "2025-07-21T17:30:00"})

    assert response.status_code == 200
    assert response.json()["timestamp"] == "2025-07-21T17:30:00"
    assert response.json()["type"] == "clock-out"
    day = client.get("/timesheets/day/2025-07-21").json()
    assert day["1"]["total_worked_minutes"] == pytest.approx(510)
    assert day["1"]["clock_out"] == "2025-07-21T17:30:00"

def test_editing_entry_type(clock):
    entry = punch(1, "clock-in", "1234").json()

    response = client.patch(f"/kiosk/entries/{entry['id']}", json={"type": "break-start"})

    assert response.status_code == 200
    assert mock_events[0].type.value == "break-start"
    assert mock_events[0].timestamp == datetime(2025, 7, 21, 9, 0)

def test_editing_unknown_entry():
    response = client.patch("/kiosk/entries/42", json={"type": "clock-out"})

    assert response.status_code == 404

def test_duplicate_clock_in_is_logged_and_recorded(clock, caplog):
    punch(1, "clock-in", "1234")
    clock["now"] = datetime(2025, 7, 21, 10, 0)

    response = punch(1, "clock-in", "1234")

    assert response.status_code == 201
    assert len(mock_events) == 2
    assert "Duplicate clock-in for employee_id: 1" in caplog.text
