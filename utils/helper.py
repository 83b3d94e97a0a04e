from typing import Optional, List
from datetime import date, datetime

from models.schema import Employee, EventType, TimeEvent

# Mock employee and time event data stores
mock_employees = [
    Employee(id=1, name="Ada Brooks", is_active=True, access_code="1234"),
    Employee(id=2, name="Sam Ortiz", is_active=True, access_code="5678"),
    Employee(id=3, name="Lee Park", is_active=False, access_code="0000"),
]

mock_events: List[TimeEvent] = []

def get_employee(employee_id: int) -> Optional[Employee]:
    for emp in mock_employees:
        if emp.id == employee_id:
            return emp
    return None

def get_active_employees() -> List[Employee]:
    return [emp for emp in mock_employees if emp.is_active]

def insert_event(employee_id: int, event_type: EventType, timestamp: datetime) -> TimeEvent:
    event = TimeEvent(
        id=len(mock_events) + 1,
        employee_id=employee_id,
        type=event_type,
        timestamp=timestamp,
        date=timestamp.date(),
    )
    mock_events.append(event)
    return event

def list_events_for_employee_on_date(employee_id: int, event_date: date) -> List[TimeEvent]:
    return [e for e in mock_events if e.employee_id == employee_id and e.date == event_date]

def list_events_on_date(event_date: date) -> List[TimeEvent]:
    return [e for e in mock_events if e.date == event_date]

def list_events_between(start: date, end: date) -> List[TimeEvent]:
    return [e for e in mock_events if start <= e.date <= end]

def get_last_event(employee_id: int, event_date: date) -> Optional[TimeEvent]:
    events = list_events_for_employee_on_date(employee_id, event_date)
    if events:
        return sorted(events, key=lambda e: e.timestamp)[-1]
    return None

def update_event(event_id: int, **changes) -> Optional[TimeEvent]:
    for i, event in enumerate(mock_events):
        if event.id == event_id:
            mock_events[i] = event.model_copy(update=changes)
            return mock_events[i]
    return None
