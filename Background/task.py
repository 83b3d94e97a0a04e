from datetime import date, datetime, timedelta
import logging

from fastapi import FastAPI, HTTPException, status

from models.schema import EventType, KioskAction, TimeEventUpdate
from timesheet import REFRESH_INTERVAL_SECONDS, DAYS_IN_WEEK, aggregate, summarize_day, week_start_for, weekly_timesheet
from utils.helper import get_active_employees, get_employee, get_last_event, insert_event, update_event, list_events_between, list_events_for_employee_on_date, list_events_on_date

app = FastAPI()


def current_time() -> datetime:
    return datetime.now()


@app.get("/kiosk/employees")
def kiosk_employees():
    return [{"id": emp.id, "name": emp.name} for emp in get_active_employees()]


@app.post("/kiosk/action", status_code=status.HTTP_201_CREATED)
def kiosk_action(action: KioskAction):
    employee = get_employee(action.employee_id)
    if not employee or not employee.is_active:
        logging.error(f"Unknown or inactive employee_id: {action.employee_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

    if employee.access_code != action.passcode:
        logging.warning(f"Invalid passcode for employee_id: {employee.id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid passcode")

    now = current_time()
    last_event = get_last_event(employee.id, now.date())
    if last_event and last_event.type == EventType.CLOCK_IN and action.type == EventType.CLOCK_IN:
        logging.warning(f"Duplicate clock-in for employee_id: {employee.id}")

    event = insert_event(employee.id, action.type, now)
    logging.info(f"Recorded {event.type.value} for employee_id: {employee.id}")
    return event


@app.get("/kiosk/entries/{employee_id}")
def kiosk_entries(employee_id: int):
    now = current_time()
    events = list_events_for_employee_on_date(employee_id, now.date())
    return {
        "events": events,
        "summary": aggregate(events, now),
        "refresh_interval_seconds": REFRESH_INTERVAL_SECONDS,
    }


@app.get("/timesheets/day/{day}")
def day_timesheet(day: date):
    return summarize_day(list_events_on_date(day), day, current_time())


@app.get("/timesheets/week/{week_start}")
def week_timesheet(week_start: date):
    week_start = week_start_for(week_start)
    week_end = week_start + timedelta(days=DAYS_IN_WEEK - 1)
    return weekly_timesheet(list_events_between(week_start, week_end), week_start, current_time())


@app.patch("/kiosk/entries/{event_id}")
def edit_entry(event_id: int, changes: TimeEventUpdate):
    event = update_event(event_id, **changes.model_dump(exclude_unset=True, exclude_none=True))
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    logging.info(f"Edited entry {event_id} for employee_id: {event.employee_id}")
    return event
