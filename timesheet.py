from collections import defaultdict
from datetime import datetime, date, timedelta
from functools import reduce
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from models.schema import EventType, TimeEvent, TimesheetRow, WorkdayStatus, WorkdaySummary

DAYS_IN_WEEK = 7
WEEK_STARTS_ON = 0  # Monday, as date.weekday() counts
REFRESH_INTERVAL_SECONDS = 30


class _Cursor(BaseModel):
    model_config = ConfigDict(frozen=True)

    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    worked: float = 0.0
    break_minutes: float = 0.0
    last_clock_in: Optional[datetime] = None
    last_break_start: Optional[datetime] = None
    on_break: bool = False


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def _close_working_span(cursor: _Cursor, at: datetime) -> _Cursor:
    if cursor.last_clock_in is None:
        return cursor
    return cursor.model_copy(update={"worked": cursor.worked + minutes_between(cursor.last_clock_in, at), "last_clock_in": None})


def _step(cursor: _Cursor, event: TimeEvent) -> _Cursor:
    at = event.timestamp

    if event.type == EventType.CLOCK_IN:
        return cursor.model_copy(update={
            "clock_in": cursor.clock_in or at,
            "last_clock_in": at,
            "on_break": False,
        })

    if event.type == EventType.CLOCK_OUT:
        return _close_working_span(cursor, at).model_copy(update={"clock_out": at})

    if event.type == EventType.BREAK_START:
        return _close_working_span(cursor, at).model_copy(update={"last_break_start": at, "on_break": True})

    if event.type == EventType.BREAK_END:
        cursor = cursor.model_copy(update={"on_break": False})
        if cursor.last_break_start is not None:
            cursor = cursor.model_copy(update={
                "break_minutes": cursor.break_minutes + minutes_between(cursor.last_break_start, at),
                "last_break_start": None,
            })
        if cursor.last_clock_in is None:
            cursor = cursor.model_copy(update={"last_clock_in": at})
        return cursor

    return cursor


def aggregate(events: Iterable[TimeEvent], now: datetime) -> WorkdaySummary:
    """Reduce one employee-day of clock events to a WorkdaySummary.

    Events may arrive in any order; they are sorted by timestamp first, with
    ties kept in input order. Spans still open after the last event are
    credited up to ``now`` unless the day has a clock-out. Minutes are
    returned unrounded.
    """
    ordered = sorted(events, key=lambda e: e.timestamp)
    cursor = reduce(_step, ordered, _Cursor())

    worked = cursor.worked
    break_minutes = cursor.break_minutes
    if cursor.clock_out is None:
        if cursor.last_clock_in is not None:
            worked += max(0.0, minutes_between(cursor.last_clock_in, now))
        if cursor.on_break and cursor.last_break_start is not None:
            break_minutes += max(0.0, minutes_between(cursor.last_break_start, now))

    if cursor.clock_out is not None:
        status = WorkdayStatus.COMPLETED
    elif cursor.on_break:
        status = WorkdayStatus.ON_BREAK
    else:
        status = WorkdayStatus.WORKING

    return WorkdaySummary(
        clock_in=cursor.clock_in,
        clock_out=cursor.clock_out,
        total_worked_minutes=worked,
        total_break_minutes=break_minutes,
        net_worked_minutes=worked,
        status=status,
    )


def group_by_employee(events: Iterable[TimeEvent]) -> Dict[int, List[TimeEvent]]:
    grouped = defaultdict(list)
    for event in events:
        grouped[event.employee_id].append(event)
    return dict(grouped)


def summarize_day(events: Iterable[TimeEvent], day: date, now: datetime) -> Dict[int, WorkdaySummary]:
    """Summaries keyed by employee for every employee with events on ``day``."""
    day_events = [e for e in events if e.date == day]
    return {
        employee_id: aggregate(employee_events, now)
        for employee_id, employee_events in group_by_employee(day_events).items()
    }


def week_start_for(day: date) -> date:
    return day - timedelta(days=(day.weekday() - WEEK_STARTS_ON) % DAYS_IN_WEEK)


def weekly_timesheet(events: Iterable[TimeEvent], week_start: date, now: datetime) -> List[TimesheetRow]:
    week_days = [week_start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]
    in_week = [e for e in events if week_days[0] <= e.date <= week_days[-1]]

    rows = []
    for employee_id, employee_events in sorted(group_by_employee(in_week).items()):
        days = {}
        for day in week_days:
            day_events = [e for e in employee_events if e.date == day]
            if day_events:
                days[day] = aggregate(day_events, now)
        rows.append(TimesheetRow(
            employee_id=employee_id,
            days=days,
            total_worked_minutes=sum(s.net_worked_minutes for s in days.values()),
            total_break_minutes=sum(s.total_break_minutes for s in days.values()),
        ))
    return rows


def format_duration(minutes: float) -> str:
    whole = int(round(minutes))
    return f"{whole // 60}h {whole % 60:02d}m"


def format_hours(minutes: float) -> str:
    return f"{minutes / 60:.2f} h"
