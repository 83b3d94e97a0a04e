from datetime import datetime, date
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel


class EventType(str, Enum):
    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"
    BREAK_START = "break-start"
    BREAK_END = "break-end"


class WorkdayStatus(str, Enum):
    WORKING = "working"
    ON_BREAK = "on-break"
    COMPLETED = "completed"


class Employee(BaseModel):
    id: int
    name: str
    is_active: bool = True
    access_code: str = "0000"

class TimeEvent(BaseModel):
    id: Union[int, str]
    employee_id: int
    type: EventType
    timestamp: datetime
    date: date

class KioskAction(BaseModel):
    employee_id: int
    type: EventType
    passcode: str

class WorkdaySummary(BaseModel):
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    total_worked_minutes: float = 0.0
    total_break_minutes: float = 0.0
    net_worked_minutes: float = 0.0
    status: WorkdayStatus = WorkdayStatus.WORKING

class TimesheetRow(BaseModel):
    employee_id: int
    days: Dict[date, WorkdaySummary]
    total_worked_minutes: float
    total_break_minutes: float

class TimeEventUpdate(BaseModel):
    type: Optional[EventType] = None
    timestamp: Optional[datetime] = None
    date: Optional[date] = None
