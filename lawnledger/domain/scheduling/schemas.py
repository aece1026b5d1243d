"""Scheduling domain schemas - calendar cells, drag requests, quick edits"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from ...schemas import CustomerRecord, JobRecord, JobStatus


class CalendarView(str, Enum):
    MONTH = "month"
    WEEK = "week"


class NavigationAction(str, Enum):
    PREVIOUS = "previous"
    NEXT = "next"
    TODAY = "today"


class CalendarJob(BaseModel):
    job: JobRecord
    customer_name: str
    draggable: bool


class CalendarDay(BaseModel):
    date: date
    in_month: bool
    is_today: bool
    is_past: bool
    jobs: list[CalendarJob] = []
    due_customers: list[CustomerRecord] = []  # next_service_date falls on this day
    projected_customers: list[CustomerRecord] = []  # service after next falls on this day


class CalendarResponse(BaseModel):
    view: CalendarView
    title: str
    anchor: date
    days: list[CalendarDay]


class NavigateRequest(BaseModel):
    action: NavigationAction
    view: Optional[CalendarView] = None


class DragStartRequest(BaseModel):
    jobId: int


class DragTargetRequest(BaseModel):
    date: date


class RescheduleRequest(BaseModel):
    date: date


class DragStateResponse(BaseModel):
    phase: str
    jobId: Optional[int] = None
    targetDate: Optional[date] = None


class QuickEditForm(BaseModel):
    """Calendar double-click edit: time, notes, status and the customer's price"""

    scheduledTime: Optional[str] = None
    notes: Optional[str] = None
    status: JobStatus = JobStatus.SCHEDULED
    price: Optional[str] = None
