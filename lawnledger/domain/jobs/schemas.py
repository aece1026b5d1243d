"""Job ledger schemas"""

from typing import Optional, Union

from pydantic import BaseModel

from ...schemas import JobRecord, JobStatus

MinutesField = Optional[Union[int, float, str]]


class JobForm(BaseModel):
    """Add/edit form as submitted; durations arrive as typed"""

    customerId: Optional[int] = None
    date: Optional[str] = None
    status: JobStatus = JobStatus.COMPLETED
    scheduledTime: Optional[str] = None
    totalTime: MinutesField = None
    mowTime: MinutesField = None
    trimTime: MinutesField = None
    edgeTime: MinutesField = None
    blowTime: MinutesField = None
    driveTime: MinutesField = None
    notes: Optional[str] = None


class DurationBreakdown(BaseModel):
    mow_time: Optional[int] = None
    trim_time: Optional[int] = None
    edge_time: Optional[int] = None
    blow_time: Optional[int] = None
    drive_time: Optional[int] = None
    total_time: Optional[int] = None
    task_minutes: int = 0
    # total minus the task sum; negative when tasks overrun the total
    unaccounted_minutes: Optional[int] = None
    formatted: dict[str, str] = {}


class LedgerEntry(BaseModel):
    job: JobRecord
    customer_name: str
    customer_address: str = ""
    price: Optional[float] = None
    breakdown: DurationBreakdown
