"""Immutable entity records shared by the gateway, the stores and the boards"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ServiceFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class Record(BaseModel):
    """Base for frozen records; serialized with camelCase keys"""

    class Config:
        from_attributes = True
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class CustomerRecord(Record):
    id: int
    name: str
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    price: float = 0.0
    square_footage: int = 0
    frequency: ServiceFrequency = ServiceFrequency.WEEKLY
    notes: Optional[str] = None
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    group_id: Optional[int] = None


class CustomerDraft(Record):
    name: str
    address: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    price: float = 0.0
    square_footage: int = 0
    frequency: ServiceFrequency = ServiceFrequency.WEEKLY
    notes: Optional[str] = None
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None


class JobDraft(Record):
    """Job fields sans id, as handed to addJob"""

    customer_id: int
    date: date
    status: JobStatus = JobStatus.SCHEDULED
    scheduled_time: Optional[str] = None
    total_time: Optional[int] = None
    mow_time: Optional[int] = None
    trim_time: Optional[int] = None
    edge_time: Optional[int] = None
    blow_time: Optional[int] = None
    drive_time: Optional[int] = None
    notes: Optional[str] = None


class JobRecord(JobDraft):
    id: int

    @property
    def is_completed(self) -> bool:
        return self.status is JobStatus.COMPLETED


class GroupDraft(Record):
    name: str
    work_time_minutes: int = 0
    color: Optional[str] = None
    notes: Optional[str] = None
    customer_ids: tuple[int, ...] = ()


class GroupRecord(GroupDraft):
    id: int


class EquipmentDraft(Record):
    name: str
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: date
    hours_used: float = 0.0
    alert_threshold: float = 0.0


class EquipmentRecord(EquipmentDraft):
    id: int
