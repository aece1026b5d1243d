"""Customer group schemas - forms, board overview and drag requests"""

from typing import Optional, Union

from pydantic import BaseModel

from ...schemas import CustomerRecord, GroupRecord


class GroupForm(BaseModel):
    """Create/edit form; fields arrive as typed by the user"""

    name: Optional[str] = None
    workTimeMinutes: Optional[Union[int, str]] = None
    color: Optional[str] = None
    notes: Optional[str] = None


class GroupSummary(BaseModel):
    group: GroupRecord
    members: list[CustomerRecord]
    member_count: int
    effective_work_minutes: int
    is_drop_target: bool = False  # highlighted while a customer hovers over it


class GroupOverview(BaseModel):
    groups: list[GroupSummary]
    ungrouped: list[CustomerRecord]
    dragging_customer_id: Optional[int] = None
    hovered_group_id: Optional[int] = None


class AssignCustomerRequest(BaseModel):
    customerId: int


class CustomerDragRequest(BaseModel):
    customerId: int


class GroupTargetRequest(BaseModel):
    groupId: int


class GroupDropRequest(BaseModel):
    groupId: Optional[int] = None


class GroupDragStateResponse(BaseModel):
    phase: str
    customerId: Optional[int] = None
    groupId: Optional[int] = None
