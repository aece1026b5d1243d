"""Customer group router - group CRUD and drag-to-assign"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...services.drag_state import DragState
from ...services.notification_service import OperationResult
from ...services.workspace import Workspace, current_workspace
from ...shared.responses import board_errors, raise_for_result
from .schemas import (
    AssignCustomerRequest,
    CustomerDragRequest,
    GroupDragStateResponse,
    GroupDropRequest,
    GroupForm,
    GroupOverview,
    GroupTargetRequest,
)
from .service import GroupBoard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["Customer Groups"])


def get_group_board(workspace: Workspace = Depends(current_workspace)) -> GroupBoard:
    """Dependency injection for the GroupBoard"""
    return workspace.group_board


def drag_response(state: DragState) -> GroupDragStateResponse:
    return GroupDragStateResponse(
        phase=state.phase.value, customerId=state.entity_id, groupId=state.target
    )


# ============================================================================
# GROUP CRUD
# ============================================================================


@router.get("", response_model=GroupOverview)
async def get_groups(board: GroupBoard = Depends(get_group_board)):
    """Groups with their members, plus the ungrouped customers"""
    return board.overview()


@router.post("", response_model=OperationResult, status_code=201)
async def create_group(form: GroupForm, board: GroupBoard = Depends(get_group_board)):
    return raise_for_result(await board.create_group(form))


@router.patch("/{group_id}", response_model=OperationResult)
async def update_group(
    group_id: int,
    form: GroupForm,
    board: GroupBoard = Depends(get_group_board),
):
    with board_errors():
        result = await board.update_group(group_id, form)
    return raise_for_result(result)


@router.delete("/{group_id}", response_model=OperationResult)
async def delete_group(
    group_id: int,
    confirm: bool = Query(False, description="Must be true; customers are kept"),
    board: GroupBoard = Depends(get_group_board),
):
    with board_errors():
        result = await board.delete_group(group_id, lambda prompt: confirm)
    return raise_for_result(result)


# ============================================================================
# MEMBERSHIP
# ============================================================================


@router.post("/{group_id}/members", response_model=OperationResult)
async def add_member(
    group_id: int,
    request: AssignCustomerRequest,
    board: GroupBoard = Depends(get_group_board),
):
    with board_errors():
        result = await board.assign_to_group(request.customerId, group_id)
    return raise_for_result(result)


@router.delete("/members/{customer_id}", response_model=OperationResult)
async def remove_member(customer_id: int, board: GroupBoard = Depends(get_group_board)):
    with board_errors():
        result = await board.remove_from_group(customer_id)
    return raise_for_result(result)


# ============================================================================
# DRAG AND DROP
# ============================================================================


@router.get("/drag", response_model=GroupDragStateResponse)
async def get_drag_state(board: GroupBoard = Depends(get_group_board)):
    return drag_response(board.drag.state)


@router.post("/drag/start", response_model=GroupDragStateResponse)
async def start_drag(request: CustomerDragRequest, board: GroupBoard = Depends(get_group_board)):
    with board_errors():
        return drag_response(board.start_drag(request.customerId))


@router.post("/drag/over", response_model=GroupDragStateResponse)
async def drag_over(request: GroupTargetRequest, board: GroupBoard = Depends(get_group_board)):
    with board_errors():
        return drag_response(board.drag_over(request.groupId))


@router.post("/drag/leave", response_model=GroupDragStateResponse)
async def drag_leave(board: GroupBoard = Depends(get_group_board)):
    return drag_response(board.drag_leave())


@router.post("/drag/cancel", response_model=GroupDragStateResponse)
async def cancel_drag(board: GroupBoard = Depends(get_group_board)):
    return drag_response(board.cancel_drag())


@router.post("/drag/drop", response_model=OperationResult)
async def drop_customer(
    request: Optional[GroupDropRequest] = None,
    board: GroupBoard = Depends(get_group_board),
):
    """Assign the dragged customer to the given group, or to the hovered one"""
    with board_errors():
        result = await board.drop(request.groupId if request else None)
    return raise_for_result(result)
