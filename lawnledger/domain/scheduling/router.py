"""Schedule router - calendar, drag-and-drop rescheduling and quick edits"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...services.drag_state import DragState
from ...services.notification_service import OperationResult
from ...services.workspace import Workspace, current_workspace
from ...shared.responses import board_errors, raise_for_result
from .board import ScheduleBoard
from .schemas import (
    CalendarResponse,
    CalendarView,
    DragStartRequest,
    DragStateResponse,
    DragTargetRequest,
    NavigateRequest,
    QuickEditForm,
    RescheduleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Schedule"])


def get_schedule_board(workspace: Workspace = Depends(current_workspace)) -> ScheduleBoard:
    """Dependency injection for the ScheduleBoard"""
    return workspace.schedule_board


def drag_response(state: DragState) -> DragStateResponse:
    return DragStateResponse(phase=state.phase.value, jobId=state.entity_id, targetDate=state.target)


# ============================================================================
# CALENDAR
# ============================================================================


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    view: Optional[CalendarView] = Query(None),
    board: ScheduleBoard = Depends(get_schedule_board),
):
    """Render the month grid or the current week"""
    if view is not None:
        board.set_view(view)
    return board.calendar()


@router.post("/navigate", response_model=CalendarResponse)
async def navigate_calendar(
    request: NavigateRequest,
    board: ScheduleBoard = Depends(get_schedule_board),
):
    if request.view is not None:
        board.set_view(request.view)
    board.navigate(request.action)
    return board.calendar()


# ============================================================================
# DRAG AND DROP
# ============================================================================


@router.get("/drag", response_model=DragStateResponse)
async def get_drag_state(board: ScheduleBoard = Depends(get_schedule_board)):
    return drag_response(board.drag.state)


@router.post("/drag/start", response_model=DragStateResponse)
async def start_drag(request: DragStartRequest, board: ScheduleBoard = Depends(get_schedule_board)):
    with board_errors():
        return drag_response(board.start_drag(request.jobId))


@router.post("/drag/over", response_model=DragStateResponse)
async def drag_over(request: DragTargetRequest, board: ScheduleBoard = Depends(get_schedule_board)):
    with board_errors():
        return drag_response(board.drag_over(request.date))


@router.post("/drag/leave", response_model=DragStateResponse)
async def drag_leave(board: ScheduleBoard = Depends(get_schedule_board)):
    return drag_response(board.drag_leave())


@router.post("/drag/cancel", response_model=DragStateResponse)
async def cancel_drag(board: ScheduleBoard = Depends(get_schedule_board)):
    return drag_response(board.cancel_drag())


@router.post("/drag/drop", response_model=OperationResult)
async def drop_job(
    request: Optional[DragTargetRequest] = None,
    board: ScheduleBoard = Depends(get_schedule_board),
):
    """Drop the dragged job on the given day, or on the hovered day"""
    with board_errors():
        result = await board.drop(request.date if request else None)
    return raise_for_result(result)


# ============================================================================
# JOB EDITS
# ============================================================================


@router.post("/jobs/{job_id}/reschedule", response_model=OperationResult)
async def reschedule_job(
    job_id: int,
    request: RescheduleRequest,
    board: ScheduleBoard = Depends(get_schedule_board),
):
    """Move a job without the drag gesture"""
    with board_errors():
        result = await board.reschedule_job(job_id, request.date)
    return raise_for_result(result)


@router.patch("/jobs/{job_id}", response_model=OperationResult)
async def quick_edit_job(
    job_id: int,
    form: QuickEditForm,
    board: ScheduleBoard = Depends(get_schedule_board),
):
    with board_errors():
        result = await board.quick_edit(job_id, form)
    return raise_for_result(result)
