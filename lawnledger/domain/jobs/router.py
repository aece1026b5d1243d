"""Job router - FastAPI endpoints for the job ledger"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ...schemas import JobStatus
from ...services.notification_service import OperationResult
from ...services.workspace import Workspace, current_workspace
from ...shared.responses import board_errors, raise_for_result
from .schemas import DurationBreakdown, JobForm, LedgerEntry
from .service import JobLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

ALL_STATUSES = "all"


def get_job_ledger(workspace: Workspace = Depends(current_workspace)) -> JobLedger:
    """Dependency injection for the JobLedger"""
    return workspace.job_ledger


@router.get("", response_model=list[LedgerEntry])
async def get_jobs(
    q: str = Query("", description="Customer name, address or date fragment"),
    status: str = Query(JobStatus.COMPLETED.value, description="Job status, or 'all'"),
    ledger: JobLedger = Depends(get_job_ledger),
):
    """Search the job history, most recent first"""
    if status == ALL_STATUSES:
        wanted = None
    else:
        try:
            wanted = JobStatus(status)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown job status: {status}")
    return ledger.list_entries(q, wanted)


@router.post("", response_model=OperationResult, status_code=201)
async def create_job(form: JobForm, ledger: JobLedger = Depends(get_job_ledger)):
    return raise_for_result(await ledger.create(form))


@router.patch("/{job_id}", response_model=OperationResult)
async def update_job(job_id: int, form: JobForm, ledger: JobLedger = Depends(get_job_ledger)):
    with board_errors():
        result = await ledger.update(job_id, form)
    return raise_for_result(result)


@router.delete("/{job_id}", response_model=OperationResult)
async def delete_job(
    job_id: int,
    confirm: bool = Query(False),
    ledger: JobLedger = Depends(get_job_ledger),
):
    with board_errors():
        result = await ledger.delete(job_id, lambda prompt: confirm)
    return raise_for_result(result)


@router.get("/{job_id}/breakdown", response_model=DurationBreakdown)
async def get_duration_breakdown(job_id: int, ledger: JobLedger = Depends(get_job_ledger)):
    with board_errors():
        return ledger.duration_breakdown(job_id)
