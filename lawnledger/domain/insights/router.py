"""Insights router - KPIs, recommendations and trends"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...services.workspace import Workspace, current_workspace
from .schemas import InsightsReport

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.get("", response_model=InsightsReport)
async def get_insights(
    as_of: Optional[date] = Query(None, description="Defaults to today"),
    workspace: Workspace = Depends(current_workspace),
):
    report = workspace.insights(as_of)
    if report.has_data:
        logger.debug(
            f"📊 Insights as of {report.as_of}: {report.kpis.completed_jobs} completed jobs, "
            f"{len(report.insights)} insights"
        )
    return report
