from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..services.notification_service import Notification
from ..services.workspace import Workspace, get_workspace

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationFeed(BaseModel):
    count: int
    notifications: list[Notification]


@router.get("", response_model=NotificationFeed)
async def get_notifications(
    limit: int = Query(20, ge=1, le=100),
    workspace: Workspace = Depends(get_workspace),
):
    """Most recent notifications, newest first"""
    recent = list(reversed(workspace.notifier.history))[:limit]
    return NotificationFeed(count=len(recent), notifications=recent)


@router.delete("")
async def clear_notifications(workspace: Workspace = Depends(get_workspace)):
    workspace.notifier.clear()
    return {"message": "Notifications cleared"}
