"""Translate board outcomes into HTTP responses"""

import logging
from contextlib import contextmanager

from fastapi import HTTPException

from ..exceptions import DragStateError, RecordNotFound, ValidationFailed
from ..services.notification_service import OperationResult, OperationStatus

logger = logging.getLogger(__name__)

STATUS_CODES = {
    OperationStatus.REJECTED: 400,
    OperationStatus.CANCELLED: 409,
    OperationStatus.FAILED: 502,
}


def raise_for_result(result: OperationResult) -> OperationResult:
    """Pass successful results through; raise HTTPException otherwise"""
    if result.ok:
        return result
    raise HTTPException(status_code=STATUS_CODES[result.status], detail=result.message)


@contextmanager
def board_errors():
    """Map domain exceptions escaping a board call to HTTP errors"""
    try:
        yield
    except HTTPException:
        raise
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DragStateError as e:
        logger.warning(f"⚠️ Drag rejected: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
