"""Error taxonomy for the scheduling and analytics core"""

from typing import Optional


class LawnLedgerError(Exception):
    """Base class for all domain errors"""


class ValidationFailed(LawnLedgerError):
    """Input rejected locally, before any gateway call"""


class GatewayError(LawnLedgerError):
    """A persistence call failed"""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        super().__init__(message or f"Failed to {operation}")


class RecordNotFound(GatewayError):
    def __init__(self, entity: str, record_id):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"load {entity}", f"{entity} {record_id} not found")


class SagaFailed(GatewayError):
    """A multi-step sequence failed part way and was compensated"""

    def __init__(self, saga: str, step: str, cause: Exception, compensation_errors=None):
        self.saga = saga
        self.step = step
        self.cause = cause
        self.compensation_errors = list(compensation_errors or [])
        super().__init__(saga, f"{saga} failed at '{step}': {cause}")

    @property
    def fully_compensated(self) -> bool:
        return not self.compensation_errors


class DragStateError(LawnLedgerError):
    """Illegal drag-and-drop transition"""
