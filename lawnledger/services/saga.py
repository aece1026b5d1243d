"""
Compensating saga for multi-call gateway sequences.

Usage:
    async with Saga("assign customer") as saga:
        await saga.step("set group", set_group, compensation=restore_group)
        await saga.step("add member", add_member, compensation=remove_member)

If a step raises, every compensation recorded so far runs in reverse order and
the original error is re-raised as SagaFailed. Compensation errors are logged
and attached to the SagaFailed rather than masking the original error.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from ..exceptions import SagaFailed

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[Any]]


class Saga:
    def __init__(self, name: str):
        self.name = name
        self._compensations: list[tuple[str, Action]] = []
        self._current_step: Optional[str] = None
        self.completed_steps: list[str] = []

    async def step(self, label: str, action: Action, compensation: Optional[Action] = None):
        self._current_step = label
        result = await action()
        self.completed_steps.append(label)
        if compensation is not None:
            self._compensations.append((label, compensation))
        self._current_step = None
        return result

    async def compensate(self) -> list[Exception]:
        errors: list[Exception] = []
        for label, compensation in reversed(self._compensations):
            try:
                await compensation()
                logger.info(f"↩️ {self.name}: compensated '{label}'")
            except Exception as e:
                logger.error(f"❌ {self.name}: compensation for '{label}' failed: {e}")
                errors.append(e)
        self._compensations.clear()
        return errors

    async def __aenter__(self) -> "Saga":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False
        failed_step = self._current_step or "unknown step"
        logger.warning(f"⚠️ {self.name} failed at '{failed_step}': {exc}")
        errors = await self.compensate()
        raise SagaFailed(self.name, failed_step, exc, errors) from exc
