"""
Single-slot drag-and-drop state machine.

    Idle --start--> Dragging --over--> HoveringTarget
                       ^  <--leave--------'
    any --drop/cancel/reset--> Idle

At most one entity is in flight at a time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from ..exceptions import DragStateError

TargetT = TypeVar("TargetT")


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING = "hovering"


@dataclass(frozen=True)
class DragState(Generic[TargetT]):
    phase: DragPhase = DragPhase.IDLE
    entity_id: Optional[int] = None
    target: Optional[TargetT] = None


class DragSlot(Generic[TargetT]):
    def __init__(self, name: str):
        self.name = name
        self._state: DragState[TargetT] = DragState()

    @property
    def state(self) -> DragState[TargetT]:
        return self._state

    @property
    def active(self) -> bool:
        return self._state.phase is not DragPhase.IDLE

    @property
    def entity_id(self) -> Optional[int]:
        return self._state.entity_id

    @property
    def hovered(self) -> Optional[TargetT]:
        return self._state.target if self._state.phase is DragPhase.HOVERING else None

    def start(self, entity_id: int) -> DragState[TargetT]:
        if self.active:
            raise DragStateError(
                f"{self.name}: already dragging {self._state.entity_id}, drop or cancel first"
            )
        self._state = DragState(DragPhase.DRAGGING, entity_id)
        return self._state

    def over(self, target: TargetT) -> DragState[TargetT]:
        if not self.active:
            raise DragStateError(f"{self.name}: nothing is being dragged")
        self._state = DragState(DragPhase.HOVERING, self._state.entity_id, target)
        return self._state

    def leave(self) -> DragState[TargetT]:
        if self._state.phase is DragPhase.HOVERING:
            self._state = DragState(DragPhase.DRAGGING, self._state.entity_id)
        return self._state

    def drop(self, target: Optional[TargetT] = None) -> tuple[int, TargetT]:
        """Consume the slot. The caller must reset() once the drop completes."""
        if not self.active:
            raise DragStateError(f"{self.name}: nothing is being dragged")
        resolved = target if target is not None else self._state.target
        if resolved is None:
            raise DragStateError(f"{self.name}: no drop target")
        return self._state.entity_id, resolved

    def cancel(self) -> DragState[TargetT]:
        return self.reset()

    def reset(self) -> DragState[TargetT]:
        self._state = DragState()
        return self._state
