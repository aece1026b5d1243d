"""
Entity stores.

Each store owns one authoritative collection fetched through the gateway and
hands out immutable snapshots. Only the coordinating layer writes to a store,
and only after the gateway has confirmed the write.
"""

import logging
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[["EntityStore"], None]


class EntityStore(Generic[T]):
    """Read-only snapshot holder with an idempotent refresh"""

    def __init__(self, name: str, loader: Callable[[], Awaitable[Sequence[T]]]):
        self.name = name
        self._loader = loader
        self._items: tuple[T, ...] = ()
        self._listeners: list[Listener] = []
        self.version = 0
        self.loaded = False

    def snapshot(self) -> tuple[T, ...]:
        return self._items

    def get(self, record_id) -> Optional[T]:
        for item in self._items:
            if item.id == record_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    async def refresh(self) -> tuple[T, ...]:
        """Re-fetch the authoritative list; raises GatewayError on failure"""
        items = tuple(await self._loader())
        self.loaded = True
        self._replace(items)
        logger.debug(f"📊 Refreshed {self.name}: {len(items)} records")
        return self._items

    def apply(self, record: T) -> None:
        """Swap in a gateway-confirmed record, keeping load order"""
        items = list(self._items)
        for index, item in enumerate(items):
            if item.id == record.id:
                items[index] = record
                break
        else:
            items.append(record)
        self._replace(tuple(items))

    def discard(self, record_id) -> None:
        self._replace(tuple(item for item in self._items if item.id != record_id))

    def _replace(self, items: tuple[T, ...]) -> None:
        if items == self._items:
            return
        self._items = items
        self.version += 1
        for listener in self._listeners:
            listener(self)
