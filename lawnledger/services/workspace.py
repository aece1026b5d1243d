"""
Workspace - the coordinating layer.

Owns the gateway, the notification channel and one entity store per
collection. Boards receive the workspace and read snapshots from it; they
never hold mutable references to the collections. The insights report is
recomputed lazily whenever any collection changes.
"""

import logging
from datetime import date
from functools import cached_property, lru_cache
from typing import Callable, Optional

from fastapi import Depends

from ..database import SessionLocal
from ..schemas import CustomerRecord, EquipmentRecord, GroupRecord, JobRecord
from .gateway import PersistenceGateway, SqlAlchemyGateway
from .notification_service import Notifier
from .stores import EntityStore

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Optional[Notifier] = None,
        today: Callable[[], date] = date.today,
    ):
        self.gateway = gateway
        self.notifier = notifier or Notifier()
        self.today = today

        self.customers: EntityStore[CustomerRecord] = EntityStore("customers", gateway.list_customers)
        self.jobs: EntityStore[JobRecord] = EntityStore("jobs", gateway.list_jobs)
        self.groups: EntityStore[GroupRecord] = EntityStore("customer groups", gateway.list_groups)
        self.equipment: EntityStore[EquipmentRecord] = EntityStore("equipment", gateway.list_equipment)

        self._insights_cache = None
        for store in self.stores:
            store.subscribe(self._invalidate_insights)

    @property
    def stores(self) -> tuple[EntityStore, ...]:
        return (self.customers, self.jobs, self.groups, self.equipment)

    async def refresh_all(self) -> None:
        for store in self.stores:
            await store.refresh()

    async def ensure_loaded(self) -> None:
        for store in self.stores:
            if not store.loaded:
                await store.refresh()

    async def refresh_quietly(self, *stores: EntityStore) -> None:
        """Best-effort reconcile of local collections with the gateway"""
        for store in stores:
            try:
                await store.refresh()
            except Exception as e:
                logger.error(f"❌ Could not refresh {store.name} after failure: {e}")

    # ------------------------------------------------------------------
    # Boards (stateful: each holds its own drag slot)
    # ------------------------------------------------------------------

    @cached_property
    def schedule_board(self):
        from ..domain.scheduling.board import ScheduleBoard

        return ScheduleBoard(self)

    @cached_property
    def group_board(self):
        from ..domain.groups.service import GroupBoard

        return GroupBoard(self)

    @cached_property
    def job_ledger(self):
        from ..domain.jobs.service import JobLedger

        return JobLedger(self)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def insights(self, as_of: Optional[date] = None):
        from ..domain.insights.engine import build_insights

        as_of = as_of or self.today()
        cached = self._insights_cache
        if cached is not None and cached[0] == as_of:
            return cached[1]

        report = build_insights(
            self.customers.snapshot(),
            self.jobs.snapshot(),
            self.equipment.snapshot(),
            as_of,
        )
        self._insights_cache = (as_of, report)
        return report

    def _invalidate_insights(self, store: EntityStore) -> None:
        self._insights_cache = None
        logger.debug(f"Insights invalidated by change in {store.name}")

    def customer_name(self, customer_id: int, default: str = "job") -> str:
        customer = self.customers.get(customer_id)
        return customer.name if customer else default


@lru_cache(maxsize=1)
def get_workspace() -> Workspace:
    """Process-wide workspace bound to the configured database"""
    return Workspace(SqlAlchemyGateway(SessionLocal))


async def current_workspace(workspace: Workspace = Depends(get_workspace)) -> Workspace:
    """FastAPI dependency - loads every collection on first use"""
    await workspace.ensure_loaded()
    return workspace
