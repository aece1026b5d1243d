"""
Shared fixtures: an in-memory SQLite database behind the real SQLAlchemy
gateway, a gateway wrapper that records calls and injects failures, and a
workspace pinned to a fixed "today" (Monday 2026-10-19).
"""

import asyncio
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import lawnledger.models  # noqa: F401  (registers tables on Base.metadata)
from lawnledger.database import Base, make_engine
from lawnledger.exceptions import GatewayError
from lawnledger.schemas import (
    CustomerDraft,
    EquipmentDraft,
    GroupDraft,
    JobDraft,
    JobStatus,
    ServiceFrequency,
)
from lawnledger.services.gateway import SqlAlchemyGateway
from lawnledger.services.notification_service import Notifier
from lawnledger.services.workspace import Workspace

TODAY = date(2026, 10, 19)

GATEWAY_METHODS = (
    "list_customers",
    "list_jobs",
    "list_groups",
    "list_equipment",
    "create_customer",
    "update_customer",
    "add_job",
    "update_job",
    "delete_job",
    "create_customer_group",
    "update_customer_group",
    "delete_customer_group",
    "add_customer_to_group",
    "remove_customer_from_group",
    "create_equipment",
)


class FlakyGateway(SqlAlchemyGateway):
    """
    Real gateway that records every call by name.

    fail_on maps a method name to how many calls still succeed before every
    further call raises GatewayError (0 = fail right away).
    """

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.calls: list[str] = []
        self.fail_on: dict[str, int] = {}

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if name not in self.fail_on:
            return
        if self.fail_on[name] > 0:
            self.fail_on[name] -= 1
            return
        raise GatewayError(name.replace("_", " "))

    def mutations(self) -> list[str]:
        return [name for name in self.calls if not name.startswith("list_")]


def _tracked(name):
    async def method(self, *args, **kwargs):
        self._check(name)
        return await getattr(SqlAlchemyGateway, name)(self, *args, **kwargs)

    method.__name__ = name
    return method


for _name in GATEWAY_METHODS:
    setattr(FlakyGateway, _name, _tracked(_name))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def gateway(session_factory):
    return FlakyGateway(session_factory)


@pytest.fixture
def workspace(gateway):
    return Workspace(gateway, Notifier(), today=lambda: TODAY)


async def seed_standard(gateway: SqlAlchemyGateway) -> SimpleNamespace:
    north = await gateway.create_customer_group(GroupDraft(name="North Side"))
    south = await gateway.create_customer_group(
        GroupDraft(name="South Side", work_time_minutes=90, color="#16a34a")
    )

    alice = await gateway.create_customer(
        CustomerDraft(
            name="Alice Green",
            address="12 Elm St",
            price=60,
            frequency=ServiceFrequency.WEEKLY,
            next_service_date=date(2026, 10, 21),
        )
    )
    bob = await gateway.create_customer(
        CustomerDraft(
            name="Bob Stone",
            address="40 Oak Ave",
            price=40,
            frequency=ServiceFrequency.BIWEEKLY,
            next_service_date=date(2026, 10, 22),
        )
    )
    bob = await gateway.update_customer(bob.model_copy(update={"group_id": north.id}))
    await gateway.add_customer_to_group(north.id, bob.id)
    carol = await gateway.create_customer(
        CustomerDraft(name="Carol Park", address="7 Pine Rd", price=100, frequency=ServiceFrequency.MONTHLY)
    )

    anchor = await gateway.add_job(
        JobDraft(customer_id=alice.id, date=date(2026, 10, 21), scheduled_time="09:00")
    )
    followup = await gateway.add_job(JobDraft(customer_id=alice.id, date=date(2026, 10, 28)))
    bob_next = await gateway.add_job(JobDraft(customer_id=bob.id, date=date(2026, 10, 22)))
    done_alice = await gateway.add_job(
        JobDraft(
            customer_id=alice.id,
            date=date(2026, 10, 14),
            status=JobStatus.COMPLETED,
            total_time=60,
            mow_time=30,
            trim_time=10,
            edge_time=5,
            blow_time=5,
            drive_time=10,
        )
    )
    done_carol = await gateway.add_job(
        JobDraft(
            customer_id=carol.id,
            date=date(2026, 10, 10),
            status=JobStatus.COMPLETED,
            total_time=120,
            drive_time=20,
        )
    )

    mower = await gateway.create_equipment(
        EquipmentDraft(
            name="Mower",
            next_maintenance_date=date(2026, 10, 24),
            hours_used=100,
            alert_threshold=200,
        )
    )
    trimmer = await gateway.create_equipment(
        EquipmentDraft(
            name="Trimmer",
            next_maintenance_date=date(2026, 12, 1),
            hours_used=80,
            alert_threshold=75,
        )
    )

    return SimpleNamespace(
        north=north,
        south=south,
        alice=alice,
        bob=bob,
        carol=carol,
        anchor=anchor,
        followup=followup,
        bob_next=bob_next,
        done_alice=done_alice,
        done_carol=done_carol,
        mower=mower,
        trimmer=trimmer,
    )


@pytest.fixture
def data(gateway, workspace):
    seeded = run(seed_standard(gateway))
    run(workspace.refresh_all())
    gateway.calls.clear()
    return seeded
