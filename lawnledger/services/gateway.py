"""
Persistence Gateway

Async create/read/update/delete contract over Customer, Job, CustomerGroup
and Equipment records. Every method raises GatewayError on failure so callers
can tell remote failures apart from local validation problems.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain.customers.repository import CustomerRepository, EquipmentRepository
from ..domain.groups.repository import GroupRepository
from ..domain.jobs.repository import JobRepository
from ..exceptions import GatewayError, RecordNotFound
from ..schemas import (
    CustomerDraft,
    CustomerRecord,
    EquipmentDraft,
    EquipmentRecord,
    GroupDraft,
    GroupRecord,
    JobDraft,
    JobRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistenceGateway(ABC):
    """Contract consumed by the boards and the entity stores"""

    # Collections
    @abstractmethod
    async def list_customers(self) -> list[CustomerRecord]: ...

    @abstractmethod
    async def list_jobs(self) -> list[JobRecord]: ...

    @abstractmethod
    async def list_groups(self) -> list[GroupRecord]: ...

    @abstractmethod
    async def list_equipment(self) -> list[EquipmentRecord]: ...

    # Customers
    @abstractmethod
    async def create_customer(self, draft: CustomerDraft) -> CustomerRecord: ...

    @abstractmethod
    async def update_customer(self, customer: CustomerRecord) -> CustomerRecord: ...

    # Jobs
    @abstractmethod
    async def add_job(self, draft: JobDraft) -> JobRecord: ...

    @abstractmethod
    async def update_job(self, job: JobRecord) -> JobRecord: ...

    @abstractmethod
    async def delete_job(self, job_id: int) -> None: ...

    # Customer groups
    @abstractmethod
    async def create_customer_group(self, draft: GroupDraft) -> GroupRecord: ...

    @abstractmethod
    async def update_customer_group(self, group: GroupRecord) -> GroupRecord: ...

    @abstractmethod
    async def delete_customer_group(self, group_id: int) -> None: ...

    @abstractmethod
    async def add_customer_to_group(self, group_id: int, customer_id: int) -> None: ...

    @abstractmethod
    async def remove_customer_from_group(self, group_id: int, customer_id: int) -> None: ...

    # Equipment (read-only to the core; create exists for seeding)
    @abstractmethod
    async def create_equipment(self, draft: EquipmentDraft) -> EquipmentRecord: ...


class SqlAlchemyGateway(PersistenceGateway):
    """Gateway backed by the SQLAlchemy repositories, one session per call"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _run(self, operation: str, work: Callable[[Session], T]) -> T:
        db = self.session_factory()
        try:
            return work(db)
        except RecordNotFound:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Gateway call '{operation}' failed: {e}")
            raise GatewayError(operation) from e
        finally:
            db.close()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def list_customers(self) -> list[CustomerRecord]:
        return self._run(
            "fetch customers",
            lambda db: [CustomerRecord.model_validate(c) for c in CustomerRepository.get_customers(db)],
        )

    async def list_jobs(self) -> list[JobRecord]:
        return self._run(
            "fetch jobs",
            lambda db: [JobRecord.model_validate(j) for j in JobRepository.get_jobs(db)],
        )

    async def list_groups(self) -> list[GroupRecord]:
        return self._run(
            "fetch customer groups",
            lambda db: [GroupRecord.model_validate(g) for g in GroupRepository.get_groups(db)],
        )

    async def list_equipment(self) -> list[EquipmentRecord]:
        return self._run(
            "fetch equipment",
            lambda db: [
                EquipmentRecord.model_validate(e) for e in EquipmentRepository.get_equipment(db)
            ],
        )

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    async def create_customer(self, draft: CustomerDraft) -> CustomerRecord:
        def work(db: Session) -> CustomerRecord:
            fields = draft.model_dump()
            fields["frequency"] = draft.frequency.value
            customer = CustomerRepository.create_customer(db, **fields)
            return CustomerRecord.model_validate(customer)

        return self._run("create customer", work)

    async def update_customer(self, customer: CustomerRecord) -> CustomerRecord:
        def work(db: Session) -> CustomerRecord:
            row = CustomerRepository.get_customer_by_id(db, customer.id)
            if not row:
                raise RecordNotFound("Customer", customer.id)
            if customer.group_id is not None and not GroupRepository.get_group_by_id(
                db, customer.group_id
            ):
                raise RecordNotFound("CustomerGroup", customer.group_id)
            fields = customer.model_dump(exclude={"id"})
            fields["frequency"] = customer.frequency.value
            return CustomerRecord.model_validate(
                CustomerRepository.replace_customer(db, row, **fields)
            )

        return self._run("update customer", work)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    async def add_job(self, draft: JobDraft) -> JobRecord:
        def work(db: Session) -> JobRecord:
            if not CustomerRepository.get_customer_by_id(db, draft.customer_id):
                raise RecordNotFound("Customer", draft.customer_id)
            fields = draft.model_dump()
            fields["status"] = draft.status.value
            return JobRecord.model_validate(JobRepository.create_job(db, **fields))

        return self._run("add job", work)

    async def update_job(self, job: JobRecord) -> JobRecord:
        def work(db: Session) -> JobRecord:
            row = JobRepository.get_job_by_id(db, job.id)
            if not row:
                raise RecordNotFound("Job", job.id)
            if not CustomerRepository.get_customer_by_id(db, job.customer_id):
                raise RecordNotFound("Customer", job.customer_id)
            fields = job.model_dump(exclude={"id"})
            fields["status"] = job.status.value
            return JobRecord.model_validate(JobRepository.replace_job(db, row, **fields))

        return self._run("update job", work)

    async def delete_job(self, job_id: int) -> None:
        def work(db: Session) -> None:
            row = JobRepository.get_job_by_id(db, job_id)
            if not row:
                raise RecordNotFound("Job", job_id)
            JobRepository.delete_job(db, row)

        self._run("delete job", work)

    # ------------------------------------------------------------------
    # Customer groups
    # ------------------------------------------------------------------

    async def create_customer_group(self, draft: GroupDraft) -> GroupRecord:
        def work(db: Session) -> GroupRecord:
            fields = draft.model_dump()
            fields["customer_ids"] = list(dict.fromkeys(draft.customer_ids))
            return GroupRecord.model_validate(GroupRepository.create_group(db, **fields))

        return self._run("create customer group", work)

    async def update_customer_group(self, group: GroupRecord) -> GroupRecord:
        def work(db: Session) -> GroupRecord:
            row = GroupRepository.get_group_by_id(db, group.id)
            if not row:
                raise RecordNotFound("CustomerGroup", group.id)
            fields = group.model_dump(exclude={"id"})
            fields["customer_ids"] = list(dict.fromkeys(group.customer_ids))
            return GroupRecord.model_validate(GroupRepository.update_group(db, row, **fields))

        return self._run("update customer group", work)

    async def delete_customer_group(self, group_id: int) -> None:
        def work(db: Session) -> None:
            row = GroupRepository.get_group_by_id(db, group_id)
            if not row:
                raise RecordNotFound("CustomerGroup", group_id)
            GroupRepository.delete_group(db, row)

        self._run("delete customer group", work)

    async def add_customer_to_group(self, group_id: int, customer_id: int) -> None:
        def work(db: Session) -> None:
            row = GroupRepository.get_group_by_id(db, group_id)
            if not row:
                raise RecordNotFound("CustomerGroup", group_id)
            members = list(row.customer_ids or [])
            if customer_id not in members:
                GroupRepository.set_members(db, row, members + [customer_id])

        self._run("add customer to group", work)

    async def remove_customer_from_group(self, group_id: int, customer_id: int) -> None:
        def work(db: Session) -> None:
            row = GroupRepository.get_group_by_id(db, group_id)
            if not row:
                raise RecordNotFound("CustomerGroup", group_id)
            members = [m for m in (row.customer_ids or []) if m != customer_id]
            GroupRepository.set_members(db, row, members)

        self._run("remove customer from group", work)

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    async def create_equipment(self, draft: EquipmentDraft) -> EquipmentRecord:
        return self._run(
            "create equipment",
            lambda db: EquipmentRecord.model_validate(
                EquipmentRepository.create_equipment(db, **draft.model_dump())
            ),
        )
