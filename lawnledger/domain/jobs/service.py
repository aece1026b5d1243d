"""Job Ledger - searchable history of jobs with add, edit and delete"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ...exceptions import GatewayError, RecordNotFound, ValidationFailed
from ...schemas import JobDraft, JobRecord, JobStatus
from ...services.notification_service import OperationResult, cancelled
from ...shared.dates import display_date, parse_calendar_date
from ...shared.validators import optional_text, parse_minutes, validate_time_of_day
from .schemas import DurationBreakdown, JobForm, LedgerEntry

if TYPE_CHECKING:
    from ...services.workspace import Workspace

logger = logging.getLogger(__name__)

TASK_FIELDS = ("mow_time", "trim_time", "edge_time", "blow_time")

Confirm = Callable[[str], bool]

DURATION_FIELDS = {
    "total_time": "totalTime",
    "mow_time": "mowTime",
    "trim_time": "trimTime",
    "edge_time": "edgeTime",
    "blow_time": "blowTime",
    "drive_time": "driveTime",
}


def form_values(job: JobRecord) -> dict:
    """The form a job would be edited from"""
    return {
        "customerId": job.customer_id,
        "date": job.date.isoformat(),
        "status": job.status,
        "scheduledTime": job.scheduled_time,
        **{key: getattr(job, field) for field, key in DURATION_FIELDS.items()},
        "notes": job.notes,
    }


def format_duration(minutes: Optional[int]) -> str:
    """Format minutes as '1h 5m' / '45m'; 'N/A' when missing or zero"""
    if not minutes:
        return "N/A"
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def duration_breakdown(job: JobRecord) -> DurationBreakdown:
    tasks = {field: getattr(job, field) for field in TASK_FIELDS}
    task_minutes = sum(value for value in tasks.values() if value)
    unaccounted = job.total_time - task_minutes if job.total_time is not None else None
    formatted = {
        field: format_duration(value)
        for field, value in {**tasks, "drive_time": job.drive_time, "total_time": job.total_time}.items()
    }
    return DurationBreakdown(
        **tasks,
        drive_time=job.drive_time,
        total_time=job.total_time,
        task_minutes=task_minutes,
        unaccounted_minutes=unaccounted,
        formatted=formatted,
    )


class JobLedger:
    def __init__(self, workspace: "Workspace"):
        self.workspace = workspace

    def list_entries(
        self, query: str = "", status: Optional[JobStatus] = JobStatus.COMPLETED
    ) -> list[LedgerEntry]:
        """
        Jobs matching the search, most recent first.

        Args:
            query: Matched case-insensitively against customer name and address,
                and as a substring of the YYYY-MM-DD date
            status: Only jobs with this status; None for every job
        """
        ws = self.workspace
        needle = query.lower()
        entries = []
        for job in ws.jobs.snapshot():
            if status is not None and job.status is not status:
                continue
            customer = ws.customers.get(job.customer_id)
            if query:
                matches = query in job.date.isoformat()
                if customer is not None:
                    matches = (
                        matches
                        or needle in customer.name.lower()
                        or needle in customer.address.lower()
                    )
                if not matches:
                    continue
            entries.append(
                LedgerEntry(
                    job=job,
                    customer_name=customer.name if customer else "Unknown customer",
                    customer_address=customer.address if customer else "",
                    price=customer.price if customer else None,
                    breakdown=duration_breakdown(job),
                )
            )
        # sorted() is stable, so same-day jobs keep load order
        return sorted(entries, key=lambda entry: entry.job.date, reverse=True)

    def duration_breakdown(self, job_id: int) -> DurationBreakdown:
        job = self.workspace.jobs.get(job_id)
        if job is None:
            raise RecordNotFound("Job", job_id)
        return duration_breakdown(job)

    def _parse_form(self, form: JobForm) -> dict:
        """
        Validate the form against the customer snapshot.

        Raises:
            ValidationFailed: Missing customer/date, unknown customer, bad date/time
                or a negative duration
        """
        if form.customerId is None or not optional_text(form.date):
            raise ValidationFailed("Please select a customer and date")
        if self.workspace.customers.get(form.customerId) is None:
            raise ValidationFailed("Selected customer does not exist")
        try:
            job_date = parse_calendar_date(form.date)
        except ValueError:
            raise ValidationFailed("Date must be in YYYY-MM-DD format")

        durations = {field: parse_minutes(getattr(form, key)) for field, key in DURATION_FIELDS.items()}
        if any(minutes is not None and minutes < 0 for minutes in durations.values()):
            raise ValidationFailed("Durations cannot be negative")

        return {
            "customer_id": form.customerId,
            "date": job_date,
            "status": form.status,
            "scheduled_time": validate_time_of_day(form.scheduledTime),
            **durations,
            "notes": optional_text(form.notes),
        }

    async def create(self, form: JobForm) -> OperationResult:
        ws = self.workspace
        try:
            fields = self._parse_form(form)
        except ValidationFailed as e:
            return ws.notifier.rejected(str(e))

        try:
            job = await ws.gateway.add_job(JobDraft(**fields))
            ws.jobs.apply(job)
        except GatewayError as e:
            logger.error(f"❌ Error adding job for customer {fields['customer_id']}: {e}")
            await ws.refresh_quietly(ws.jobs)
            return ws.notifier.failure("Failed to save job. Please try again.")

        await ws.refresh_quietly(ws.jobs)
        logger.info(f"✅ Job added: {job.id} for customer {job.customer_id} on {job.date}")
        return ws.notifier.success("Job added successfully", entity_id=job.id)

    async def update(self, job_id: int, form: JobForm) -> OperationResult:
        """
        Edit a job. Only the fields present in the form change; a field sent
        blank clears the stored value.
        """
        ws = self.workspace
        existing = ws.jobs.get(job_id)
        if existing is None:
            raise RecordNotFound("Job", job_id)
        merged = JobForm(**{**form_values(existing), **form.model_dump(include=form.model_fields_set)})
        try:
            fields = self._parse_form(merged)
        except ValidationFailed as e:
            return ws.notifier.rejected(str(e))

        try:
            job = await ws.gateway.update_job(JobRecord(id=job_id, **fields))
            ws.jobs.apply(job)
        except GatewayError as e:
            logger.error(f"❌ Error updating job {job_id}: {e}")
            await ws.refresh_quietly(ws.jobs)
            return ws.notifier.failure("Failed to save job. Please try again.", entity_id=job_id)

        await ws.refresh_quietly(ws.jobs)
        logger.info(f"✅ Job updated: {job_id}")
        return ws.notifier.success("Job updated successfully", entity_id=job_id)

    def delete_prompt(self, job: JobRecord) -> str:
        name = self.workspace.customer_name(job.customer_id, "Unknown customer")
        return f"Delete job for {name} on {display_date(job.date)}?"

    async def delete(self, job_id: int, confirm: Confirm) -> OperationResult:
        ws = self.workspace
        job = ws.jobs.get(job_id)
        if job is None:
            raise RecordNotFound("Job", job_id)
        if not confirm(self.delete_prompt(job)):
            return cancelled("Job deletion cancelled")

        try:
            await ws.gateway.delete_job(job_id)
            ws.jobs.discard(job_id)
        except GatewayError as e:
            logger.error(f"❌ Error deleting job {job_id}: {e}")
            await ws.refresh_quietly(ws.jobs)
            return ws.notifier.failure("Failed to delete job. Please try again.", entity_id=job_id)

        await ws.refresh_quietly(ws.jobs)
        logger.info(f"✅ Job deleted: {job_id}")
        return ws.notifier.success("Job deleted successfully", entity_id=job_id)
