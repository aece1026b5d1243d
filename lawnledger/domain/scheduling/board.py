"""
Schedule Board

Month/week calendar over the job collection with drag-and-drop rescheduling.
Moving a customer's anchor job (the job dated on the customer's next service
date) moves the next service date along with it.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional

from ...exceptions import DragStateError, GatewayError, RecordNotFound, SagaFailed, ValidationFailed
from ...schemas import CustomerRecord, JobRecord, JobStatus
from ...services.drag_state import DragSlot, DragState
from ...services.notification_service import OperationResult, unchanged
from ...services.saga import Saga
from ...shared.dates import (
    add_months,
    first_of_month,
    next_service_date,
    short_display_date,
    sunday_on_or_before,
)
from ...shared.validators import optional_text, parse_price, validate_time_of_day
from .schemas import (
    CalendarDay,
    CalendarJob,
    CalendarResponse,
    CalendarView,
    NavigationAction,
    QuickEditForm,
)

if TYPE_CHECKING:
    from ...services.workspace import Workspace

logger = logging.getLogger(__name__)

GRID_DAYS = 42  # 6 weeks


def is_draggable(job: JobRecord) -> bool:
    """Completed jobs are immutable once finished"""
    if job.status is JobStatus.COMPLETED:
        return False
    if job.status in (JobStatus.SCHEDULED, JobStatus.IN_PROGRESS):
        return True
    raise ValueError(f"Unhandled job status: {job.status}")


class ScheduleBoard:
    """Calendar state plus the single-slot job drag"""

    def __init__(self, workspace: "Workspace"):
        self.workspace = workspace
        self.drag: DragSlot[date] = DragSlot("schedule board")
        self.view = CalendarView.MONTH
        self.anchor = workspace.today()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def displayed_month(self) -> date:
        return first_of_month(self.anchor)

    def set_view(self, view: CalendarView) -> None:
        self.view = view

    def navigate(self, action: NavigationAction) -> date:
        """Step by the unit of the current view"""
        if action is NavigationAction.TODAY:
            return self.go_to_today()
        if self.view is CalendarView.MONTH:
            if action is NavigationAction.PREVIOUS:
                return self.previous_month()
            return self.next_month()
        if action is NavigationAction.PREVIOUS:
            return self.previous_week()
        return self.next_week()

    def previous_month(self) -> date:
        self.anchor = add_months(self.displayed_month, -1)
        return self.anchor

    def next_month(self) -> date:
        self.anchor = add_months(self.displayed_month, 1)
        return self.anchor

    def previous_week(self) -> date:
        self.anchor -= timedelta(days=7)
        return self.anchor

    def next_week(self) -> date:
        self.anchor += timedelta(days=7)
        return self.anchor

    def go_to_today(self) -> date:
        self.anchor = self.workspace.today()
        return self.anchor

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def month_grid(self) -> list[CalendarDay]:
        """42 cells starting on the Sunday on/before the first of the displayed month"""
        start = sunday_on_or_before(self.displayed_month)
        return self._build_days(start, GRID_DAYS)

    def week_days(self) -> list[CalendarDay]:
        return self._build_days(sunday_on_or_before(self.anchor), 7)

    def calendar(self) -> CalendarResponse:
        if self.view is CalendarView.MONTH:
            days = self.month_grid()
            title = self.displayed_month.strftime("%B %Y")
        else:
            days = self.week_days()
            first, last = days[0].date, days[-1].date
            title = (
                f"{first.strftime('%b')} {first.day} - "
                f"{last.strftime('%b')} {last.day}, {last.year}"
            )
        return CalendarResponse(view=self.view, title=title, anchor=self.anchor, days=days)

    def jobs_for_date(self, day: date) -> list[JobRecord]:
        return [job for job in self.workspace.jobs.snapshot() if job.date == day]

    def _build_days(self, start: date, count: int) -> list[CalendarDay]:
        ws = self.workspace
        today = ws.today()
        month = self.displayed_month.month

        jobs_by_date: dict[date, list[JobRecord]] = defaultdict(list)
        for job in ws.jobs.snapshot():
            jobs_by_date[job.date].append(job)

        due: dict[date, list[CustomerRecord]] = defaultdict(list)
        projected: dict[date, list[CustomerRecord]] = defaultdict(list)
        for customer in ws.customers.snapshot():
            if not customer.next_service_date:
                continue
            due[customer.next_service_date].append(customer)
            following = next_service_date(customer.next_service_date, customer.frequency)
            projected[following].append(customer)

        days = []
        for offset in range(count):
            day = start + timedelta(days=offset)
            days.append(
                CalendarDay(
                    date=day,
                    in_month=day.month == month,
                    is_today=day == today,
                    is_past=day < today,
                    jobs=[
                        CalendarJob(
                            job=job,
                            customer_name=ws.customer_name(job.customer_id, "Unknown customer"),
                            draggable=is_draggable(job),
                        )
                        for job in jobs_by_date.get(day, [])
                    ],
                    due_customers=due.get(day, []),
                    projected_customers=projected.get(day, []),
                )
            )
        return days

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def start_drag(self, job_id: int) -> DragState:
        job = self.workspace.jobs.get(job_id)
        if job is None:
            raise RecordNotFound("Job", job_id)
        if not is_draggable(job):
            raise DragStateError("Completed jobs cannot be rescheduled")
        return self.drag.start(job_id)

    def drag_over(self, target_date: date) -> DragState:
        return self.drag.over(target_date)

    def drag_leave(self) -> DragState:
        return self.drag.leave()

    def cancel_drag(self) -> DragState:
        return self.drag.cancel()

    async def drop(self, target_date: Optional[date] = None) -> OperationResult:
        """Drop the dragged job on a day. The slot is cleared whatever happens."""
        try:
            job_id, target = self.drag.drop(target_date)
            job = self.workspace.jobs.get(job_id)
            if job is None:
                return self.workspace.notifier.failure("Job no longer exists", entity_id=job_id)
            return await self.reschedule(job, target)
        finally:
            self.drag.reset()

    async def reschedule_job(self, job_id: int, target_date: date) -> OperationResult:
        """Move a job by id without the drag gesture"""
        job = self.workspace.jobs.get(job_id)
        if job is None:
            raise RecordNotFound("Job", job_id)
        if not is_draggable(job):
            raise DragStateError("Completed jobs cannot be rescheduled")
        return await self.reschedule(job, target_date)

    async def reschedule(self, job: JobRecord, target_date: date) -> OperationResult:
        """
        Move a job to another day.

        The job write goes first; local state only changes after the gateway
        confirms it. If the job was its customer's anchor job, the customer's
        next service date follows. Any failure undoes the writes already made.
        """
        if target_date == job.date:
            return unchanged("Job is already scheduled on that date")

        ws = self.workspace
        customer = ws.customers.get(job.customer_id)
        is_anchor = customer is not None and customer.next_service_date == job.date
        moved = job.model_copy(update={"date": target_date})

        try:
            async with Saga(f"reschedule job {job.id}") as saga:
                confirmed = await saga.step(
                    "update job date",
                    lambda: ws.gateway.update_job(moved),
                    compensation=lambda: ws.gateway.update_job(job),
                )
                ws.jobs.apply(confirmed)
                await saga.step("refresh jobs", ws.jobs.refresh)

                if is_anchor:
                    await saga.step(
                        "move next service date",
                        lambda: ws.gateway.update_customer(
                            customer.model_copy(update={"next_service_date": target_date})
                        ),
                        compensation=lambda: ws.gateway.update_customer(customer),
                    )
                    await saga.step("refresh customers", ws.customers.refresh)
        except GatewayError as e:
            logger.error(f"❌ Error moving job {job.id} to {target_date}: {e}")
            if isinstance(e, SagaFailed) and e.fully_compensated:
                ws.jobs.apply(job)
            await ws.refresh_quietly(ws.jobs, ws.customers)
            return ws.notifier.failure("Failed to move job. Please try again.", entity_id=job.id)

        name = customer.name if customer else "job"
        logger.info(
            f"✅ Moved job {job.id} from {job.date} to {target_date}"
            + (" (next service date moved too)" if is_anchor else "")
        )
        return ws.notifier.success(
            f"Moved {name} to {short_display_date(target_date)}", entity_id=job.id
        )

    # ------------------------------------------------------------------
    # Quick edit
    # ------------------------------------------------------------------

    async def quick_edit(self, job_id: int, form: QuickEditForm) -> OperationResult:
        """Edit time, notes and status from the calendar; a new price goes to the customer"""
        ws = self.workspace
        job = ws.jobs.get(job_id)
        if job is None:
            raise RecordNotFound("Job", job_id)

        try:
            scheduled_time = validate_time_of_day(form.scheduledTime)
        except ValidationFailed as e:
            return ws.notifier.rejected(str(e))

        updated = job.model_copy(
            update={
                "scheduled_time": scheduled_time,
                "notes": optional_text(form.notes),
                "status": form.status,
            }
        )
        customer = ws.customers.get(job.customer_id)
        price = parse_price(form.price)
        price_changed = customer is not None and price is not None and price != customer.price

        try:
            async with Saga(f"edit job {job.id}") as saga:
                await saga.step(
                    "update job",
                    lambda: ws.gateway.update_job(updated),
                    compensation=lambda: ws.gateway.update_job(job),
                )
                if price_changed:
                    await saga.step(
                        "update customer price",
                        lambda: ws.gateway.update_customer(
                            customer.model_copy(update={"price": price})
                        ),
                        compensation=lambda: ws.gateway.update_customer(customer),
                    )
        except GatewayError as e:
            logger.error(f"❌ Error updating job {job.id}: {e}")
            await ws.refresh_quietly(ws.jobs, ws.customers)
            return ws.notifier.failure("Failed to update job", entity_id=job.id)

        await ws.refresh_quietly(ws.jobs, *((ws.customers,) if price_changed else ()))
        return ws.notifier.success("Job updated successfully", entity_id=job.id)
