from datetime import date

import pytest

from conftest import run
from lawnledger.domain.scheduling.schemas import CalendarView, NavigationAction, QuickEditForm
from lawnledger.exceptions import DragStateError, RecordNotFound
from lawnledger.services.drag_state import DragPhase
from lawnledger.services.notification_service import NotificationLevel, OperationStatus


@pytest.fixture
def board(workspace, data):
    return workspace.schedule_board


def cell(days, day):
    return next(d for d in days if d.date == day)


class TestCalendar:
    def test_month_grid_has_42_days_from_sunday(self, board):
        days = board.month_grid()
        assert len(days) == 42
        assert days[0].date == date(2026, 9, 27)
        assert days[-1].date == date(2026, 11, 7)
        assert days[0].in_month is False
        assert cell(days, date(2026, 10, 1)).in_month is True

    def test_today_and_past_flags(self, board):
        days = board.month_grid()
        assert cell(days, date(2026, 10, 19)).is_today
        assert cell(days, date(2026, 10, 18)).is_past
        assert not cell(days, date(2026, 10, 20)).is_past

    def test_jobs_bucketed_by_date(self, board, data):
        days = board.month_grid()
        anchor_day = cell(days, date(2026, 10, 21))
        assert [j.job.id for j in anchor_day.jobs] == [data.anchor.id]
        assert anchor_day.jobs[0].customer_name == "Alice Green"
        assert anchor_day.jobs[0].draggable

        done_day = cell(days, date(2026, 10, 14))
        assert done_day.jobs[0].draggable is False

    def test_due_and_projected_customers(self, board, data):
        days = board.month_grid()
        assert [c.id for c in cell(days, date(2026, 10, 21)).due_customers] == [data.alice.id]
        # weekly: one week after the next service date
        assert [c.id for c in cell(days, date(2026, 10, 28)).projected_customers] == [data.alice.id]
        # biweekly: two weeks after
        assert [c.id for c in cell(days, date(2026, 11, 5)).projected_customers] == [data.bob.id]

    def test_month_navigation(self, board):
        board.next_month()
        assert board.displayed_month == date(2026, 11, 1)
        assert board.month_grid()[0].date == date(2026, 11, 1)

        board.navigate(NavigationAction.PREVIOUS)
        board.navigate(NavigationAction.PREVIOUS)
        assert board.displayed_month == date(2026, 9, 1)

        board.go_to_today()
        assert board.anchor == date(2026, 10, 19)

    def test_week_view(self, board):
        board.set_view(CalendarView.WEEK)
        calendar = board.calendar()
        assert [d.date for d in calendar.days][0] == date(2026, 10, 18)
        assert len(calendar.days) == 7
        assert calendar.title == "Oct 18 - Oct 24, 2026"

        board.navigate(NavigationAction.NEXT)
        assert board.week_days()[0].date == date(2026, 10, 25)

    def test_month_title(self, board):
        assert board.calendar().title == "October 2026"


class TestDragAndDrop:
    def test_moving_anchor_job_moves_next_service_date(self, board, workspace, gateway, data):
        board.start_drag(data.anchor.id)
        board.drag_over(date(2026, 10, 23))
        result = run(board.drop())

        assert result.status is OperationStatus.SUCCEEDED
        assert workspace.jobs.get(data.anchor.id).date == date(2026, 10, 23)
        assert workspace.customers.get(data.alice.id).next_service_date == date(2026, 10, 23)
        assert workspace.notifier.latest.message == "Moved Alice Green to Fri, Oct 23"
        assert board.drag.state.phase is DragPhase.IDLE
        assert gateway.mutations() == ["update_job", "update_customer"]

        # persisted, not just local
        stored = {j.id: j for j in run(gateway.list_jobs())}
        assert stored[data.anchor.id].date == date(2026, 10, 23)

    def test_moving_other_job_leaves_next_service_date(self, board, workspace, gateway, data):
        board.start_drag(data.followup.id)
        result = run(board.drop(date(2026, 10, 30)))

        assert result.ok
        assert workspace.jobs.get(data.followup.id).date == date(2026, 10, 30)
        assert workspace.customers.get(data.alice.id).next_service_date == date(2026, 10, 21)
        assert gateway.mutations() == ["update_job"]

    def test_same_date_drop_is_a_no_op(self, board, workspace, gateway, data):
        board.start_drag(data.anchor.id)
        result = run(board.drop(date(2026, 10, 21)))

        assert result.status is OperationStatus.UNCHANGED
        assert gateway.mutations() == []
        assert workspace.notifier.history == []
        assert not board.drag.active

    def test_customer_update_failure_reverts_job(self, board, workspace, gateway, data):
        gateway.fail_on["update_customer"] = 0
        board.start_drag(data.anchor.id)
        result = run(board.drop(date(2026, 10, 23)))

        assert result.status is OperationStatus.FAILED
        assert workspace.jobs.get(data.anchor.id).date == date(2026, 10, 21)
        assert workspace.customers.get(data.alice.id).next_service_date == date(2026, 10, 21)
        stored = {j.id: j for j in run(gateway.list_jobs())}
        assert stored[data.anchor.id].date == date(2026, 10, 21)
        assert workspace.notifier.latest.level is NotificationLevel.ERROR
        assert workspace.notifier.latest.message == "Failed to move job. Please try again."
        assert not board.drag.active

    def test_job_update_failure_touches_nothing_else(self, board, workspace, gateway, data):
        gateway.fail_on["update_job"] = 0
        board.start_drag(data.anchor.id)
        result = run(board.drop(date(2026, 10, 23)))

        assert result.status is OperationStatus.FAILED
        assert "update_customer" not in gateway.calls
        assert workspace.jobs.get(data.anchor.id).date == date(2026, 10, 21)

    def test_completed_jobs_cannot_be_dragged(self, board, data):
        with pytest.raises(DragStateError):
            board.start_drag(data.done_alice.id)
        assert not board.drag.active

    def test_unknown_job(self, board):
        with pytest.raises(RecordNotFound):
            board.start_drag(9999)

    def test_drop_without_target_still_clears_slot(self, board, data):
        board.start_drag(data.anchor.id)
        with pytest.raises(DragStateError):
            run(board.drop())
        assert not board.drag.active

    def test_one_drag_at_a_time(self, board, data):
        board.start_drag(data.anchor.id)
        with pytest.raises(DragStateError):
            board.start_drag(data.followup.id)

    def test_reschedule_by_id_rejects_completed(self, board, data):
        with pytest.raises(DragStateError):
            run(board.reschedule_job(data.done_carol.id, date(2026, 10, 25)))


class TestQuickEdit:
    def test_edit_updates_job_and_customer_price(self, board, workspace, gateway, data):
        form = QuickEditForm(scheduledTime="14:30", notes=" back gate ", price="75")
        result = run(board.quick_edit(data.anchor.id, form))

        assert result.ok
        job = workspace.jobs.get(data.anchor.id)
        assert job.scheduled_time == "14:30"
        assert job.notes == "back gate"
        assert workspace.customers.get(data.alice.id).price == 75
        assert workspace.notifier.latest.message == "Job updated successfully"

    def test_unchanged_price_skips_customer_write(self, board, gateway, data):
        run(board.quick_edit(data.anchor.id, QuickEditForm(price="60")))
        assert gateway.mutations() == ["update_job"]

    def test_bad_time_is_rejected_locally(self, board, gateway, data):
        result = run(board.quick_edit(data.anchor.id, QuickEditForm(scheduledTime="9am")))
        assert result.status is OperationStatus.REJECTED
        assert gateway.mutations() == []
