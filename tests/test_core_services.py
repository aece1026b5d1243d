from datetime import date

import pytest

from conftest import TODAY, run
from lawnledger.exceptions import DragStateError, SagaFailed
from lawnledger.schemas import CustomerRecord
from lawnledger.services.drag_state import DragPhase, DragSlot
from lawnledger.services.notification_service import (
    NotificationLevel,
    Notifier,
    OperationStatus,
    cancelled,
    unchanged,
)
from lawnledger.services.saga import Saga
from lawnledger.services.stores import EntityStore


class TestEntityStore:
    def _store(self, rows):
        async def loader():
            return list(rows)

        return EntityStore("customers", loader)

    def test_refresh_is_idempotent(self):
        rows = [CustomerRecord(id=1, name="A"), CustomerRecord(id=2, name="B")]
        store = self._store(rows)
        seen = []
        store.subscribe(lambda s: seen.append(s.version))

        first = run(store.refresh())
        second = run(store.refresh())

        assert first == second
        assert store.version == 1
        assert seen == [1]
        assert store.loaded

    def test_apply_replaces_in_place_and_appends_new(self):
        store = self._store([CustomerRecord(id=1, name="A"), CustomerRecord(id=2, name="B")])
        run(store.refresh())

        store.apply(CustomerRecord(id=1, name="A2"))
        store.apply(CustomerRecord(id=3, name="C"))

        assert [c.name for c in store.snapshot()] == ["A2", "B", "C"]
        assert store.get(3).name == "C"
        assert store.get(42) is None

    def test_discard(self):
        store = self._store([CustomerRecord(id=1, name="A")])
        run(store.refresh())
        store.discard(1)
        assert len(store) == 0

    def test_snapshots_are_immutable(self):
        store = self._store([CustomerRecord(id=1, name="A")])
        snapshot = run(store.refresh())
        assert isinstance(snapshot, tuple)
        with pytest.raises(Exception):
            snapshot[0].name = "changed"


class TestSaga:
    def test_compensates_in_reverse_order(self):
        log = []

        async def ok(label):
            log.append(label)

        async def boom():
            raise RuntimeError("write failed")

        async def scenario():
            async with Saga("demo") as saga:
                await saga.step("one", lambda: ok("one"), compensation=lambda: ok("undo one"))
                await saga.step("two", lambda: ok("two"), compensation=lambda: ok("undo two"))
                await saga.step("three", boom, compensation=lambda: ok("undo three"))

        with pytest.raises(SagaFailed) as info:
            run(scenario())

        assert log == ["one", "two", "undo two", "undo one"]
        assert info.value.step == "three"
        assert info.value.fully_compensated
        assert isinstance(info.value.cause, RuntimeError)

    def test_compensation_errors_are_collected(self):
        async def ok():
            return None

        async def boom():
            raise RuntimeError("nope")

        async def scenario():
            async with Saga("demo") as saga:
                await saga.step("one", ok, compensation=boom)
                await saga.step("two", boom)

        with pytest.raises(SagaFailed) as info:
            run(scenario())

        assert not info.value.fully_compensated
        assert len(info.value.compensation_errors) == 1

    def test_success_returns_step_results(self):
        async def value():
            return 42

        async def scenario():
            async with Saga("demo") as saga:
                result = await saga.step("answer", value)
            return result, saga.completed_steps

        assert run(scenario()) == (42, ["answer"])


class TestDragSlot:
    def test_full_cycle(self):
        slot = DragSlot("test")
        slot.start(5)
        assert slot.state.phase is DragPhase.DRAGGING
        slot.over(date(2026, 10, 20))
        assert slot.hovered == date(2026, 10, 20)
        slot.leave()
        assert slot.state.phase is DragPhase.DRAGGING
        assert slot.hovered is None
        assert slot.drop(date(2026, 10, 21)) == (5, date(2026, 10, 21))
        slot.reset()
        assert not slot.active

    def test_drop_uses_hovered_target(self):
        slot = DragSlot("test")
        slot.start(1)
        slot.over("target")
        assert slot.drop() == (1, "target")

    def test_illegal_transitions(self):
        slot = DragSlot("test")
        with pytest.raises(DragStateError):
            slot.over("x")
        with pytest.raises(DragStateError):
            slot.drop("x")
        slot.start(1)
        with pytest.raises(DragStateError):
            slot.start(2)
        with pytest.raises(DragStateError):
            slot.drop()
        slot.cancel()
        assert slot.state.entity_id is None


class TestNotifier:
    def test_history_is_bounded(self):
        notifier = Notifier(limit=2)
        notifier.success("one")
        notifier.failure("two")
        notifier.rejected("three")
        assert [n.message for n in notifier.history] == ["two", "three"]
        assert notifier.latest.level is NotificationLevel.ERROR

    def test_sink_failures_do_not_break_emission(self):
        notifier = Notifier()
        received = []

        def broken(_notification):
            raise RuntimeError("sink down")

        notifier.add_sink(broken)
        notifier.add_sink(received.append)
        result = notifier.success("saved", entity_id=3)

        assert result.ok
        assert result.entity_id == 3
        assert [n.message for n in received] == ["saved"]

    def test_silent_results(self):
        assert cancelled("no").status is OperationStatus.CANCELLED
        assert not cancelled("no").ok
        assert unchanged().ok


class TestWorkspace:
    def test_insights_cache_invalidated_by_store_change(self, workspace, data):
        first = workspace.insights()
        assert workspace.insights() is first
        assert first.as_of == TODAY

        workspace.customers.apply(data.carol.model_copy(update={"price": 200}))

        second = workspace.insights()
        assert second is not first
        assert second.kpis.total_revenue == 260

    def test_refresh_quietly_swallows_gateway_errors(self, workspace, gateway, data):
        gateway.fail_on["list_jobs"] = 0
        run(workspace.refresh_quietly(workspace.jobs, workspace.customers))
        assert "list_customers" in gateway.calls
        assert len(workspace.jobs) == 5
