"""Tests for the copy-on-write entity stores."""
from datetime import timedelta

import pytest


class TestEntityRepository:
    """Tests for the generic CRUD behavior, exercised through TaskStore."""

    def test_add_and_get(self, task_factory):
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        task = store.add(task_factory("t1"))

        assert store.get("t1") == task
        assert store.ids() == {"t1"}
        assert store.list() == [task]

    def test_add_duplicate_adds_nothing(self, task_factory):
        """Test that a batch with a duplicate id is rejected as a whole."""
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))

        with pytest.raises(ValueError, match="Task t1 already exists"):
            store.add_many([task_factory("t2"), task_factory("t1")])

        assert store.ids() == {"t1"}

    def test_update_merges_fields(self, task_factory):
        from plansync.models.task import TaskUpdate
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1", title="Old"))

        updated = store.update("t1", TaskUpdate(title="New"))

        assert updated.title == "New"
        assert updated.duration_minutes == 30
        assert store.get("t1").title == "New"

    def test_update_missing_is_noop(self, task_factory):
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))
        before = store.state

        assert store.update("ghost", {"title": "x"}) is None
        assert store.state is before

    def test_update_cannot_change_id(self, task_factory):
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))

        with pytest.raises(ValueError, match="id cannot be changed"):
            store.update("t1", {"id": "t2"})

    def test_invalid_update_leaves_state(self, task_factory):
        """Test that a change failing validation is not committed."""
        from pydantic import ValidationError
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))

        with pytest.raises(ValidationError):
            store.update("t1", {"duration_minutes": 0})

        assert store.get("t1").duration_minutes == 30

    def test_remove(self, task_factory):
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))

        assert store.remove("t1") is True
        assert store.remove("t1") is False
        assert store.list() == []

    def test_readers_keep_old_snapshot(self, task_factory):
        """Test that a snapshot taken before a mutation never changes."""
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add(task_factory("t1"))
        snapshot = store.state

        store.complete("t1")

        assert snapshot.tasks[0].status.value == "pending"
        assert store.get("t1").status.value == "completed"

    def test_failed_save_keeps_old_state(self, task_factory):
        """Test that nothing is swapped in when persisting fails."""
        from plansync.store.tasks import TaskStore

        class BrokenPersistence:
            def load(self, key):
                return None

            def save(self, key, blob):
                raise OSError("disk full")

        store = TaskStore(BrokenPersistence())

        with pytest.raises(OSError):
            store.add(task_factory("t1"))

        assert store.list() == []


class TestTaskStore:
    """Tests for task-specific queries and transitions."""

    def test_by_date_and_objective(self, task_factory, now):
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add_many(
            [
                task_factory("t1", "obj-1", now),
                task_factory("t2", "obj-2", now),
                task_factory("t3", "obj-1", now + timedelta(days=1)),
            ]
        )

        assert {t.id for t in store.by_date(now.date())} == {"t1", "t2"}
        assert {t.id for t in store.by_objective("obj-1")} == {"t1", "t3"}

    def test_complete_skip_start(self, task_factory, now):
        from plansync.models.task import TaskStatus
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add_many([task_factory("t1"), task_factory("t2"), task_factory("t3")])

        assert store.complete("t1", now).completed_at == now
        skipped = store.skip("t2", "Traveling")
        assert skipped.status == TaskStatus.SKIPPED
        assert skipped.skipped_reason == "Traveling"
        assert store.start("t3").status == TaskStatus.IN_PROGRESS
        assert store.complete("ghost") is None

    def test_mark_overdue(self, task_factory, now):
        """Test that only open tasks past their window turn overdue."""
        from plansync.models.task import TaskStatus
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add_many(
            [
                task_factory("late", scheduled_at=now - timedelta(hours=2)),
                task_factory("running", scheduled_at=now - timedelta(minutes=10)),
                task_factory(
                    "done",
                    scheduled_at=now - timedelta(hours=2),
                    status="completed",
                    completed_at=now,
                ),
            ]
        )

        changed = store.mark_overdue(now)

        assert [t.id for t in changed] == ["late"]
        assert store.get("late").status == TaskStatus.OVERDUE
        assert store.get("running").status == TaskStatus.PENDING
        assert store.mark_overdue(now) == []

    def test_mark_overdue_failed_save(self, task_factory, now, failing_saves):
        """Test that a failed save raises and leaves every task open."""
        from plansync.models.task import TaskStatus
        from plansync.store.tasks import TaskStore

        store = TaskStore(failing_saves)
        store.add(task_factory("late", scheduled_at=now - timedelta(hours=2)))
        failing_saves.failing_keys.add("tasks")

        with pytest.raises(OSError):
            store.mark_overdue(now)

        assert store.get("late").status == TaskStatus.PENDING

        failing_saves.failing_keys.clear()
        assert [t.id for t in store.mark_overdue(now)] == ["late"]

    def test_confirm_remote(self, task_factory):
        """Test that confirmed ids are tracked for known tasks only."""
        from plansync.store.tasks import TaskStore

        store = TaskStore()
        store.add_many([task_factory("t1"), task_factory("t2")])

        store.confirm_remote(["t1", "ghost"])

        assert [t.id for t in store.unconfirmed()] == ["t2"]
        assert store.state.remote_ids == frozenset({"t1"})

        store.remove("t1")
        assert store.state.remote_ids == frozenset()

    def test_confirmed_ids_reload(self, task_factory, failing_saves):
        from plansync.store.tasks import TaskStore

        TaskStore(failing_saves).add(task_factory("t1"))
        TaskStore(failing_saves).confirm_remote(["t1"])

        assert TaskStore(failing_saves).unconfirmed() == []


class TestObjectiveStore:
    """Tests for the active objective bookkeeping."""

    def test_first_objective_becomes_active(self, objective_factory):
        from plansync.store.objectives import ObjectiveStore

        store = ObjectiveStore()
        store.add(objective_factory("o1"))
        store.add(objective_factory("o2"))

        assert store.active_objective_id == "o1"
        assert store.get_active().id == "o1"

    def test_set_active_unknown_rejected(self, objective_factory):
        from plansync.store.objectives import ObjectiveStore

        store = ObjectiveStore()
        store.add(objective_factory("o1"))

        with pytest.raises(ValueError, match="Objective not found"):
            store.set_active("ghost")

    def test_removing_active_moves_focus(self, objective_factory):
        from plansync.store.objectives import ObjectiveStore

        store = ObjectiveStore()
        store.add_many([objective_factory("o1"), objective_factory("o2")])

        store.remove("o1")

        assert store.active_objective_id == "o2"
        store.remove("o2")
        assert store.active_objective_id is None

    def test_update_bumps_updated_at(self, objective_factory, clock):
        from plansync.store.objectives import ObjectiveStore

        store = ObjectiveStore(clock=clock)
        store.add(objective_factory("o1"))
        clock.advance(hours=1)

        updated = store.update("o1", {"name": "Renamed"})

        assert updated.name == "Renamed"
        assert updated.updated_at == clock()
        assert updated.created_at < updated.updated_at


class TestScheduleStore:
    """Tests for weekday filtering."""

    def test_for_weekday(self):
        from plansync.models.schedule import TimeBlock
        from plansync.store.schedule import ScheduleStore

        store = ScheduleStore()
        store.add_many(
            [
                TimeBlock(id="b1", start_time="18:00", end_time="19:00"),
                TimeBlock(id="b2", start_time="06:00", end_time="07:00", is_recurring=True),
                TimeBlock(
                    id="b3",
                    start_time="09:00",
                    end_time="17:00",
                    type="work",
                    is_recurring=True,
                    recurring_days=[1, 2, 3, 4, 5],
                ),
            ]
        )

        assert [b.id for b in store.for_weekday(1)] == ["b2", "b3", "b1"]
        assert [b.id for b in store.for_weekday(0)] == ["b2", "b1"]


class TestStatusAndSettingsStores:
    """Tests for the snapshot-only stores."""

    def test_status_for_returns_latest(self, now):
        from plansync.models.status import DailyStatus, ObjectiveStatus
        from plansync.store.status import StatusStore

        store = StatusStore()
        store.add_daily_status(
            DailyStatus(date=now.date(), objective_id="o1", status=ObjectiveStatus.ON_TRACK)
        )
        latest = store.add_daily_status(
            DailyStatus(date=now.date(), objective_id="o1", status=ObjectiveStatus.PAUSED)
        )

        assert store.status_for(now.date()) == latest
        assert len(store.daily_statuses()) == 2

    def test_settings_updates(self):
        from plansync.models.settings import NotificationPreferenceUpdate
        from plansync.store.settings import SettingsStore

        store = SettingsStore()

        store.update_notification_preference(NotificationPreferenceUpdate(advance_minutes=15))
        store.set_timezone("Europe/Berlin")
        state = store.complete_onboarding()

        assert state.notification_preference.advance_minutes == 15
        assert state.notification_preference.enabled is True
        assert state.timezone == "Europe/Berlin"
        assert state.onboarding_completed is True
