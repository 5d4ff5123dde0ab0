# tests/test_focus_timer.py

from __future__ import annotations

import random

import pytest

from taskmate.core.events import EventDispatcher, TimerCompleted, TimerStarted, TimerStopped, TimerTicked
from taskmate.tasks.task_models import TaskStatus
from taskmate.tasks.task_store import TaskStore
from taskmate.tasks.transitions import StatusRules
from taskmate.timer.focus_timer import COMPLETION_MESSAGE, FocusTimer

from .fakes import EventRecorder, FakePrompt, ManualTickScheduler


@pytest.fixture()
def timer(store: TaskStore, scheduler: ManualTickScheduler, dispatcher: EventDispatcher) -> FocusTimer:
    return FocusTimer(store, scheduler, dispatcher)


def test_defaults(timer: FocusTimer) -> None:
    assert not timer.running
    assert timer.initial_duration_seconds == 25 * 60
    assert timer.time_left_seconds == 25 * 60
    assert timer.focused_task_id is None


def test_start_auto_focuses_first_open_task(store: TaskStore, timer: FocusTimer) -> None:
    older = store.create(title="older")
    done = store.create(title="done one")
    store.set_status(done.id, TaskStatus.DONE)

    timer.start()

    assert timer.running
    assert timer.focused_task_id == older.id


def test_start_with_no_open_tasks_stays_unfocused(store: TaskStore, timer: FocusTimer) -> None:
    t = store.create(title="x")
    store.set_status(t.id, TaskStatus.DONE)
    timer.start()
    assert timer.running
    assert timer.focused_task_id is None


def test_start_twice_schedules_one_tick(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.start()
    timer.start()
    assert len(scheduler.active) == 1
    scheduler.advance(3)
    assert timer.time_left_seconds == 25 * 60 - 3


def test_pause_keeps_remaining_time_and_cancels_tick(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.start()
    scheduler.advance(5)
    timer.stop()

    assert not timer.running
    assert scheduler.active == []
    scheduler.advance(10)
    assert timer.time_left_seconds == 25 * 60 - 5


def test_reset_restores_initial_and_goes_idle(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.start()
    scheduler.advance(7)
    timer.reset()

    assert not timer.running
    assert timer.time_left_seconds == timer.initial_duration_seconds
    scheduler.advance(3)
    assert timer.time_left_seconds == timer.initial_duration_seconds


def test_stale_handle_cannot_tick_after_reset(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.start()
    stale = scheduler.handles[0]
    timer.reset()
    timer.start()

    # Only the new session ticks.
    assert stale.cancelled
    scheduler.advance(1)
    assert timer.time_left_seconds == timer.initial_duration_seconds - 1


def test_set_preset(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.start()
    scheduler.advance(2)
    timer.set_preset(15)

    assert not timer.running
    assert timer.initial_duration_seconds == 15 * 60
    assert timer.time_left_seconds == 15 * 60
    with pytest.raises(ValueError):
        timer.set_preset(0)


def test_focus_and_unfocus_do_not_touch_time(store: TaskStore, timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    a = store.create(title="a")
    b = store.create(title="b")
    assert timer.focus_on(a.id)
    timer.start()
    scheduler.advance(4)

    assert timer.focus_on(b.id)
    assert not timer.focus_on("missing")
    assert timer.focused_task_id == b.id
    timer.unfocus()

    assert timer.running
    assert timer.focused_task_id is None
    assert timer.time_left_seconds == 25 * 60 - 4


def test_deleting_focused_task_unfocuses(store: TaskStore, timer: FocusTimer) -> None:
    t = store.create(title="x")
    timer.focus_on(t.id)
    store.delete(t.id)
    assert timer.focused_task_id is None
    assert timer.focused_task is None


def test_completion_scenario_marks_task_done_when_confirmed(
    store: TaskStore, scheduler: ManualTickScheduler, dispatcher: EventDispatcher
) -> None:
    prompt = FakePrompt(answers=[True])
    StatusRules(store, prompt).attach(dispatcher)
    timer = FocusTimer(store, scheduler, dispatcher)
    rec = EventRecorder(dispatcher)
    x = store.create(title="X")

    timer.set_duration_seconds(2)
    timer.focus_on(x.id)
    timer.start()
    scheduler.advance(1)
    assert timer.running
    assert store.find_by_id(x.id).status == TaskStatus.TODO
    scheduler.advance(1)

    assert not timer.running
    assert timer.time_left_seconds == 0
    completed = rec.of_type(TimerCompleted)
    assert completed == [TimerCompleted(task_id=x.id, message=COMPLETION_MESSAGE)]
    assert prompt.notifications == [COMPLETION_MESSAGE]
    assert store.find_by_id(x.id).status == TaskStatus.DONE
    assert [type(e) for e in rec.events if isinstance(e, (TimerStarted, TimerTicked, TimerStopped))] == [
        TimerStarted,
        TimerTicked,
        TimerTicked,
        TimerStopped,
    ]


def test_completion_declined_leaves_task(store: TaskStore, scheduler: ManualTickScheduler, dispatcher: EventDispatcher) -> None:
    prompt = FakePrompt(answers=[False])
    StatusRules(store, prompt).attach(dispatcher)
    timer = FocusTimer(store, scheduler, dispatcher)
    x = store.create(title="X")
    timer.set_duration_seconds(1)
    timer.focus_on(x.id)
    timer.start()
    scheduler.advance(1)

    assert prompt.questions
    assert store.find_by_id(x.id).status == TaskStatus.TODO


def test_manual_stop_has_no_completion(store: TaskStore, timer: FocusTimer, dispatcher: EventDispatcher) -> None:
    rec = EventRecorder(dispatcher)
    store.create(title="x")
    timer.start()
    timer.stop()
    assert rec.of_type(TimerCompleted) == []


def test_restart_after_completion_rewinds(timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    timer.set_duration_seconds(1)
    timer.start()
    scheduler.advance(1)
    assert timer.time_left_seconds == 0

    timer.start()
    assert timer.time_left_seconds == 1
    assert timer.running


def test_shutdown_cancels_and_detaches(store: TaskStore, timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    t = store.create(title="x")
    timer.focus_on(t.id)
    timer.start()
    timer.shutdown()
    assert scheduler.active == []
    store.delete(t.id)
    # Detached: no longer listens for deletions, lazy resolution still clears it.
    assert timer.focused_task_id == t.id
    assert timer.focused_task is None
    assert timer.focused_task_id is None


def test_time_bounds_hold_for_random_sessions(store: TaskStore, timer: FocusTimer, scheduler: ManualTickScheduler) -> None:
    rng = random.Random(3)
    store.create(title="x")
    for _ in range(500):
        action = rng.choice(["start", "stop", "reset", "preset", "seconds", "tick", "tick", "tick"])
        if action == "start":
            timer.start()
        elif action == "stop":
            timer.stop()
        elif action == "reset":
            timer.reset()
            assert timer.time_left_seconds == timer.initial_duration_seconds
            assert not timer.running
        elif action == "preset":
            timer.set_preset(rng.choice([15, 25, 45]))
        elif action == "seconds":
            timer.set_duration_seconds(rng.randint(1, 4))
        else:
            scheduler.advance(rng.randint(1, 3))

        assert timer.initial_duration_seconds > 0
        assert 0 <= timer.time_left_seconds <= timer.initial_duration_seconds
        assert len(scheduler.active) == (1 if timer.running else 0)


def test_dangling_focus_reads_as_none_and_is_dropped_on_start(
    store: TaskStore, scheduler: ManualTickScheduler
) -> None:
    # Timer on its own dispatcher: it never hears about the delete.
    timer = FocusTimer(store, scheduler, EventDispatcher())
    other = store.create(title="other")
    gone = store.create(title="gone")
    assert timer.focus_on(gone.id)

    store.delete(gone.id)

    assert timer.focused_task is None
    assert timer.focused_task_id == gone.id

    timer.start()
    assert timer.focused_task_id == other.id


def test_dangling_focus_is_not_reported_on_completion(store: TaskStore, scheduler: ManualTickScheduler) -> None:
    timer_events = EventDispatcher()
    recorder = EventRecorder(timer_events)
    timer = FocusTimer(store, scheduler, timer_events)
    t = store.create(title="x")
    timer.set_duration_seconds(1)
    timer.start()
    store.delete(t.id)

    scheduler.advance(1)

    completed = recorder.of_type(TimerCompleted)
    assert len(completed) == 1
    assert completed[0].task_id is None
    assert timer.focused_task_id is None
