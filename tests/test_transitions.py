# tests/test_transitions.py

from __future__ import annotations

import pytest

from taskmate.core.events import EventDispatcher, TimerCompleted
from taskmate.tasks.task_models import TaskStatus
from taskmate.tasks.task_persistence import TASKS_KEY
from taskmate.tasks.task_store import TaskStore
from taskmate.tasks.transitions import DELETE_QUESTION, MARK_DONE_QUESTION, StatusRules

from .fakes import FakePrompt, InMemoryKV


def test_list_checkbox_toggles(store: TaskStore, prompt: FakePrompt) -> None:
    rules = StatusRules(store, prompt)
    t = store.create(title="x")
    rules.toggle_from_list(t.id)
    assert store.find_by_id(t.id).status == TaskStatus.DONE
    rules.toggle_from_list(t.id)
    assert store.find_by_id(t.id).status == TaskStatus.TODO


@pytest.mark.parametrize("start", list(TaskStatus))
@pytest.mark.parametrize("column", list(TaskStatus))
def test_drop_is_absolute(store: TaskStore, prompt: FakePrompt, start: TaskStatus, column: TaskStatus) -> None:
    rules = StatusRules(store, prompt)
    t = store.create(title="x")
    store.set_status(t.id, start)
    rules.drop_on_column(t.id, column)
    assert store.find_by_id(t.id).status == column


def test_drop_on_own_column_only_rewrites(store: TaskStore, prompt: FakePrompt, kv: InMemoryKV) -> None:
    rules = StatusRules(store, prompt)
    store.create(title="a")
    t = store.create(title="b")
    store.set_status(t.id, TaskStatus.DOING)
    before_tasks = store.all()
    before_blob = kv.data[TASKS_KEY]
    writes = kv.writes

    rules.drop_on_column(t.id, "doing")

    assert store.all() == before_tasks
    assert kv.data[TASKS_KEY] == before_blob
    assert kv.writes == writes + 1


def test_drop_accepts_aliases_and_rejects_unknown_columns(store: TaskStore, prompt: FakePrompt) -> None:
    rules = StatusRules(store, prompt)
    t = store.create(title="x")
    rules.drop_on_column(t.id, "ip")
    assert store.find_by_id(t.id).status == TaskStatus.DOING
    with pytest.raises(ValueError):
        rules.drop_on_column(t.id, "archive")
    assert store.find_by_id(t.id).status == TaskStatus.DOING


def test_drop_of_deleted_task_is_ignored(store: TaskStore, prompt: FakePrompt) -> None:
    rules = StatusRules(store, prompt)
    t = store.create(title="x")
    store.delete(t.id)
    rules.drop_on_column(t.id, TaskStatus.DONE)
    assert store.count() == 0


def test_timer_completion_accepted_marks_done(store: TaskStore, dispatcher: EventDispatcher) -> None:
    prompt = FakePrompt(answers=[True])
    StatusRules(store, prompt).attach(dispatcher)
    t = store.create(title="x")

    dispatcher.publish(TimerCompleted(task_id=t.id, message="done!"))

    assert prompt.notifications == ["done!"]
    assert prompt.questions == [MARK_DONE_QUESTION]
    assert store.find_by_id(t.id).status == TaskStatus.DONE


def test_timer_completion_declined_keeps_status(store: TaskStore, dispatcher: EventDispatcher) -> None:
    prompt = FakePrompt(answers=[False])
    StatusRules(store, prompt).attach(dispatcher)
    t = store.create(title="x")

    dispatcher.publish(TimerCompleted(task_id=t.id, message="done!"))

    assert store.find_by_id(t.id).status == TaskStatus.TODO


def test_timer_completion_without_task_only_notifies(store: TaskStore, dispatcher: EventDispatcher) -> None:
    prompt = FakePrompt(default=True)
    StatusRules(store, prompt).attach(dispatcher)

    dispatcher.publish(TimerCompleted(task_id=None, message="done!"))
    dispatcher.publish(TimerCompleted(task_id="gone", message="again"))

    assert prompt.notifications == ["done!", "again"]
    assert prompt.questions == []


def test_confirm_delete(store: TaskStore) -> None:
    prompt = FakePrompt(answers=[False, True])
    rules = StatusRules(store, prompt)
    t = store.create(title="x")

    assert rules.confirm_delete(t.id) is False
    assert t.id in store
    assert rules.confirm_delete(t.id) is True
    assert t.id not in store
    assert prompt.questions == [DELETE_QUESTION, DELETE_QUESTION]
    assert rules.confirm_delete(t.id) is False


def test_confirm_delete_can_be_disabled(store: TaskStore, prompt: FakePrompt) -> None:
    rules = StatusRules(store, prompt, confirm_delete=False)
    t = store.create(title="x")
    assert rules.confirm_delete(t.id) is True
    assert prompt.questions == []


def test_timer_completion_with_failing_save_keeps_status(
    store: TaskStore, dispatcher: EventDispatcher, kv: InMemoryKV
) -> None:
    prompt = FakePrompt(answers=[True])
    StatusRules(store, prompt).attach(dispatcher)
    t = store.create(title="x")

    kv.fail_writes = True
    # The dispatcher logs the handler error; the status must not change in memory.
    dispatcher.publish(TimerCompleted(task_id=t.id, message="done!"))

    assert prompt.questions == [MARK_DONE_QUESTION]
    assert store.find_by_id(t.id).status == TaskStatus.TODO
