"""Tests for tasks and the read-only task set."""

import pytest

from core.task import Task, TaskSet, as_task_set, create_task


def test_create_task_sets_fields():
    task = create_task(3, "Lausanne", "Geneva", weight=7)

    assert task.task_id == 3
    assert task.weight == 7
    assert task.pickup_city == "Lausanne"
    assert task.delivery_city == "Geneva"
    assert str(task) == "Task3(Lausanne→Geneva)"


@pytest.mark.parametrize("task_id, weight", [(-1, 5), (1, 0), (1, -3)])
def test_task_rejects_invalid_values(task_id, weight):
    with pytest.raises(ValueError):
        Task(task_id=task_id, weight=weight, pickup_city="A", delivery_city="B")


def test_task_is_immutable_and_hashable():
    task = create_task(1, "A", "B", weight=2)

    with pytest.raises(AttributeError):
        task.weight = 5  # type: ignore[misc]
    assert {task: "ok"}[create_task(1, "A", "B", weight=2)] == "ok"


def test_task_set_preserves_insertion_order():
    tasks = [create_task(i, "A", "B", weight=i + 1) for i in (4, 1, 3)]
    task_set = TaskSet(tasks)

    assert [t.task_id for t in task_set] == [4, 1, 3]
    assert task_set.task_ids() == [4, 1, 3]
    assert task_set.get_all_tasks() == tasks
    assert len(task_set) == 3


def test_task_set_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        TaskSet([create_task(1, "A", "B"), create_task(1, "C", "D")])


def test_task_set_lookup_and_membership():
    first = create_task(1, "A", "B", weight=4)
    second = create_task(2, "B", "C", weight=9)
    task_set = TaskSet([first, second])

    assert task_set.get_task(2) is second
    assert task_set.get_task(5) is None
    assert 1 in task_set
    assert first in task_set
    assert create_task(1, "A", "B", weight=5) not in task_set


def test_task_set_aggregates():
    task_set = TaskSet([
        create_task(1, "A", "B", weight=4),
        create_task(2, "B", "C", weight=9),
        create_task(3, "C", "A", weight=9),
    ])

    assert task_set.total_weight() == 22
    assert str(task_set) == "TaskSet(total=3, weight=22)"


def test_as_task_set_wraps_iterables_only_once():
    task_set = TaskSet([create_task(1, "A", "B")])

    assert as_task_set(task_set) is task_set
    wrapped = as_task_set(t for t in task_set)
    assert isinstance(wrapped, TaskSet)
    assert wrapped.task_ids() == [1]
