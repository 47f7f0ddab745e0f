"""
Task data structures
====================
Defines the transport task (Task) and the read-only task collection (TaskSet).

Task definition:
    Each task moves ``weight`` capacity units from ``pickup_city`` to
    ``delivery_city``.  A task is served by exactly one vehicle, which must
    pick it up before delivering it.

Design notes:
    - Task is immutable (attributes never change after creation)
    - TaskSet preserves the host's iteration order and is never shrunk by the
      planner; builders iterate it read-only
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Optional


City = Hashable


# ========== Task ==========

@dataclass(frozen=True)
class Task:
    """
    Pickup-and-delivery task

    Attributes:
        task_id: unique task identifier
        weight: capacity units occupied while the task is on board
        pickup_city: location where the load is collected
        delivery_city: location where the load is dropped off
    """
    task_id: int
    weight: int
    pickup_city: City
    delivery_city: City

    def __post_init__(self):
        if self.task_id < 0:
            raise ValueError(f"Task id must be non-negative: {self.task_id}")
        if self.weight <= 0:
            raise ValueError(f"Task {self.task_id} weight must be positive: {self.weight}")

    def __str__(self) -> str:
        return f"Task{self.task_id}({self.pickup_city}→{self.delivery_city})"

    def __repr__(self) -> str:
        return (f"Task(id={self.task_id}, "
                f"weight={self.weight}, "
                f"pickup={self.pickup_city!r}, "
                f"delivery={self.delivery_city!r})")


# ========== Task collection ==========

class TaskSet:
    """
    Ordered, read-only collection of tasks supplied by the host runtime.

    Iteration follows insertion order, which is the order the initial
    solution builder lays tasks out in.
    """

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: Dict[int, Task] = {}
        for task in tasks:
            if task.task_id in self._tasks:
                raise ValueError(f"Task ID {task.task_id} exists in the set.")
            self._tasks[task.task_id] = task

    def get_task(self, task_id: int) -> Optional[Task]:
        """Look a task up by id."""
        return self._tasks.get(task_id)

    def get_all_tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def task_ids(self) -> List[int]:
        return list(self._tasks)

    def total_weight(self) -> int:
        return sum(task.weight for task in self._tasks.values())

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, item) -> bool:
        if isinstance(item, Task):
            return self._tasks.get(item.task_id) == item
        return item in self._tasks

    def __str__(self) -> str:
        return f"TaskSet(total={len(self)}, weight={self.total_weight()})"


# ========== Convenience constructors ==========

def create_task(task_id: int,
                pickup_city: City,
                delivery_city: City,
                weight: int = 1) -> Task:
    """
    Convenience constructor for a task.

    Example:
        task = create_task(1, "Lausanne", "Geneva", weight=10)
    """
    return Task(
        task_id=task_id,
        weight=weight,
        pickup_city=pickup_city,
        delivery_city=delivery_city,
    )


def as_task_set(tasks: Iterable[Task]) -> TaskSet:
    """Wrap any iterable of tasks, returning TaskSet inputs unchanged."""
    if isinstance(tasks, TaskSet):
        return tasks
    return TaskSet(tasks)
