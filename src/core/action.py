"""
Action data structures
======================
Defines the pickup / delivery events that make up a vehicle's chain.

Each task contributes exactly two actions:
    Pickup(task): load ``task.weight`` at ``task.pickup_city``
    Delivery(task): unload ``task.weight`` at ``task.delivery_city``

Actions are immutable value objects.  Two actions compare equal only when
they reference the same task *and* have the same type, so a task's pickup
and delivery are always distinct dictionary keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from core.task import City, Task


# ========== Action type ==========

class ActionType(Enum):
    """Discriminates the two events of a task."""
    PICKUP = "pickup"
    DELIVERY = "delivery"


# ========== Action ==========

@dataclass(frozen=True)
class Action:
    """
    Pickup or delivery of one task.

    Attributes:
        task: the task being served
        action_type: PICKUP or DELIVERY
    """
    task: Task
    action_type: ActionType

    @property
    def weight(self) -> int:
        return self.task.weight

    @property
    def task_id(self) -> int:
        return self.task.task_id

    @property
    def city(self) -> City:
        """Location where the action is performed."""
        if self.action_type is ActionType.PICKUP:
            return self.task.pickup_city
        return self.task.delivery_city

    @property
    def load_delta(self) -> int:
        """Change of on-board load caused by this action."""
        if self.action_type is ActionType.PICKUP:
            return self.task.weight
        return -self.task.weight

    def is_pickup(self) -> bool:
        return self.action_type is ActionType.PICKUP

    def is_delivery(self) -> bool:
        return self.action_type is ActionType.DELIVERY

    def paired(self) -> "Action":
        """The matching action of the same task."""
        if self.is_pickup():
            return Delivery(self.task)
        return Pickup(self.task)

    def __str__(self) -> str:
        prefix = "P" if self.is_pickup() else "D"
        return f"{prefix}{self.task.task_id}@{self.city}"

    def __repr__(self) -> str:
        return f"{self.action_type.value.capitalize()}(task={self.task.task_id})"


def Pickup(task: Task) -> Action:
    return Action(task, ActionType.PICKUP)


def Delivery(task: Task) -> Action:
    return Action(task, ActionType.DELIVERY)


def create_action_pair(task: Task) -> Tuple[Action, Action]:
    """
    Create the (pickup, delivery) actions of a task.

    Example:
        pickup, delivery = create_action_pair(task)
    """
    return Pickup(task), Delivery(task)
