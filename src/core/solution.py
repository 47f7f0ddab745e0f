"""
Centralized solution data structure
===================================
Holds, for every vehicle of the fleet, the ordered chain of actions it
executes.

Representation:
    Each vehicle owns an explicit list of actions.  The successor of an
    action, its vehicle and its time index are all derived from list
    positions, so they can never drift out of sync with the chain itself.

Queries (time indices are 1-based):
    first_action(v)   -> first action of vehicle v, or None when idle
    next_action(a)    -> successor of action a in its chain, or None
    vehicle_of(a)     -> vehicle executing action a
    time_of(a)        -> position of action a in its vehicle's chain

Invariants checked by ``validate``:
    1. completeness: every task has one pickup and one delivery in one chain
    2. precedence: pickup strictly before delivery, on the same vehicle
    3. capacity: every prefix load fits in the vehicle
    4. chain integrity: following successors from the head visits each
       action exactly once and terminates
    5. time consistency: time indices run 1, 2, 3, ... along each chain
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

from core.action import Action, create_action_pair
from core.task import Task
from core.vehicle import Vehicle


class Solution:
    """
    Assignment of actions to vehicles plus their execution order.

    Solutions are mutated only while they are being built (by the initial
    solution builder) or edited as a fresh copy (by the neighbourhood
    generator).  A solution handed to the search loop is treated as
    read-only.

    Attributes:
        vehicles: the fleet, in host order
    """

    def __init__(self,
                 vehicles: Sequence[Vehicle],
                 chains: Optional[Dict[int, Iterable[Action]]] = None):
        if not vehicles:
            raise ValueError("A solution requires at least one vehicle")

        self.vehicles: Tuple[Vehicle, ...] = tuple(vehicles)
        self._vehicle_by_id: Dict[int, Vehicle] = {}
        for vehicle in self.vehicles:
            if vehicle.vehicle_id in self._vehicle_by_id:
                raise ValueError(f"Duplicate vehicle id {vehicle.vehicle_id}")
            self._vehicle_by_id[vehicle.vehicle_id] = vehicle

        chains = chains or {}
        unknown = set(chains) - set(self._vehicle_by_id)
        if unknown:
            raise ValueError(f"Chains given for unknown vehicles: {sorted(unknown)}")

        self._chains: Dict[int, List[Action]] = {
            vehicle.vehicle_id: list(chains.get(vehicle.vehicle_id, ()))
            for vehicle in self.vehicles
        }
        # action -> (vehicle_id, 0-based index); rebuilt lazily after edits
        self._index: Optional[Dict[Action, Tuple[int, int]]] = None

    # ========== Basic queries ==========

    def _chain_of(self, vehicle: Vehicle) -> List[Action]:
        try:
            return self._chains[vehicle.vehicle_id]
        except KeyError:
            raise KeyError(f"{vehicle} is not part of this solution") from None

    def _ensure_index(self) -> Dict[Action, Tuple[int, int]]:
        if self._index is None:
            index: Dict[Action, Tuple[int, int]] = {}
            for vehicle_id, chain in self._chains.items():
                for position, action in enumerate(chain):
                    index.setdefault(action, (vehicle_id, position))
            self._index = index
        return self._index

    def _locate(self, action: Action) -> Tuple[int, int]:
        location = self._ensure_index().get(action)
        if location is None:
            raise KeyError(f"Action {action!r} is not assigned to any vehicle")
        return location

    def first_action(self, vehicle: Vehicle) -> Optional[Action]:
        """First action executed by ``vehicle``; ``None`` when it is idle."""
        chain = self._chain_of(vehicle)
        return chain[0] if chain else None

    def next_action(self, item: Union[Vehicle, Action]) -> Optional[Action]:
        """
        Successor query.

        With a vehicle, returns its first action; with an action, returns the
        action executed right after it (``None`` for the last one).
        """
        if isinstance(item, Vehicle):
            return self.first_action(item)
        vehicle_id, position = self._locate(item)
        chain = self._chains[vehicle_id]
        if position + 1 < len(chain):
            return chain[position + 1]
        return None

    def vehicle_of(self, action: Action) -> Vehicle:
        vehicle_id, _ = self._locate(action)
        return self._vehicle_by_id[vehicle_id]

    def time_of(self, action: Action) -> int:
        """1-based position of ``action`` inside its vehicle's chain."""
        _, position = self._locate(action)
        return position + 1

    def chain(self, vehicle: Vehicle) -> Tuple[Action, ...]:
        return tuple(self._chain_of(vehicle))

    def chain_length(self, vehicle: Vehicle) -> int:
        return len(self._chain_of(vehicle))

    def chains(self) -> Iterator[Tuple[Vehicle, Tuple[Action, ...]]]:
        """Iterate ``(vehicle, actions)`` pairs in fleet order."""
        for vehicle in self.vehicles:
            yield vehicle, tuple(self._chains[vehicle.vehicle_id])

    def nonempty_vehicles(self) -> List[Vehicle]:
        return [v for v in self.vehicles if self._chains[v.vehicle_id]]

    def num_actions(self) -> int:
        return sum(len(chain) for chain in self._chains.values())

    def is_empty(self) -> bool:
        return self.num_actions() == 0

    def served_task_ids(self) -> Set[int]:
        return {
            action.task_id
            for chain in self._chains.values()
            for action in chain
        }

    # ========== Building and editing ==========

    def append_task(self, vehicle: Vehicle, task: Task) -> None:
        """Append a task as consecutive pickup and delivery actions."""
        pickup, delivery = create_action_pair(task)
        chain = self._chain_of(vehicle)
        chain.append(pickup)
        chain.append(delivery)
        self._index = None

    def move_task_to_front(self, task: Task, source: Vehicle, target: Vehicle) -> None:
        """
        Detach ``task`` from ``source`` and prepend it to ``target``.

        The pickup becomes the first action of ``target`` and the delivery the
        second; the previous head of ``target`` follows them.  The remaining
        actions of ``source`` keep their relative order.
        """
        if source.vehicle_id == target.vehicle_id:
            raise ValueError("Source and target vehicles must differ")

        pickup, delivery = create_action_pair(task)
        source_chain = self._chain_of(source)
        target_chain = self._chain_of(target)
        if pickup not in source_chain or delivery not in source_chain:
            raise ValueError(f"{task} is not served by {source}")

        source_chain.remove(pickup)
        source_chain.remove(delivery)
        target_chain[0:0] = [pickup, delivery]
        self._index = None

    def swap_positions(self, vehicle: Vehicle, first: int, second: int) -> None:
        """
        Swap the actions at 1-based positions ``first`` and ``second``.

        Adjacent and non-adjacent positions are handled alike: the chain is a
        list, so swapping relinks predecessors and successors implicitly.
        """
        chain = self._chain_of(vehicle)
        length = len(chain)
        if not (1 <= first <= length and 1 <= second <= length):
            raise ValueError(
                f"Invalid positions ({first}, {second}) for a chain of length {length}"
            )
        i, j = first - 1, second - 1
        chain[i], chain[j] = chain[j], chain[i]
        self._index = None

    def copy(self) -> "Solution":
        """
        Independent copy.

        Actions and vehicles are immutable and are shared; only the chain
        lists are duplicated, so edits on the copy never leak back.
        """
        return Solution(
            self.vehicles,
            {vehicle_id: list(chain) for vehicle_id, chain in self._chains.items()},
        )

    # ========== Constraint validation ==========

    def load_profile(self, vehicle: Vehicle) -> List[int]:
        """On-board load after each action of ``vehicle``'s chain."""
        loads = []
        current = 0
        for action in self._chain_of(vehicle):
            current += action.load_delta
            loads.append(current)
        return loads

    def check_capacity_feasibility(self, vehicle: Vehicle) -> Tuple[bool, Optional[str]]:
        """
        Verify that no prefix of the chain overloads the vehicle.

        Returns:
            (is_feasible, error_message)
        """
        for position, load in enumerate(self.load_profile(vehicle), start=1):
            if load > vehicle.capacity:
                return False, (
                    f"Capacity violation on {vehicle} at time {position}: "
                    f"load {load} > capacity {vehicle.capacity}"
                )
        return True, None

    def validate_precedence(self, vehicle: Vehicle) -> Tuple[bool, Optional[str]]:
        """
        Verify pickup-before-delivery for every task of the chain.

        Returns:
            (is_valid, error_message)
        """
        picked_up: Set[int] = set()
        delivered: Set[int] = set()
        for position, action in enumerate(self._chain_of(vehicle), start=1):
            task_id = action.task_id
            if action.is_pickup():
                if task_id in picked_up:
                    return False, f"Task {task_id} picked up twice on {vehicle}"
                picked_up.add(task_id)
            else:
                if task_id not in picked_up:
                    return False, (
                        f"Task {task_id} delivered at time {position} "
                        f"before its pickup on {vehicle}"
                    )
                if task_id in delivered:
                    return False, f"Task {task_id} delivered twice on {vehicle}"
                delivered.add(task_id)

        undelivered = picked_up - delivered
        if undelivered:
            return False, f"Tasks {sorted(undelivered)} never delivered on {vehicle}"
        return True, None

    def _validate_chain_integrity(self) -> Tuple[bool, Optional[str]]:
        counts = Counter(
            action for chain in self._chains.values() for action in chain
        )
        duplicated = [action for action, count in counts.items() if count > 1]
        if duplicated:
            return False, f"Actions assigned more than once: {duplicated}"

        for vehicle in self.vehicles:
            chain = self._chains[vehicle.vehicle_id]
            visited = 0
            action = self.first_action(vehicle)
            while action is not None:
                visited += 1
                if visited > len(chain):
                    return False, f"Cycle detected in the chain of {vehicle}"
                if self.vehicle_of(action) != vehicle:
                    return False, f"{action!r} reached from {vehicle} belongs elsewhere"
                if self.time_of(action) != visited:
                    return False, (
                        f"Time of {action!r} is {self.time_of(action)}, expected {visited}"
                    )
                action = self.next_action(action)
            if visited != len(chain):
                return False, f"Orphaned actions in the chain of {vehicle}"
        return True, None

    def _validate_completeness(self, tasks: Iterable[Task]) -> Tuple[bool, Optional[str]]:
        expected = set()
        for task in tasks:
            expected.update(create_action_pair(task))
        present = set(self._ensure_index())
        missing = expected - present
        if missing:
            return False, f"Missing actions: {sorted(missing, key=repr)}"
        extra = present - expected
        if extra:
            return False, f"Unexpected actions: {sorted(extra, key=repr)}"
        return True, None

    def validate(self, tasks: Optional[Iterable[Task]] = None) -> Tuple[bool, Optional[str]]:
        """
        Check every solution invariant.

        Args:
            tasks: the working task set; when given, completeness is checked
                against it as well

        Returns:
            (is_valid, error_message)
        """
        ok, message = self._validate_chain_integrity()
        if not ok:
            return ok, message

        if tasks is not None:
            ok, message = self._validate_completeness(tasks)
            if not ok:
                return ok, message

        for vehicle in self.vehicles:
            ok, message = self.validate_precedence(vehicle)
            if not ok:
                return ok, message
            ok, message = self.check_capacity_feasibility(vehicle)
            if not ok:
                return ok, message
        return True, None

    # ========== Representation ==========

    def __str__(self) -> str:
        busy = len(self.nonempty_vehicles())
        return (f"Solution(vehicles={len(self.vehicles)}, busy={busy}, "
                f"actions={self.num_actions()})")

    def __repr__(self) -> str:
        return self.__str__()

    def get_detailed_string(self) -> str:
        lines = [str(self)]
        for vehicle, chain in self.chains():
            sequence = " → ".join(str(action) for action in chain) or "(idle)"
            lines.append(f"  {vehicle} [cap {vehicle.capacity}] @ {vehicle.home_city}: {sequence}")
        return "\n".join(lines)
