"""Tests for the initial solution builder."""

import pytest

from core.action import Delivery, Pickup
from core.task import TaskSet, create_task
from core.vehicle import create_fleet, create_vehicle
from physics.distance import DistanceMatrix
from planner.cost import solution_cost
from planner.errors import InfeasibleTaskError
from planner.initial import build_initial_solution


def test_single_task_on_single_vehicle():
    distance = DistanceMatrix.from_coordinates({"X": (0.0, 0.0), "Y": (3.0, 4.0)})
    vehicle = create_vehicle(0, capacity=100, home_city="X")
    task = create_task(1, "X", "Y", weight=10)

    solution = build_initial_solution([vehicle], TaskSet([task]))

    assert solution.first_action(vehicle) == Pickup(task)
    assert solution.time_of(Pickup(task)) == 1
    assert solution.time_of(Delivery(task)) == 2
    assert solution.next_action(Delivery(task)) is None
    assert solution_cost(solution, distance) == pytest.approx(5.0)


def test_all_tasks_go_to_the_biggest_vehicle():
    fleet = create_fleet([5, 50, 50], ["A", "B", "C"])
    tasks = TaskSet([
        create_task(0, "A", "B", weight=10),
        create_task(1, "B", "C", weight=2),
    ])

    solution = build_initial_solution(fleet, tasks)

    assert solution.nonempty_vehicles() == [fleet[1]]
    assert [str(a) for a in solution.chain(fleet[1])] == ["P0@A", "D0@B", "P1@B", "D1@C"]
    assert solution.validate(tasks) == (True, None)


def test_overweight_task_raises_without_partial_solution():
    fleet = create_fleet([5, 8], ["A", "B"])
    light = create_task(0, "A", "B", weight=3)
    heavy = create_task(1, "B", "C", weight=9)

    with pytest.raises(InfeasibleTaskError) as excinfo:
        build_initial_solution(fleet, [light, heavy])

    assert excinfo.value.task is heavy
    assert excinfo.value.capacity == 8
    assert "Task 1 weight 9" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_empty_task_set_gives_idle_fleet():
    fleet = create_fleet([5, 8], ["A", "B"])

    solution = build_initial_solution(fleet, TaskSet())

    assert solution.is_empty()
    assert solution.validate(TaskSet()) == (True, None)


def test_empty_fleet_rejected():
    with pytest.raises(ValueError):
        build_initial_solution([], [create_task(0, "A", "B")])


def test_task_set_is_not_mutated():
    tasks = TaskSet([create_task(i, "A", "B", weight=1) for i in range(4)])
    before = tasks.get_all_tasks()

    build_initial_solution(create_fleet([10], ["A"]), tasks)

    assert tasks.get_all_tasks() == before
    assert len(tasks) == 4


def test_repeated_task_rejected_before_building():
    fleet = create_fleet([10], ["A"])
    task = create_task(0, "A", "B", weight=2)

    with pytest.raises(ValueError, match="Task ID 0"):
        build_initial_solution(fleet, [task, task])
