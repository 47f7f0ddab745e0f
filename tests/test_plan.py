"""Tests for plan expansion and the naive sequential baseline."""

import pytest

from core.plan import PlanStep, StepKind, VehiclePlan, build_vehicle_plans
from core.solution import Solution
from core.task import create_task
from core.vehicle import create_vehicle
from physics.distance import DistanceMatrix
from planner.errors import InfeasibleTaskError
from planner.naive import naive_plan


LINE = DistanceMatrix.from_coordinates({
    "A": (0.0, 0.0),
    "B": (1.0, 0.0),
    "C": (2.0, 0.0),
    "D": (3.0, 0.0),
})


def line_path(origin, destination):
    """Walk the line one city at a time."""
    order = ["A", "B", "C", "D"]
    start, end = order.index(origin), order.index(destination)
    step = 1 if end > start else -1
    return [order[i] for i in range(start + step, end + step, step)] if start != end else []


def test_build_vehicle_plans_direct_moves():
    fleet = [create_vehicle(0, 10, "A"), create_vehicle(1, 10, "D")]
    task = create_task(1, "A", "C", weight=3)
    solution = Solution(fleet)
    solution.append_task(fleet[0], task)

    plans = build_vehicle_plans(solution)

    assert [p.vehicle_id for p in plans] == [0, 1]
    assert plans[0].steps == [
        PlanStep(StepKind.PICKUP, "A", 1),
        PlanStep(StepKind.MOVE, "C"),
        PlanStep(StepKind.DELIVERY, "C", 1),
    ]
    assert plans[1].is_empty()
    assert plans[1].start_city == "D"
    assert plans[0].total_distance(LINE) == pytest.approx(2.0)


def test_build_vehicle_plans_expands_paths():
    fleet = [create_vehicle(0, 10, "D")]
    task = create_task(1, "C", "A", weight=3)
    solution = Solution(fleet)
    solution.append_task(fleet[0], task)

    plan = build_vehicle_plans(solution, path=line_path)[0]

    assert plan.cities() == ["D", "C", "B", "A"]
    assert plan.task_ids(StepKind.PICKUP) == [1]
    assert plan.task_ids(StepKind.DELIVERY) == [1]
    assert plan.total_distance(LINE) == pytest.approx(3.0)


def test_plan_cost_matches_chain_cost():
    fleet = [create_vehicle(0, 10, "B")]
    tasks = [create_task(1, "A", "D", weight=2), create_task(2, "C", "B", weight=2)]
    solution = Solution(fleet)
    for task in tasks:
        solution.append_task(fleet[0], task)

    plan = build_vehicle_plans(solution)[0]

    # B -> A -> D -> C -> B
    assert plan.total_distance(LINE) == pytest.approx(1.0 + 3.0 + 1.0 + 1.0)


def test_naive_plan_continues_from_delivery_city():
    vehicle = create_vehicle(0, 10, "A")
    tasks = [create_task(1, "B", "D", weight=4), create_task(2, "C", "A", weight=4)]

    plan = naive_plan(vehicle, tasks)

    assert plan.cities() == ["A", "B", "D", "C", "A"]
    assert [step.kind for step in plan.steps] == [
        StepKind.MOVE, StepKind.PICKUP, StepKind.MOVE, StepKind.DELIVERY,
        StepKind.MOVE, StepKind.PICKUP, StepKind.MOVE, StepKind.DELIVERY,
    ]
    assert plan.total_distance(LINE) == pytest.approx(1.0 + 2.0 + 1.0 + 2.0)


def test_naive_plan_rejects_overweight_task():
    vehicle = create_vehicle(0, 3, "A")

    with pytest.raises(InfeasibleTaskError):
        naive_plan(vehicle, [create_task(1, "B", "D", weight=4)])


def test_vehicle_plan_current_city_tracks_moves():
    plan = VehiclePlan(vehicle_id=0, start_city="A")
    assert plan.current_city() == "A"

    plan.move_to("C", line_path)
    assert plan.current_city() == "C"
    assert len(plan) == 2
    assert "Move(B)" in str(plan)
