"""Tests for the neighbourhood generator."""

import pytest

from config.instance_generator import InstanceConfig, generate_instance
from core.action import Delivery, Pickup
from core.solution import Solution
from core.task import TaskSet, create_task
from core.vehicle import create_fleet
from planner.initial import build_initial_solution
from planner.neighborhood import NeighborhoodGenerator, change_task_order, change_vehicle


def chains_of(solution):
    return [tuple(str(a) for a in chain) for _, chain in solution.chains()]


def test_heavy_task_never_moved_to_small_vehicle():
    fleet = create_fleet([5, 50], ["A", "B"])
    task = create_task(0, "A", "C", weight=10)
    solution = build_initial_solution(fleet, [task])
    generator = NeighborhoodGenerator(seed=0)

    for _ in range(20):
        assert generator.generate(solution) == []

    assert generator.last_stats.vehicle_id == 1
    assert generator.last_stats.reassign_rejected == 1
    assert generator.last_stats.emitted == 0


def test_reassignment_moves_whole_task_to_target_head():
    fleet = create_fleet([10, 10], ["A", "B"])
    t0 = create_task(0, "A", "B", weight=3)
    t1 = create_task(1, "B", "C", weight=4)
    t2 = create_task(2, "C", "A", weight=8)
    solution = Solution(fleet)
    solution.append_task(fleet[0], t0)
    solution.append_task(fleet[0], t1)
    solution.append_task(fleet[1], t2)

    candidate = change_vehicle(solution, fleet[0], fleet[1])

    assert candidate.chain(fleet[1]) == (Pickup(t0), Delivery(t0), Pickup(t2), Delivery(t2))
    assert candidate.chain(fleet[0]) == (Pickup(t1), Delivery(t1))
    assert candidate.time_of(Pickup(t2)) == 3
    assert candidate.validate([t0, t1, t2]) == (True, None)
    assert solution.chain(fleet[0])[0] == Pickup(t0)


def test_reassignment_to_idle_vehicle_and_capacity_gate():
    fleet = create_fleet([2, 10], ["A", "B"])
    solution = build_initial_solution(fleet, [create_task(0, "A", "B", weight=3)])

    assert change_vehicle(solution, fleet[1], fleet[0]) is None
    assert change_vehicle(solution, fleet[0], fleet[1]) is None


def test_neighbours_enumerate_reassignments_then_feasible_swaps():
    fleet = create_fleet([10, 10], ["A", "B"])
    t0 = create_task(0, "A", "B", weight=3)
    t1 = create_task(1, "B", "C", weight=4)
    solution = Solution(fleet)
    solution.append_task(fleet[0], t0)
    solution.append_task(fleet[0], t1)
    generator = NeighborhoodGenerator(seed=1)

    candidates = generator.neighbours_of(solution, fleet[0])

    assert len(candidates) == 2
    assert candidates[0].chain(fleet[1]) == (Pickup(t0), Delivery(t0))
    assert candidates[1].chain(fleet[0]) == (Pickup(t0), Pickup(t1), Delivery(t0), Delivery(t1))
    stats = generator.last_stats
    assert (stats.reassign_emitted, stats.swap_emitted, stats.swap_rejected) == (1, 1, 5)


def test_swap_rejected_when_prefix_overloads():
    fleet = create_fleet([5], ["A"])
    t0 = create_task(0, "A", "B", weight=3)
    t1 = create_task(1, "B", "C", weight=3)
    solution = build_initial_solution(fleet, [t0, t1])

    assert change_task_order(solution, fleet[0], 2, 3) is None
    assert NeighborhoodGenerator(seed=0).generate(solution) == []


def test_swap_rejected_when_delivery_precedes_pickup():
    fleet = create_fleet([5], ["A"])
    solution = build_initial_solution(fleet, [create_task(0, "A", "B", weight=1)])

    assert change_task_order(solution, fleet[0], 1, 2) is None


def test_single_task_has_no_swaps():
    fleet = create_fleet([10, 10], ["A", "B"])
    solution = build_initial_solution(fleet, [create_task(0, "A", "B", weight=1)])
    generator = NeighborhoodGenerator(seed=3)

    candidates = generator.generate(solution)

    assert len(candidates) == 1
    assert generator.last_stats.swap_emitted + generator.last_stats.swap_rejected == 0


def test_idle_fleet_has_empty_neighbourhood():
    fleet = create_fleet([10, 10], ["A", "B"])

    assert NeighborhoodGenerator(seed=0).generate(Solution(fleet)) == []


def test_generation_does_not_touch_current_solution():
    instance = generate_instance(InstanceConfig(num_tasks=6, num_vehicles=3, seed=11))
    solution = build_initial_solution(instance.vehicles, instance.tasks)
    before = chains_of(solution)

    candidates = NeighborhoodGenerator(seed=11).generate(solution)
    for candidate in candidates:
        busy = candidate.nonempty_vehicles()[0]
        candidate.swap_positions(busy, 1, candidate.chain_length(busy))

    assert chains_of(solution) == before


def test_same_seed_gives_same_candidates():
    instance = generate_instance(InstanceConfig(num_tasks=5, num_vehicles=3, seed=2))
    solution = build_initial_solution(instance.vehicles, instance.tasks)

    first = NeighborhoodGenerator(seed=99).generate(solution)
    second = NeighborhoodGenerator(seed=99).generate(solution)

    assert [chains_of(c) for c in first] == [chains_of(c) for c in second]


@pytest.mark.parametrize("seed", range(8))
def test_random_walk_preserves_every_invariant(seed):
    instance = generate_instance(InstanceConfig(
        num_tasks=7,
        num_vehicles=3,
        weight_range=(1, 12),
        capacity_range=(8, 20),
        seed=seed,
    ))
    tasks = TaskSet(instance.tasks)
    expected_ids = set(tasks.task_ids())
    generator = NeighborhoodGenerator(seed=seed)
    current = build_initial_solution(instance.vehicles, tasks)

    for step in range(25):
        candidates = generator.generate(current)
        for candidate in candidates:
            assert candidate.validate(tasks) == (True, None)
            assert candidate.served_task_ids() == expected_ids
        if candidates:
            current = candidates[step % len(candidates)]
