"""Tests for the random instance generator."""

import pytest

from config.instance_generator import InstanceConfig, generate_instance


def test_instance_shape():
    config = InstanceConfig(num_tasks=9, num_vehicles=4, num_cities=6, seed=3)
    instance = generate_instance(config)

    assert len(instance.tasks) == 9
    assert [v.vehicle_id for v in instance.vehicles] == [0, 1, 2, 3]
    assert instance.tasks.task_ids() == list(range(9))
    assert set(instance.coordinates) == {f"C{i}" for i in range(6)}
    assert len(instance.distance) == 6
    assert "9 tasks, 4 vehicles" in instance.describe()


def test_every_task_fits_the_biggest_vehicle():
    instance = generate_instance(InstanceConfig(
        num_tasks=30,
        weight_range=(5, 40),
        capacity_range=(10, 12),
        seed=8,
    ))
    biggest = max(v.capacity for v in instance.vehicles)

    for task in instance.tasks:
        assert task.weight <= biggest
        assert task.pickup_city != task.delivery_city


def test_same_seed_same_instance():
    first = generate_instance(InstanceConfig(seed=42))
    second = generate_instance(InstanceConfig(seed=42))

    assert first.coordinates == second.coordinates
    assert first.vehicles == second.vehicles
    assert first.tasks.get_all_tasks() == second.tasks.get_all_tasks()


@pytest.mark.parametrize("kwargs", [
    {"num_tasks": -1},
    {"num_vehicles": 0},
    {"num_cities": 1},
    {"weight_range": (0, 3)},
    {"capacity_range": (10, 5)},
])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        InstanceConfig(**kwargs)
