"""Tests for vehicles and pickup/delivery actions."""

import pytest

from core.action import Action, ActionType, Delivery, Pickup, create_action_pair
from core.task import create_task
from core.vehicle import Vehicle, create_fleet, create_vehicle, largest_vehicle


def test_vehicle_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        Vehicle(vehicle_id=0, capacity=0, home_city="A")


def test_vehicle_can_carry_up_to_capacity():
    vehicle = create_vehicle(1, capacity=10, home_city="A", name="truck")

    assert vehicle.can_carry(10)
    assert not vehicle.can_carry(11)
    assert str(vehicle) == "Vehicle(truck)"
    assert str(create_vehicle(2, 5, "B")) == "Vehicle2"


def test_create_fleet_assigns_sequential_ids():
    fleet = create_fleet([5, 20, 20], ["A", "B", "C"])

    assert [v.vehicle_id for v in fleet] == [0, 1, 2]
    assert [v.home_city for v in fleet] == ["A", "B", "C"]

    with pytest.raises(ValueError):
        create_fleet([5, 20], ["A"])


def test_largest_vehicle_prefers_first_on_ties():
    fleet = create_fleet([5, 20, 20], ["A", "B", "C"])

    assert largest_vehicle(fleet).vehicle_id == 1
    with pytest.raises(ValueError):
        largest_vehicle([])


def test_action_pair_properties():
    task = create_task(4, "Bern", "Zurich", weight=6)
    pickup, delivery = create_action_pair(task)

    assert pickup.is_pickup() and not pickup.is_delivery()
    assert delivery.is_delivery()
    assert pickup.city == "Bern"
    assert delivery.city == "Zurich"
    assert pickup.load_delta == 6
    assert delivery.load_delta == -6
    assert pickup.weight == delivery.weight == 6
    assert pickup.task_id == 4


def test_actions_compare_by_task_and_type():
    task = create_task(4, "Bern", "Zurich", weight=6)

    assert Pickup(task) == Action(task, ActionType.PICKUP)
    assert Pickup(task) != Delivery(task)
    assert len({Pickup(task), Delivery(task), Pickup(task)}) == 2
    assert Pickup(task).paired() == Delivery(task)
    assert Delivery(task).paired() == Pickup(task)


def test_action_string_forms():
    task = create_task(4, "Bern", "Zurich", weight=6)

    assert str(Pickup(task)) == "P4@Bern"
    assert str(Delivery(task)) == "D4@Zurich"
    assert repr(Pickup(task)) == "Pickup(task=4)"
    assert repr(Delivery(task)) == "Delivery(task=4)"
