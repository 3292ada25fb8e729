import numpy as np
import pytest

from caradvisor.recommendations.catalog import get_catalog
from caradvisor.recommendations.clustering import cluster_cars
from caradvisor.recommendations.models import Car


def _car(car_id: str, price: float, mpg: float) -> Car:
    return Car(
        id=car_id,
        make="Test",
        model=f"Model {car_id}",
        year=2024,
        price=price,
        type="sedan",
        fuel_type="gasoline",
        fuel_efficiency=mpg,
        safety_rating=5,
        seating_capacity=5,
        transmission="automatic",
        drivetrain="fwd",
        segment="economy",
        reliability=7,
        maintenance_cost="low",
        resale_value=7,
    )


def _ids(groups):
    return [[car.id for car in group] for group in groups]


def test_small_catalog_gives_singletons():
    cars = [_car("a", 20000, 30), _car("b", 40000, 25)]
    assert _ids(cluster_cars(cars, k=3)) == [["a"], ["b"]]


def test_catalog_equal_to_k_gives_singletons():
    cars = [_car(str(i), 20000 + i * 1000, 30) for i in range(3)]
    assert _ids(cluster_cars(cars, k=3)) == [["0"], ["1"], ["2"]]


@pytest.mark.parametrize("seed", range(10))
def test_groups_partition_the_catalog(seed):
    cars = list(get_catalog())
    groups = cluster_cars(cars, k=3, rng=np.random.default_rng(seed))

    assert 1 <= len(groups) <= min(3, len(cars))
    assert all(groups)
    flat = [car.id for group in groups for car in group]
    assert sorted(flat) == sorted(car.id for car in cars)


def test_same_seed_same_grouping():
    cars = list(get_catalog())
    first = cluster_cars(cars, k=3, rng=np.random.default_rng(42))
    second = cluster_cars(cars, k=3, rng=np.random.default_rng(42))
    assert _ids(first) == _ids(second)


def test_identical_points_collapse_into_first_group():
    # Every centroid starts on the same point, so ties go to slot 0 and the
    # other slots stay empty for every iteration.
    cars = [_car(str(i), 25000, 30) for i in range(5)]
    groups = cluster_cars(cars, k=3, rng=np.random.default_rng(0))
    assert _ids(groups) == [["0", "1", "2", "3", "4"]]


def test_separated_bands_with_deterministic_start():
    class _FirstOfEachBand:
        def integers(self, low, high, size):
            return np.array([0, 3, 6])

    cars = [
        _car("cheap-1", 15000, 40), _car("cheap-2", 16000, 41), _car("cheap-3", 17000, 39),
        _car("mid-1", 45000, 28), _car("mid-2", 46000, 27), _car("mid-3", 47000, 29),
        _car("lux-1", 90000, 18), _car("lux-2", 92000, 17), _car("lux-3", 95000, 19),
    ]
    groups = cluster_cars(cars, k=3, rng=_FirstOfEachBand())
    assert _ids(groups) == [
        ["cheap-1", "cheap-2", "cheap-3"],
        ["mid-1", "mid-2", "mid-3"],
        ["lux-1", "lux-2", "lux-3"],
    ]


def test_empty_slot_keeps_its_own_centroid():
    # Slots 1 and 2 both start on cheap-2; ties go to slot 1, so slot 2 stays
    # empty until slot 1 drifts to the band mean and cheap-2 is closer to it.
    class _SharedStart:
        def integers(self, low, high, size):
            return np.array([0, 1, 1])

    cars = [
        _car("cheap-1", 15000, 40), _car("cheap-2", 16000, 41), _car("cheap-3", 17000, 39),
        _car("lux-1", 90000, 18), _car("lux-2", 92000, 17), _car("lux-3", 95000, 19),
    ]
    groups = cluster_cars(cars, k=3, rng=_SharedStart())
    assert _ids(groups) == [
        ["lux-1", "lux-2", "lux-3"],
        ["cheap-1", "cheap-3"],
        ["cheap-2"],
    ]


def test_invalid_k():
    with pytest.raises(ValueError):
        cluster_cars([_car("a", 20000, 30)], k=0)
