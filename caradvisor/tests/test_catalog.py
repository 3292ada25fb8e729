from __future__ import annotations

import pytest

from caradvisor.recommendations.catalog import (
    EmptyCatalogError,
    get_car,
    get_catalog,
    load_catalog,
)
from caradvisor.recommendations.config import CatalogConfig
from caradvisor.recommendations.models import Car

HEADER = (
    "id,make,model,year,price,type,fuel_type,fuel_efficiency,safety_rating,"
    "seating_capacity,transmission,drivetrain,features,pros,cons,segment,"
    "reliability,maintenance_cost,resale_value\n"
)


def _write(tmp_path, body: str) -> CatalogConfig:
    path = tmp_path / "cars.csv"
    path.write_text(HEADER + body)
    return CatalogConfig(catalog_path=path)


def test_load_catalog_splits_list_columns(tmp_path):
    config = _write(
        tmp_path,
        "007,Test,Roadster,2023,31000,convertible,gasoline,27,4,2,manual,rwd,"
        "Heated Seats| Bluetooth ,Fun to drive,Tiny trunk,sport,8,medium,7\n",
    )
    (car,) = load_catalog(config)

    assert isinstance(car, Car)
    assert car.id == "007"
    assert car.features == ("Heated Seats", "Bluetooth")
    assert car.pros == ("Fun to drive",)
    assert car.cons == ("Tiny trunk",)
    assert car.display_name == "2023 Test Roadster"


def test_load_catalog_blank_lists_are_empty(tmp_path):
    config = _write(
        tmp_path,
        "1,Test,Basic,2024,15000,sedan,gasoline,33,4,5,automatic,fwd,,,,economy,7,low,6\n",
    )
    (car,) = load_catalog(config)
    assert car.features == ()
    assert car.pros == ()
    assert car.cons == ()


def test_load_catalog_without_rows_raises(tmp_path):
    with pytest.raises(EmptyCatalogError):
        load_catalog(_write(tmp_path, ""))


def test_load_catalog_rejects_invalid_rows(tmp_path):
    config = _write(
        tmp_path,
        "1,Test,Broken,2024,15000,spaceship,gasoline,33,4,5,automatic,fwd,,,,economy,7,low,6\n",
    )
    with pytest.raises(ValueError):
        load_catalog(config)


def test_shipped_catalog():
    catalog = get_catalog()
    ids = [car.id for car in catalog]

    assert len(catalog) == 20
    assert len(set(ids)) == len(ids)
    assert get_catalog() is catalog


def test_get_car():
    assert get_car("1").model == "Camry"
    assert get_car("999") is None
