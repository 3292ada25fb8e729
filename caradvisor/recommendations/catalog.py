from __future__ import annotations

import logging

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import Car

logger = logging.getLogger(__name__)

_LIST_COLUMNS = ("features", "pros", "cons")

_catalog: tuple[Car, ...] | None = None


class EmptyCatalogError(ValueError):
    """Raised when a ranking is requested over a catalog with no cars."""


def _split(value: object, separator: str) -> tuple[str, ...]:
    if not isinstance(value, str):
        return ()
    return tuple(part.strip() for part in value.split(separator) if part.strip())


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[Car, ...]:
    """Read the static catalog file into immutable ``Car`` records."""
    df = pd.read_csv(config.catalog_path, dtype={"id": str})

    for column in _LIST_COLUMNS:
        df[column] = df[column].apply(lambda s: _split(s, config.list_separator))

    cars = tuple(Car(**row) for row in df.to_dict(orient="records"))
    if not cars:
        raise EmptyCatalogError(f"No cars found in {config.catalog_path}")

    logger.info("Loaded %d cars from %s", len(cars), config.catalog_path)
    return cars


def get_catalog() -> tuple[Car, ...]:
    """Return the in-memory catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog


def get_car(car_id: str) -> Car | None:
    for car in get_catalog():
        if car.id == car_id:
            return car
    return None
