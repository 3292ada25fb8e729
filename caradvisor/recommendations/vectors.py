from __future__ import annotations

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from .models import (
    BodyType,
    Car,
    FuelType,
    Importance,
    Priority,
    Segment,
    Usage,
    UserPreferences,
)

# Both vectors must use this axis order for similarity to mean anything.
VECTOR_AXES: tuple[str, ...] = (
    "value",
    "efficiency",
    "safety",
    "performance",
    "luxury",
    "practicality",
    "environmental",
)

_IMPORTANCE_WEIGHTS = {Importance.high: 1.0, Importance.medium: 0.6, Importance.low: 0.3}

_BUDGET_SCALE = 100_000
_VALUE_PRICE_CEILING = 80_000
_EFFICIENCY_SCALE = 50
_LUXURY_PRICE = 50_000

_ENVIRONMENTAL_SCORES = {FuelType.electric: 1.0, FuelType.hybrid: 0.8}


def to_user_vector(prefs: UserPreferences) -> np.ndarray:
    """Map preferences onto ``VECTOR_AXES`` with every axis in [0, 1]."""
    avg_budget = (prefs.budget.min + prefs.budget.max) / 2
    eco_fuels = {FuelType.electric, FuelType.hybrid}

    return np.array([
        min(avg_budget / _BUDGET_SCALE, 1.0),
        _IMPORTANCE_WEIGHTS[prefs.fuel_efficiency.importance],
        _IMPORTANCE_WEIGHTS[prefs.safety_rating.importance],
        1.0 if prefs.has_priority(Priority.performance, Priority.driving_experience) else 0.3,
        1.0 if prefs.has_priority(Priority.comfort, Priority.prestige) else 0.3,
        1.0 if prefs.has_priority(Priority.practicality) or prefs.usage == Usage.family_use else 0.5,
        1.0 if eco_fuels.intersection(prefs.fuel_types) else 0.3,
    ], dtype=float)


def to_car_vector(car: Car) -> np.ndarray:
    """Map a catalog car onto ``VECTOR_AXES`` with every axis in [0, 1]."""
    is_performance = car.segment == Segment.sport or car.type == BodyType.coupe
    is_luxury = car.segment == Segment.luxury or car.price > _LUXURY_PRICE

    if is_performance:
        performance = 0.9
    elif car.type == BodyType.sedan:
        performance = 0.5
    else:
        performance = 0.3

    if is_luxury:
        luxury = 0.9
    elif car.segment == Segment.family:
        luxury = 0.4
    else:
        luxury = 0.2

    return np.array([
        max(0.0, 1 - car.price / _VALUE_PRICE_CEILING),
        min(car.fuel_efficiency / _EFFICIENCY_SCALE, 1.0),
        car.safety_rating / 5,
        performance,
        luxury,
        0.8 if car.seating_capacity >= 5 else 0.4,
        _ENVIRONMENTAL_SCORES.get(car.fuel_type, 0.2),
    ], dtype=float)


def cosine_similarity(u: np.ndarray, v: np.ndarray) -> float:
    """
    Cosine of the angle between *u* and *v*.

    Returns 0.0 when either vector has zero magnitude.
    """
    u = np.asarray(u, dtype=float).reshape(1, -1)
    v = np.asarray(v, dtype=float).reshape(1, -1)
    if not np.any(u) or not np.any(v):
        return 0.0
    return float(_pairwise_cosine(u, v)[0, 0])
