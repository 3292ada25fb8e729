from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .config import DEFAULT_RANKING_CONFIG
from .models import Car

_PRICE_SCALE = 100_000
_EFFICIENCY_SCALE = 50


def _project(cars: Sequence[Car]) -> np.ndarray:
    """Return an (n, 2) array of (normalised price, normalised efficiency)."""
    return np.array(
        [(car.price / _PRICE_SCALE, car.fuel_efficiency / _EFFICIENCY_SCALE) for car in cars],
        dtype=float,
    )


def _assign(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid for every point (first one wins on ties)."""
    distances = np.linalg.norm(points[:, None, :] - centroids[None, :, :], axis=2)
    return np.argmin(distances, axis=1)


def cluster_cars(
    cars: Sequence[Car],
    k: int = DEFAULT_RANKING_CONFIG.cluster_count,
    rng: np.random.Generator | None = None,
    iterations: int = DEFAULT_RANKING_CONFIG.kmeans_iterations,
) -> list[list[Car]]:
    """
    Group *cars* into at most *k* price/efficiency bands with k-means.

    Initial centroids are drawn uniformly (with replacement) from the
    projected points using *rng*; pass a seeded generator to make the
    grouping reproducible. Empty groups are dropped from the result.
    """
    if k < 1:
        raise ValueError("k must be at least 1")
    if len(cars) <= k:
        return [[car] for car in cars]

    rng = rng if rng is not None else np.random.default_rng()
    points = _project(cars)
    centroids = points[rng.integers(0, len(points), size=k)].copy()

    for _ in range(iterations):
        labels = _assign(points, centroids)
        for i in range(k):
            members = points[labels == i]
            # An empty slot keeps its own previous centroid.
            if len(members):
                centroids[i] = members.mean(axis=0)

    labels = _assign(points, centroids)
    groups: list[list[Car]] = [[] for _ in range(k)]
    for car, label in zip(cars, labels):
        groups[int(label)].append(car)

    return [group for group in groups if group]
