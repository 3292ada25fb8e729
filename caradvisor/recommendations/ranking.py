from __future__ import annotations

import logging
import math
import time
from collections.abc import Sequence

import numpy as np

from .catalog import EmptyCatalogError, get_catalog
from .clustering import cluster_cars
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import (
    Car,
    CarRecommendation,
    RankingStrategy,
    RecommendationRequest,
    RecommendationResponse,
    UserPreferences,
)
from .scoring import score_car
from .vectors import VECTOR_AXES, cosine_similarity, to_car_vector, to_user_vector

logger = logging.getLogger(__name__)

_ENVIRONMENTAL = VECTOR_AXES.index("environmental")
_PERFORMANCE = VECTOR_AXES.index("performance")


def _require_cars(catalog: Sequence[Car]) -> None:
    if not catalog:
        raise EmptyCatalogError("Cannot rank an empty catalog")


def _by_score(recs: list[CarRecommendation]) -> list[CarRecommendation]:
    # sorted() is stable, so equal scores keep their incoming order.
    return sorted(recs, key=lambda r: r.match_score, reverse=True)


def _annotate(
    rec: CarRecommendation,
    user_vec: np.ndarray,
    car_vec: np.ndarray,
    similarity: float,
) -> CarRecommendation:
    """Append similarity-driven reasons and reliability notes to a scored car."""
    reasons = list(rec.reasons)
    warnings = list(rec.warnings)

    if similarity > 0.8:
        reasons.append("Excellent match for your preferences")
    elif similarity > 0.6:
        reasons.append("Good alignment with your needs")

    if user_vec[_ENVIRONMENTAL] > 0.7 and car_vec[_ENVIRONMENTAL] > 0.7:
        reasons.append("Eco-friendly choice matching your environmental priorities")
    if user_vec[_PERFORMANCE] > 0.7 and car_vec[_PERFORMANCE] > 0.7:
        reasons.append("High-performance vehicle for driving enthusiasts")

    reliability = rec.car.reliability
    if reliability >= 8:
        reasons.append(f"Excellent reliability score ({reliability:g}/10)")
    elif reliability < 6:
        warnings.append(f"Below-average reliability ({reliability:g}/10)")

    return rec.model_copy(update={
        "reasons": reasons,
        "warnings": warnings,
        "similarity_score": round(similarity, 4),
    })


def get_recommendations(
    catalog: Sequence[Car],
    prefs: UserPreferences,
    limit: int | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[CarRecommendation]:
    """Score every car, keep those above the simple cutoff, best first."""
    _require_cars(catalog)
    scored = [score_car(car, prefs) for car in catalog]
    kept = _by_score([r for r in scored if r.match_score > config.simple_min_score])
    return kept[:limit] if limit is not None else kept


def get_content_based_recommendations(
    catalog: Sequence[Car],
    prefs: UserPreferences,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[CarRecommendation]:
    _require_cars(catalog)
    user_vec = to_user_vector(prefs)

    results: list[CarRecommendation] = []
    for car in catalog:
        rec = score_car(car, prefs)
        if rec.match_score <= config.ensemble_min_score:
            continue
        car_vec = to_car_vector(car)
        results.append(_annotate(rec, user_vec, car_vec, cosine_similarity(user_vec, car_vec)))

    return _by_score(results)


def get_ensemble_recommendations(
    catalog: Sequence[Car],
    prefs: UserPreferences,
    limit: int = 10,
    rng: np.random.Generator | None = None,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[CarRecommendation]:
    """
    Blend content-based scoring with cluster-based diversification.

    1. Content pass: scored cars above the ensemble cutoff, annotated with
       their cosine similarity to the user's preference vector.
    2. Diversity pass: the catalog is clustered by price and efficiency and
       the best ``ceil(limit / cluster_count)`` cars of each cluster are
       added, even if the content pass dropped them.

    Content-pass entries win when a car appears in both lists.
    """
    content_based = get_content_based_recommendations(catalog, prefs, config)
    by_id = {rec.car.id: rec for rec in content_based}
    per_cluster = math.ceil(limit / config.cluster_count)

    diversified: list[CarRecommendation] = []
    for cluster in cluster_cars(catalog, config.cluster_count, rng, config.kmeans_iterations):
        cluster_recs = []
        for car in cluster:
            rec = by_id.get(car.id)
            if rec is None:
                rec = score_car(car, prefs).model_copy(update={
                    "reasons": [config.diverse_reason],
                    "warnings": [],
                })
            cluster_recs.append(rec)
        diversified.extend(_by_score(cluster_recs)[:per_cluster])

    seen: set[str] = set()
    unique: list[CarRecommendation] = []
    for rec in content_based + diversified:
        if rec.car.id not in seen:
            seen.add(rec.car.id)
            unique.append(rec)

    return _by_score(unique)[:limit]


def recommend(request: RecommendationRequest) -> RecommendationResponse:
    """Rank the shipped catalog for a form submission."""
    start_time = time.time()
    catalog = get_catalog()

    if request.ensemble:
        rng = np.random.default_rng(request.seed)
        recs = get_ensemble_recommendations(catalog, request.preferences, request.limit, rng)
        strategy = RankingStrategy.ensemble
    else:
        recs = get_recommendations(catalog, request.preferences, request.limit)
        strategy = RankingStrategy.simple

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.debug(
        "Ranked %d cars with %s strategy: %d returned in %.1f ms",
        len(catalog), strategy.value, len(recs), elapsed_ms,
    )

    return RecommendationResponse(
        recommendations=recs,
        total_candidates=len(catalog),
        strategy=strategy,
    )
