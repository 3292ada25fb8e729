from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CatalogConfig:
    catalog_path: Path = Path(__file__).resolve().parent.parent / "data" / "cars.csv"
    list_separator: str = "|"


@dataclass(frozen=True)
class RankingConfig:
    """
    Thresholds for the two ranking modes.

    A car must score strictly above the cutoff of the mode in use.
    """

    simple_min_score: int = 20
    ensemble_min_score: int = 30
    cluster_count: int = 3
    kmeans_iterations: int = 10
    diverse_reason: str = "Diverse recommendation from similar vehicle cluster"


DEFAULT_CATALOG_CONFIG = CatalogConfig()
DEFAULT_RANKING_CONFIG = RankingConfig()
