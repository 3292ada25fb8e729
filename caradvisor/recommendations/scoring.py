from __future__ import annotations

from dataclasses import dataclass, field

from .models import Car, CarRecommendation, Importance, Priority, Segment, UserPreferences

BUDGET_WEIGHT = 25
TYPE_WEIGHT = 15
FUEL_TYPE_WEIGHT = 10
SEATING_WEIGHT = 5
FEATURES_WEIGHT = 10
SEGMENT_BONUS = 5

EFFICIENCY_WEIGHTS = {Importance.high: 20, Importance.medium: 15, Importance.low: 10}
SAFETY_WEIGHTS = {Importance.high: 15, Importance.medium: 10, Importance.low: 5}

UNDER_BUDGET_CREDIT = 0.8
OVER_BUDGET_TOLERANCE_PCT = 20.0
EFFICIENCY_SURPLUS_CAP = 10.0  # mpg above the minimum that earns the full bonus
EFFICIENCY_MAX_BONUS = 0.5
EFFICIENCY_DEFICIT_FLOOR = 20.0  # mpg below the minimum that earns nothing

# segment -> (priorities that unlock the bonus, reason)
SEGMENT_BONUSES: dict[Segment, tuple[tuple[Priority, ...], str]] = {
    Segment.luxury: (
        (Priority.comfort, Priority.prestige),
        "Luxury segment matches your priorities",
    ),
    Segment.economy: (
        (Priority.value, Priority.fuel_economy),
        "Economy segment offers great value",
    ),
    Segment.sport: (
        (Priority.performance, Priority.driving_experience),
        "Sport segment delivers performance",
    ),
    Segment.family: (
        (Priority.practicality, Priority.safety),
        "Family-oriented vehicle",
    ),
}


@dataclass
class ScoreBreakdown:
    """Per-criterion credit earned by one car against one set of preferences."""

    components: dict[str, float] = field(default_factory=dict)
    weights: dict[str, float] = field(default_factory=dict)
    bonus: float = 0.0
    reasons: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add(self, name: str, weight: float, achieved: float) -> None:
        self.weights[name] = weight
        self.components[name] = achieved

    @property
    def achieved(self) -> float:
        return sum(self.components.values())

    @property
    def total_weight(self) -> float:
        return sum(self.weights.values())

    @property
    def match_score(self) -> int:
        total = self.total_weight
        base = min(100.0, 100.0 * self.achieved / total) if total else 0.0
        return round(max(0.0, min(100.0, base + self.bonus)))


def _money(value: float) -> str:
    return f"${value:,.0f}"


def _number(value: float) -> str:
    return f"{value:g}"


def _score_budget(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    budget = prefs.budget
    if budget.min <= car.price <= budget.max:
        out.add("budget", BUDGET_WEIGHT, BUDGET_WEIGHT)
        out.reasons.append(
            f"Within your budget of {_money(budget.min)} - {_money(budget.max)}"
        )
        return

    if car.price < budget.min:
        out.add("budget", BUDGET_WEIGHT, BUDGET_WEIGHT * UNDER_BUDGET_CREDIT)
        out.reasons.append("Very affordable option")
        return

    over = car.price - budget.max
    over_pct = over / budget.max * 100 if budget.max else float("inf")
    if over_pct <= OVER_BUDGET_TOLERANCE_PCT:
        credit = BUDGET_WEIGHT * (1 - over_pct / OVER_BUDGET_TOLERANCE_PCT)
        out.add("budget", BUDGET_WEIGHT, credit)
        out.warnings.append(f"{over_pct:.1f}% over budget")
    else:
        out.add("budget", BUDGET_WEIGHT, 0.0)
        out.warnings.append(f"Significantly over budget by {_money(over)}")


def _score_body_type(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    if car.type in prefs.car_types:
        out.add("type", TYPE_WEIGHT, TYPE_WEIGHT)
        out.reasons.append(f"Matches your preferred {car.type.value} body style")
    else:
        out.add("type", TYPE_WEIGHT, 0.0)


def _score_fuel_type(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    if car.fuel_type in prefs.fuel_types:
        out.add("fuel_type", FUEL_TYPE_WEIGHT, FUEL_TYPE_WEIGHT)
        out.reasons.append(f"Uses your preferred {car.fuel_type.value} fuel type")
    else:
        out.add("fuel_type", FUEL_TYPE_WEIGHT, 0.0)


def _score_efficiency(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    required = prefs.fuel_efficiency
    weight = EFFICIENCY_WEIGHTS[required.importance]
    mpg = car.fuel_efficiency

    if mpg >= required.min:
        surplus = min((mpg - required.min) / EFFICIENCY_SURPLUS_CAP, 1.0)
        out.add("fuel_efficiency", weight, weight * (1 + surplus * EFFICIENCY_MAX_BONUS))
        out.reasons.append(f"Excellent fuel efficiency: {_number(mpg)} MPG")
    else:
        deficit = required.min - mpg
        out.add("fuel_efficiency", weight, max(0.0, weight * (1 - deficit / EFFICIENCY_DEFICIT_FLOOR)))
        out.warnings.append(
            f"Lower fuel efficiency than preferred "
            f"({_number(mpg)} vs {_number(required.min)} MPG)"
        )


def _score_safety(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    required = prefs.safety_rating
    weight = SAFETY_WEIGHTS[required.importance]
    rating = car.safety_rating

    if rating >= required.min:
        out.add("safety", weight, weight * (rating / 5))
        if rating == 5:
            out.reasons.append("Top 5-star safety rating")
        else:
            out.reasons.append(f"Good {rating}-star safety rating")
    else:
        out.add("safety", weight, 0.0)
        out.warnings.append(
            f"Safety rating below your minimum ({rating} vs {required.min} stars)"
        )


def _score_seating(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    seats = car.seating_capacity
    needed = prefs.seating_capacity

    if seats >= needed:
        out.add("seating", SEATING_WEIGHT, SEATING_WEIGHT)
        if seats > needed:
            out.reasons.append(f"Extra seating capacity ({seats} seats)")
        else:
            out.reasons.append(f"Perfect seating capacity ({seats} seats)")
    else:
        out.add("seating", SEATING_WEIGHT, 0.0)
        out.warnings.append(f"Limited seating ({seats} vs {needed} needed)")


def _score_features(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    wanted = set(prefs.features)
    if not wanted:
        out.add("features", FEATURES_WEIGHT, 0.0)
        return

    matching = wanted.intersection(car.features)
    out.add("features", FEATURES_WEIGHT, len(matching) / len(wanted) * FEATURES_WEIGHT)
    if matching:
        out.reasons.append(f"Has {len(matching)} of your desired features")


def _apply_segment_bonus(car: Car, prefs: UserPreferences, out: ScoreBreakdown) -> None:
    priorities, reason = SEGMENT_BONUSES[car.segment]
    if prefs.has_priority(*priorities):
        out.bonus += SEGMENT_BONUS
        out.reasons.append(reason)


# Evaluation order is also the order of reasons and warnings in the output.
_CRITERIA = (
    _score_budget,
    _score_body_type,
    _score_fuel_type,
    _score_efficiency,
    _score_safety,
    _score_seating,
    _score_features,
    _apply_segment_bonus,
)


def score_breakdown(car: Car, prefs: UserPreferences) -> ScoreBreakdown:
    """
    Evaluate every criterion for *car* against *prefs*.

    Preferences are expected to be well formed (``UserPreferences`` enforces
    this on construction); no further validation happens here.
    """
    breakdown = ScoreBreakdown()
    for criterion in _CRITERIA:
        criterion(car, prefs, breakdown)
    return breakdown


def score_car(car: Car, prefs: UserPreferences) -> CarRecommendation:
    breakdown = score_breakdown(car, prefs)
    return CarRecommendation(
        car=car,
        match_score=breakdown.match_score,
        reasons=breakdown.reasons,
        warnings=breakdown.warnings,
    )
