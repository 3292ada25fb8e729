from __future__ import annotations

import pytest

from caradvisor.recommendations.models import Car, UserPreferences
from caradvisor.recommendations.scoring import score_breakdown, score_car


def _car(**overrides) -> Car:
    data = {
        "id": "1",
        "make": "Test",
        "model": "Sedan",
        "year": 2024,
        "price": 20000,
        "type": "sedan",
        "fuel_type": "gasoline",
        "fuel_efficiency": 30,
        "safety_rating": 5,
        "seating_capacity": 5,
        "transmission": "automatic",
        "drivetrain": "fwd",
        "features": (),
        "segment": "economy",
        "reliability": 7,
        "maintenance_cost": "low",
        "resale_value": 7,
    }
    data.update(overrides)
    return Car(**data)


def _prefs(**overrides) -> UserPreferences:
    data = {
        "budget": {"min": 15000, "max": 25000},
        "car_types": ["sedan"],
        "fuel_types": ["gasoline"],
        "fuel_efficiency": {"min": 25, "importance": "medium"},
        "safety_rating": {"min": 4, "importance": "high"},
        "seating_capacity": 5,
        "features": [],
        "priorities": ["value"],
    }
    data.update(overrides)
    return UserPreferences(**data)


# ── Budget ───────────────────────────────────────────────────────────────


class TestBudget:
    @pytest.mark.parametrize("price", [15000, 25000, 20000])
    def test_full_credit_inside_range(self, price):
        breakdown = score_breakdown(_car(price=price), _prefs())
        assert breakdown.components["budget"] == 25

    def test_below_minimum_is_affordable_not_a_warning(self):
        breakdown = score_breakdown(_car(price=10000), _prefs())
        assert breakdown.components["budget"] == pytest.approx(20)
        assert "Very affordable option" in breakdown.reasons
        assert breakdown.warnings == []

    def test_slightly_over_budget_decays_linearly(self):
        breakdown = score_breakdown(_car(price=27500), _prefs())
        assert breakdown.components["budget"] == pytest.approx(12.5)
        assert breakdown.warnings[0] == "10.0% over budget"

    def test_far_over_budget_earns_nothing(self):
        rec = score_car(_car(price=40000), _prefs())
        breakdown = score_breakdown(_car(price=40000), _prefs())
        assert breakdown.components["budget"] == 0
        assert rec.warnings[0] == "Significantly over budget by $15,000"

    def test_zero_budget_max_counts_as_far_over(self):
        breakdown = score_breakdown(_car(price=5000), _prefs(budget={"min": 0, "max": 0}))
        assert breakdown.components["budget"] == 0
        assert breakdown.warnings[0] == "Significantly over budget by $5,000"


# ── Other criteria ───────────────────────────────────────────────────────


class TestCriteria:
    def test_body_and_fuel_type_have_no_partial_credit(self):
        breakdown = score_breakdown(_car(type="suv", fuel_type="diesel"), _prefs())
        assert breakdown.components["type"] == 0
        assert breakdown.components["fuel_type"] == 0

    def test_efficiency_bonus_is_capped(self):
        breakdown = score_breakdown(_car(fuel_efficiency=45), _prefs())
        assert breakdown.components["fuel_efficiency"] == pytest.approx(22.5)

    def test_efficiency_weight_follows_importance(self):
        high = _prefs(fuel_efficiency={"min": 30, "importance": "high"})
        low = _prefs(fuel_efficiency={"min": 30, "importance": "low"})
        assert score_breakdown(_car(), high).weights["fuel_efficiency"] == 20
        assert score_breakdown(_car(), low).weights["fuel_efficiency"] == 10

    def test_efficiency_below_minimum_warns(self):
        breakdown = score_breakdown(_car(fuel_efficiency=20), _prefs())
        assert breakdown.components["fuel_efficiency"] == pytest.approx(11.25)
        assert "Lower fuel efficiency than preferred (20 vs 25 MPG)" in breakdown.warnings

    def test_safety_scales_with_rating(self):
        breakdown = score_breakdown(_car(safety_rating=4), _prefs())
        assert breakdown.components["safety"] == pytest.approx(12)
        assert "Good 4-star safety rating" in breakdown.reasons

    def test_safety_below_minimum_warns(self):
        breakdown = score_breakdown(_car(safety_rating=3), _prefs())
        assert breakdown.components["safety"] == 0
        assert "Safety rating below your minimum (3 vs 4 stars)" in breakdown.warnings

    def test_seating_shortfall_names_both_values(self):
        rec = score_car(_car(), _prefs(seating_capacity=7))
        breakdown = score_breakdown(_car(), _prefs(seating_capacity=7))
        assert breakdown.components["seating"] == 0
        warning = next(w for w in rec.warnings if w.startswith("Limited seating"))
        assert "5" in warning and "7" in warning

    def test_extra_seats(self):
        rec = score_car(_car(seating_capacity=8), _prefs())
        assert "Extra seating capacity (8 seats)" in rec.reasons

    def test_features_are_proportional(self):
        breakdown = score_breakdown(
            _car(features=("Heated Seats", "Sunroof")),
            _prefs(features=["Heated Seats", "Navigation"]),
        )
        assert breakdown.components["features"] == pytest.approx(5)
        assert "Has 1 of your desired features" in breakdown.reasons

    def test_no_requested_features_earns_nothing(self):
        breakdown = score_breakdown(_car(features=("Sunroof",)), _prefs(features=[]))
        assert breakdown.components["features"] == 0
        assert breakdown.weights["features"] == 10

    @pytest.mark.parametrize(
        "segment,priority,reason",
        [
            ("luxury", "prestige", "Luxury segment matches your priorities"),
            ("economy", "fuel_economy", "Economy segment offers great value"),
            ("sport", "driving_experience", "Sport segment delivers performance"),
            ("family", "safety", "Family-oriented vehicle"),
        ],
    )
    def test_segment_bonus(self, segment, priority, reason):
        breakdown = score_breakdown(_car(segment=segment), _prefs(priorities=[priority]))
        assert breakdown.bonus == 5
        assert breakdown.reasons[-1] == reason

    def test_no_segment_bonus_without_matching_priority(self):
        breakdown = score_breakdown(_car(segment="sport"), _prefs(priorities=["value"]))
        assert breakdown.bonus == 0


# ── Final score ──────────────────────────────────────────────────────────


class TestMatchScore:
    def test_well_matched_economy_sedan(self):
        rec = score_car(_car(), _prefs())
        assert rec.match_score >= 90
        assert rec.match_score == 98
        assert rec.warnings == []

    def test_over_budget_scores_noticeably_lower(self):
        in_budget = score_car(_car(), _prefs())
        over_budget = score_car(_car(price=40000), _prefs())
        assert over_budget.match_score <= in_budget.match_score - 20
        assert any("over budget" in w for w in over_budget.warnings)

    def test_reasons_follow_evaluation_order(self):
        rec = score_car(_car(), _prefs())
        assert rec.reasons == [
            "Within your budget of $15,000 - $25,000",
            "Matches your preferred sedan body style",
            "Uses your preferred gasoline fuel type",
            "Excellent fuel efficiency: 30 MPG",
            "Top 5-star safety rating",
            "Perfect seating capacity (5 seats)",
            "Economy segment offers great value",
        ]

    def test_warnings_follow_evaluation_order(self):
        rec = score_car(
            _car(price=40000, fuel_efficiency=20, safety_rating=3),
            _prefs(seating_capacity=7),
        )
        assert [w.split(" ")[0] for w in rec.warnings] == [
            "Significantly", "Lower", "Safety", "Limited",
        ]

    def test_score_is_capped_at_100(self):
        rec = score_car(
            _car(fuel_efficiency=45, features=("Sunroof",)),
            _prefs(features=["Sunroof"]),
        )
        assert rec.match_score == 100

    def test_score_floor_is_zero(self):
        rec = score_car(
            _car(price=100000, type="suv", fuel_type="diesel", fuel_efficiency=5,
                 safety_rating=1, seating_capacity=2),
            _prefs(seating_capacity=7, features=["Sunroof"], priorities=[]),
        )
        assert rec.match_score == 0

    def test_score_is_deterministic(self):
        car, prefs = _car(price=26000, fuel_efficiency=22), _prefs()
        assert score_car(car, prefs) == score_car(car, prefs)
