from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BodyType(str, Enum):
    sedan = "sedan"
    suv = "suv"
    hatchback = "hatchback"
    coupe = "coupe"
    truck = "truck"
    convertible = "convertible"


class FuelType(str, Enum):
    gasoline = "gasoline"
    hybrid = "hybrid"
    electric = "electric"
    diesel = "diesel"


class Transmission(str, Enum):
    manual = "manual"
    automatic = "automatic"
    cvt = "cvt"


class Drivetrain(str, Enum):
    fwd = "fwd"
    rwd = "rwd"
    awd = "awd"
    four_wd = "4wd"


class Segment(str, Enum):
    luxury = "luxury"
    economy = "economy"
    sport = "sport"
    family = "family"


class MaintenanceCost(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Importance(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Usage(str, Enum):
    daily_commute = "daily_commute"
    weekend_trips = "weekend_trips"
    family_use = "family_use"
    business = "business"
    recreation = "recreation"


class Experience(str, Enum):
    first_time = "first_time"
    experienced = "experienced"
    enthusiast = "enthusiast"


class Priority(str, Enum):
    fuel_economy = "fuel_economy"
    performance = "performance"
    comfort = "comfort"
    safety = "safety"
    reliability = "reliability"
    value = "value"
    prestige = "prestige"
    practicality = "practicality"
    driving_experience = "driving_experience"
    technology = "technology"


# ── Catalog ─────────────────────────────────────────────────────────────


class Car(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    make: str
    model: str
    year: int
    price: float = Field(..., ge=0)
    type: BodyType
    fuel_type: FuelType
    fuel_efficiency: float = Field(..., gt=0, description="Combined MPG")
    safety_rating: int = Field(..., ge=1, le=5)
    seating_capacity: int = Field(..., ge=2)
    transmission: Transmission
    drivetrain: Drivetrain
    features: tuple[str, ...] = ()
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()
    segment: Segment
    reliability: float = Field(..., ge=1, le=10)
    maintenance_cost: MaintenanceCost
    resale_value: float = Field(..., ge=1, le=10)

    @property
    def display_name(self) -> str:
        return f"{self.year} {self.make} {self.model}"


# ── Preferences ─────────────────────────────────────────────────────────


class BudgetRange(BaseModel):
    min: float = Field(default=20000, ge=0)
    max: float = Field(default=50000, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "BudgetRange":
        if self.max < self.min:
            raise ValueError("budget max must be greater than or equal to budget min")
        return self


class FuelEfficiencyRequirement(BaseModel):
    min: float = Field(default=25, ge=0, description="Minimum acceptable MPG")
    importance: Importance = Importance.medium


class SafetyRequirement(BaseModel):
    min: int = Field(default=4, ge=1, le=5)
    importance: Importance = Importance.high


class UserPreferences(BaseModel):
    budget: BudgetRange = Field(default_factory=BudgetRange)
    fuel_efficiency: FuelEfficiencyRequirement = Field(
        default_factory=FuelEfficiencyRequirement
    )
    car_types: list[BodyType] = Field(default_factory=list)
    fuel_types: list[FuelType] = Field(default_factory=list)
    seating_capacity: int = Field(default=5, ge=1)
    transmission: list[Transmission] = Field(default_factory=list)
    drivetrain: list[Drivetrain] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    safety_rating: SafetyRequirement = Field(default_factory=SafetyRequirement)
    usage: Usage = Usage.daily_commute
    experience: Experience = Experience.experienced
    priorities: list[Priority] = Field(default_factory=list)

    def has_priority(self, *priorities: Priority) -> bool:
        return any(p in self.priorities for p in priorities)


# ── Results ─────────────────────────────────────────────────────────────


class CarRecommendation(BaseModel):
    car: Car
    match_score: int = Field(..., ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    similarity_score: float | None = None


class RankingStrategy(str, Enum):
    simple = "simple"
    ensemble = "ensemble"


class RecommendationRequest(BaseModel):
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    limit: int = Field(default=10, ge=1, le=50)
    ensemble: bool = Field(
        default=True, description="Blend scoring with similarity and clustering"
    )
    seed: int | None = Field(
        default=None, description="Seed for reproducible cluster initialisation"
    )


class RecommendationResponse(BaseModel):
    recommendations: list[CarRecommendation]
    total_candidates: int
    strategy: RankingStrategy
