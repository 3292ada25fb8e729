from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from ..recommendations.models import BudgetRange


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Shared ───────────────────────────────────────────────────────────────


class CarReference(BaseModel):
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    variant: str | None = None

    @property
    def label(self) -> str:
        parts = [self.brand, self.model]
        if self.variant:
            parts.append(self.variant)
        return " ".join(parts)


class AdvisorPreferences(BaseModel):
    budget: BudgetRange
    body_type: list[str] = Field(default_factory=list)
    fuel_type: list[str] = Field(default_factory=list)
    transmission: str | None = None
    features: list[str] = Field(default_factory=list)
    primary_use: str | None = None
    driving_experience: str | None = None
    physical_needs: list[str] = Field(default_factory=list)
    location: str | None = None


# ── Chat ────────────────────────────────────────────────────────────────


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatContext(BaseModel):
    user_preferences: AdvisorPreferences | None = None
    current_cars: list[CarReference] = Field(default_factory=list)


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)
    conversation_history: list[ChatTurn] = Field(default_factory=list)
    context: ChatContext | None = None


class ChatResponse(BaseModel):
    message: str
    contains_recommendations: bool = False
    timestamp: datetime = Field(default_factory=_now)
    error: bool = False


# ── Comparison ──────────────────────────────────────────────────────────


class CompareUserContext(BaseModel):
    budget: BudgetRange | None = None
    primary_use: str | None = None
    special_needs: list[str] = Field(default_factory=list)
    location: str | None = None


class CompareRequest(BaseModel):
    cars: list[CarReference] = Field(..., min_length=2, max_length=5)
    user_context: CompareUserContext | None = None
    focus_areas: list[str] = Field(default_factory=list)


class PriceComparison(BaseModel):
    car: str
    starting_price: float | None = None
    on_road_price: float | None = None
    value_rating: str | None = None


class FeatureRating(BaseModel):
    car: str
    rating: str
    details: str = ""


class FeatureComparison(BaseModel):
    feature: str
    cars: list[FeatureRating] = Field(default_factory=list)


class SafetySummary(BaseModel):
    car: str
    airbags: int | None = None
    safety_rating: str | None = None
    key_features: list[str] = Field(default_factory=list)


class ProsAndCons(BaseModel):
    car: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    best_for: str | None = None


class Comparison(BaseModel):
    overall_recommendation: str
    price_comparison: list[PriceComparison] = Field(default_factory=list)
    feature_comparison: list[FeatureComparison] = Field(default_factory=list)
    safety: list[SafetySummary] = Field(default_factory=list)
    pros_and_cons: list[ProsAndCons] = Field(default_factory=list)


class Alternative(BaseModel):
    car: str
    when_to_choose: str


class ComparisonVerdict(BaseModel):
    winner: str | None = None
    reasoning: str = ""
    alternatives: list[Alternative] = Field(default_factory=list)


class BuyingAdvice(BaseModel):
    test_drive_checklist: list[str] = Field(default_factory=list)
    negotiation_tips: list[str] = Field(default_factory=list)
    financing_options: list[str] = Field(default_factory=list)
    dealership_notes: str | None = None


class ComparisonResponse(BaseModel):
    comparison: Comparison
    recommendation: ComparisonVerdict | None = None
    buying_advice: BuyingAdvice | None = None
    fallback: bool = False


# ── Questionnaire ───────────────────────────────────────────────────────


class QuestionnaireStage(str, Enum):
    initial = "initial"
    followup = "followup"


class QuestionType(str, Enum):
    radio = "radio"
    checkbox = "checkbox"
    select = "select"
    text = "text"
    range = "range"


class QuestionOption(BaseModel):
    value: str
    label: str


class Question(BaseModel):
    id: str
    question: str
    type: QuestionType
    options: list[QuestionOption] = Field(default_factory=list)
    required: bool = False
    help_text: str | None = None
    min: float | None = None
    max: float | None = None


class QuestionAnswer(BaseModel):
    question_id: str
    question: str
    answer: str
    answer_type: str


class QuestionnaireContext(BaseModel):
    budget: BudgetRange | None = None
    preferences: AdvisorPreferences | None = None


class QuestionnaireRequest(BaseModel):
    stage: QuestionnaireStage
    previous_answers: list[QuestionAnswer] = Field(default_factory=list)
    current_context: QuestionnaireContext | None = None


class ProgressInfo(BaseModel):
    current_step: int = Field(..., ge=1)
    total_steps: int = Field(..., ge=1)
    completion_message: str = ""


class QuestionnaireResponse(BaseModel):
    questions: list[Question] = Field(default_factory=list)
    progress_info: ProgressInfo | None = None
    analysis_insight: str | None = None
    next_steps: str | None = None
    fallback: bool = False


# ── AI recommendations ──────────────────────────────────────────────────


class AnsweredQuestion(BaseModel):
    question: str
    answer: str


class AdvisorRecommendationRequest(BaseModel):
    preferences: AdvisorPreferences
    previous_answers: list[AnsweredQuestion] = Field(default_factory=list)


class PriceRange(BaseModel):
    min: float
    max: float


class KeySpecs(BaseModel):
    engine: str | None = None
    fuel_economy: str | None = None
    safety_rating: str | None = None
    warranty: str | None = None


class AdvisorCarRecommendation(BaseModel):
    brand: str
    model: str
    variant: str | None = None
    price_range: PriceRange | None = None
    why_recommended: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    key_specs: KeySpecs | None = None
    availability_notes: str | None = None


class AdvisorRecommendationResponse(BaseModel):
    recommendations: list[AdvisorCarRecommendation] = Field(default_factory=list)
    additional_advice: str = ""
    next_steps: list[str] = Field(default_factory=list)
    fallback: bool = False
