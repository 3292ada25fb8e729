from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Request

from .advisor.models import (
    AdvisorRecommendationRequest,
    AdvisorRecommendationResponse,
    ChatRequest,
    ChatResponse,
    CompareRequest,
    ComparisonResponse,
    QuestionnaireRequest,
    QuestionnaireResponse,
)
from .advisor.service import AdvisorService
from .recommendations.catalog import get_car, get_catalog
from .recommendations.models import (
    BodyType,
    Car,
    FuelType,
    Priority,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.ranking import recommend

app = FastAPI(title="CarAdvisor AI", version="2.0.0")
app.state.advisor = AdvisorService()


def get_advisor(request: Request) -> AdvisorService:
    return request.app.state.advisor


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    catalog = get_catalog()
    features: set[str] = set()
    for car in catalog:
        features.update(car.features)
    return {
        "makes": sorted({car.make for car in catalog}),
        "body_types": [t.value for t in BodyType],
        "fuel_types": [f.value for f in FuelType],
        "features": sorted(features),
        "priorities": [p.value for p in Priority],
    }


@app.get("/cars", response_model=list[Car])
def list_cars() -> list[Car]:
    return list(get_catalog())


@app.get("/cars/{car_id}", response_model=Car)
def car_detail(car_id: str) -> Car:
    car = get_car(car_id)
    if car is None:
        raise HTTPException(status_code=404, detail=f"Car {car_id} not found")
    return car


# ── Catalog recommendations ──────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(body: RecommendationRequest) -> RecommendationResponse:
    return recommend(body)


# ── AI advisor endpoints ─────────────────────────────────────────────────


@app.post("/ai/chat", response_model=ChatResponse)
def ai_chat(
    body: ChatRequest,
    advisor: AdvisorService = Depends(get_advisor),
) -> ChatResponse:
    return advisor.chat(body)


@app.post("/ai/compare", response_model=ComparisonResponse)
def ai_compare(
    body: CompareRequest,
    advisor: AdvisorService = Depends(get_advisor),
) -> ComparisonResponse:
    return advisor.compare(body)


@app.post("/ai/questionnaire", response_model=QuestionnaireResponse)
def ai_questionnaire(
    body: QuestionnaireRequest,
    advisor: AdvisorService = Depends(get_advisor),
) -> QuestionnaireResponse:
    return advisor.questionnaire(body)


@app.post("/ai/recommendations", response_model=AdvisorRecommendationResponse)
def ai_recommendations(
    body: AdvisorRecommendationRequest,
    advisor: AdvisorService = Depends(get_advisor),
) -> AdvisorRecommendationResponse:
    return advisor.recommend(body)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats(advisor: AdvisorService = Depends(get_advisor)) -> dict:
    return advisor.cache.stats()
