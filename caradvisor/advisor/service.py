from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from ..llm.groq_client import chat_completion, parse_json_object
from ..recommendations.cache import TTLCache
from ..recommendations.catalog import get_catalog
from ..recommendations.models import Car
from .config import DEFAULT_ADVISOR_CONFIG, AdvisorConfig, CompletionSettings
from .models import (
    AdvisorRecommendationRequest,
    AdvisorRecommendationResponse,
    ChatRequest,
    ChatResponse,
    Comparison,
    ComparisonResponse,
    CompareRequest,
    ProgressInfo,
    Question,
    QuestionnaireRequest,
    QuestionnaireResponse,
    QuestionnaireStage,
    QuestionOption,
    QuestionType,
)
from .prompts import (
    COMPARE_SYSTEM_PROMPT,
    QUESTIONNAIRE_SYSTEM_PROMPT,
    RECOMMENDATION_SYSTEM_PROMPT,
    build_chat_system_prompt,
    build_compare_prompt,
    build_questionnaire_prompt,
    build_recommendation_prompt,
    format_catalog_cars,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

_RECOMMENDATION_HINT_RE = re.compile(
    r"recommend|suggest|consider|look at|try|best.*car", re.IGNORECASE
)

# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------

FALLBACK_CHAT_MESSAGE = (
    "I apologize, but I'm having trouble processing your question right now. "
    "Please try asking again or rephrase your question."
)

FALLBACK_COMPARISON = (
    "I apologize, but I'm having trouble generating the comparison right now. "
    "Please try again."
)

FALLBACK_ADVICE = (
    "I apologize, but I'm having trouble processing your request right now. "
    "In the meantime, try the catalog recommendations based on your preferences."
)

FALLBACK_NEXT_STEPS = [
    "Use the preference form for catalog-based recommendations",
    "Shortlist two or three cars and book test drives",
    "Compare insurance and financing quotes before visiting a dealer",
]


def _fallback_initial_questions() -> QuestionnaireResponse:
    return QuestionnaireResponse(
        questions=[
            Question(
                id="budget_range",
                question="What is your comfortable budget for your next car?",
                type=QuestionType.radio,
                options=[
                    QuestionOption(value="0-20", label="Under $20,000"),
                    QuestionOption(value="20-35", label="$20,000 - $35,000"),
                    QuestionOption(value="35-50", label="$35,000 - $50,000"),
                    QuestionOption(value="50+", label="Above $50,000"),
                ],
                required=True,
                help_text="Consider the total price including taxes and registration",
            )
        ],
        progress_info=ProgressInfo(
            current_step=1,
            total_steps=6,
            completion_message="Let's find the perfect car for you",
        ),
        fallback=True,
    )


def _fallback_followup_questions() -> QuestionnaireResponse:
    return QuestionnaireResponse(
        questions=[],
        analysis_insight="Please try again to get personalized follow-up questions",
        next_steps="We'll analyze your preferences to suggest the best cars",
        fallback=True,
    )


def _not_fallback(response: BaseModel) -> bool:
    return not getattr(response, "fallback", False)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class AdvisorService:
    """
    LLM-backed car advice: chat, comparisons, questionnaires and free-form
    recommendations.

    Every operation returns a valid response. When the LLM is unavailable or
    replies with something that does not match the response schema, fixed
    fallback content is returned instead.
    """

    def __init__(
        self,
        config: AdvisorConfig = DEFAULT_ADVISOR_CONFIG,
        cache: TTLCache | None = None,
        catalog_provider: Callable[[], Sequence[Car]] = get_catalog,
    ):
        self.config = config
        self.cache = cache if cache is not None else TTLCache(config.cache_ttl_seconds)
        self._catalog_provider = catalog_provider

    # ── helpers ──────────────────────────────────────────────────────────

    def _complete_json(
        self,
        system_prompt: str,
        prompt: str,
        response_model: type[ResponseT],
        settings: CompletionSettings,
    ) -> ResponseT | None:
        content = chat_completion(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            self.config.llm,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            json_mode=True,
        )
        parsed = parse_json_object(content)
        if parsed is None:
            return None
        try:
            return response_model.model_validate(parsed)
        except ValidationError:
            logger.warning(
                "LLM response did not match %s", response_model.__name__, exc_info=True,
            )
            return None

    def mentioned_cars(self, message: str) -> list[Car]:
        """Catalog cars named in *message*: model matches first, then make matches."""
        lower = message.lower()
        catalog = self._catalog_provider()
        by_model = [car for car in catalog if car.model.lower() in lower]
        by_make = [
            car for car in catalog
            if car.make.lower() in lower and car not in by_model
        ]
        return (by_model + by_make)[: self.config.max_catalog_cars]

    # ── operations ───────────────────────────────────────────────────────

    def chat(self, request: ChatRequest) -> ChatResponse:
        messages = [{"role": "system", "content": build_chat_system_prompt(request.context)}]

        cars = self.mentioned_cars(request.message)
        if cars:
            messages.append({"role": "system", "content": format_catalog_cars(cars)})

        history = request.conversation_history[-self.config.max_history_turns:]
        messages.extend(turn.model_dump() for turn in history)
        messages.append({"role": "user", "content": request.message})

        reply = chat_completion(
            messages,
            self.config.llm,
            temperature=self.config.chat.temperature,
            max_tokens=self.config.chat.max_tokens,
        )
        if reply is None:
            return ChatResponse(message=FALLBACK_CHAT_MESSAGE, error=True)

        return ChatResponse(
            message=reply,
            contains_recommendations=bool(_RECOMMENDATION_HINT_RE.search(reply)),
        )

    def compare(self, request: CompareRequest) -> ComparisonResponse:
        def _compute() -> ComparisonResponse:
            result = self._complete_json(
                COMPARE_SYSTEM_PROMPT,
                build_compare_prompt(request),
                ComparisonResponse,
                self.config.compare,
            )
            if result is None:
                return ComparisonResponse(
                    comparison=Comparison(overall_recommendation=FALLBACK_COMPARISON),
                    fallback=True,
                )
            return result

        key = {"op": "compare", **request.model_dump(mode="json")}
        return self.cache.get_or_compute(key, _compute, _not_fallback)

    def questionnaire(self, request: QuestionnaireRequest) -> QuestionnaireResponse:
        def _compute() -> QuestionnaireResponse:
            result = self._complete_json(
                QUESTIONNAIRE_SYSTEM_PROMPT,
                build_questionnaire_prompt(request),
                QuestionnaireResponse,
                self.config.questionnaire,
            )
            if result is not None:
                return result
            if request.stage == QuestionnaireStage.initial:
                return _fallback_initial_questions()
            return _fallback_followup_questions()

        key = {"op": "questionnaire", **request.model_dump(mode="json")}
        return self.cache.get_or_compute(key, _compute, _not_fallback)

    def recommend(self, request: AdvisorRecommendationRequest) -> AdvisorRecommendationResponse:
        def _compute() -> AdvisorRecommendationResponse:
            result = self._complete_json(
                RECOMMENDATION_SYSTEM_PROMPT,
                build_recommendation_prompt(request),
                AdvisorRecommendationResponse,
                self.config.recommend,
            )
            if result is None:
                return AdvisorRecommendationResponse(
                    recommendations=[],
                    additional_advice=FALLBACK_ADVICE,
                    next_steps=list(FALLBACK_NEXT_STEPS),
                    fallback=True,
                )
            return result

        key = {"op": "recommend", **request.model_dump(mode="json")}
        return self.cache.get_or_compute(key, _compute, _not_fallback)
