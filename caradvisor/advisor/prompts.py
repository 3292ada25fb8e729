from __future__ import annotations

from ..recommendations.models import BudgetRange, Car
from .models import (
    AdvisorPreferences,
    AdvisorRecommendationRequest,
    ChatContext,
    CompareRequest,
    QuestionnaireRequest,
    QuestionnaireStage,
)

# ---------------------------------------------------------------------------
# System prompts
# ---------------------------------------------------------------------------

CHAT_SYSTEM_PROMPT = """\
You are an expert car-buying advisor. You help people choose a car that fits \
their budget, their daily needs and their comfort.

COMMUNICATION STYLE:
- Use simple, jargon-free language and explain technical terms when needed
- Be patient and thorough, focus on practical benefits
- Give specific, actionable advice
- Prefer the catalog data supplied in the conversation over your own memory \
for prices and specifications

BUYER FOCUS:
- Prioritise safety, reliability and total cost of ownership
- Consider accessibility: entry/exit height, visibility, simple controls
- Suggest test driving several options before deciding"""

COMPARE_SYSTEM_PROMPT = (
    "You are an expert automotive consultant who writes fair, practical car "
    "comparisons. Always respond with valid JSON only."
)

QUESTIONNAIRE_SYSTEM_PROMPT = (
    "You are an expert in designing short, friendly car-buying questionnaires. "
    "Generate questions that lead to better recommendations. "
    "Always respond with valid JSON only."
)

RECOMMENDATION_SYSTEM_PROMPT = (
    "You are an expert automotive consultant who recommends cars that fit a "
    "buyer's needs. Always respond with valid JSON only."
)

# ---------------------------------------------------------------------------
# Response formats
# ---------------------------------------------------------------------------

_COMPARE_FORMAT = """\
{
  "comparison": {
    "overall_recommendation": "Which car is best for this buyer and why",
    "price_comparison": [
      {"car": "Brand Model", "starting_price": 28000, "on_road_price": 30500, "value_rating": "Excellent/Good/Average/Poor"}
    ],
    "feature_comparison": [
      {"feature": "Seat height & entry/exit", "cars": [{"car": "Brand Model", "rating": "Excellent", "details": "High seating, wide doors"}]}
    ],
    "safety": [
      {"car": "Brand Model", "airbags": 6, "safety_rating": "5 stars", "key_features": ["ABS", "Lane keep assist"]}
    ],
    "pros_and_cons": [
      {"car": "Brand Model", "pros": ["Easy to drive"], "cons": ["Firm ride"], "best_for": "City driving"}
    ]
  },
  "recommendation": {
    "winner": "Brand Model",
    "reasoning": "Why this car is the best fit",
    "alternatives": [{"car": "Brand Model", "when_to_choose": "If fuel economy matters more than comfort"}]
  },
  "buying_advice": {
    "test_drive_checklist": ["Check seat comfort"],
    "negotiation_tips": ["Shop at the end of the quarter"],
    "financing_options": ["Compare credit-union rates"],
    "dealership_notes": "Service network and support quality"
  }
}"""

_INITIAL_QUESTIONNAIRE_FORMAT = """\
{
  "questions": [
    {
      "id": "budget_range",
      "question": "What is your comfortable budget for your next car?",
      "type": "radio",
      "options": [{"value": "15-25", "label": "$15,000 - $25,000"}],
      "required": true,
      "help_text": "Include taxes, registration and insurance"
    }
  ],
  "progress_info": {"current_step": 1, "total_steps": 8, "completion_message": "These questions help us understand your needs"}
}"""

_FOLLOWUP_QUESTIONNAIRE_FORMAT = """\
{
  "questions": [
    {
      "id": "followup_1",
      "question": "Which of these features matter most to you?",
      "type": "checkbox",
      "options": [{"value": "automatic_transmission", "label": "Automatic transmission"}],
      "required": false,
      "help_text": "Select all that apply"
    }
  ],
  "analysis_insight": "Why these questions will refine the recommendations",
  "next_steps": "What happens after these questions are answered"
}"""

_RECOMMENDATION_FORMAT = """\
{
  "recommendations": [
    {
      "brand": "Brand",
      "model": "Model",
      "variant": "Trim",
      "price_range": {"min": 25000, "max": 32000},
      "why_recommended": "Why this car suits the buyer",
      "pros": ["Pro 1", "Pro 2"],
      "cons": ["Con 1"],
      "key_specs": {"engine": "2.5L 4-cyl", "fuel_economy": "32 MPG", "safety_rating": "5 stars", "warranty": "3 years / 36,000 miles"},
      "availability_notes": "Availability information"
    }
  ],
  "additional_advice": "General advice based on the buyer's preferences",
  "next_steps": ["Test drive the top two picks", "Get insurance quotes"]
}"""

# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _money(value: float) -> str:
    return f"${value:,.0f}"


def _budget_line(budget: BudgetRange) -> str:
    return f"{_money(budget.min)} - {_money(budget.max)}"


def format_catalog_cars(cars: list[Car]) -> str:
    lines = ["CATALOG DATA (use these figures when discussing these cars):"]
    for car in cars:
        lines.append(
            f"- {car.display_name}: {_money(car.price)}, {car.fuel_efficiency:g} MPG, "
            f"{car.seating_capacity} seats, {car.type.value}, {car.fuel_type.value}, "
            f"{car.safety_rating}-star safety, reliability {car.reliability:g}/10. "
            f"Key features: {', '.join(car.features[:4]) or 'n/a'}"
        )
    return "\n".join(lines)


def build_chat_system_prompt(context: ChatContext | None) -> str:
    parts = [CHAT_SYSTEM_PROMPT]
    if context and context.user_preferences:
        parts.append(
            f"USER CONTEXT: {context.user_preferences.model_dump_json(exclude_none=True)}"
        )
    if context and context.current_cars:
        cars = ", ".join(c.label for c in context.current_cars)
        parts.append(f"CARS BEING CONSIDERED: {cars}")
    parts.append("Provide helpful, accurate and personalised advice based on the user's question.")
    return "\n\n".join(parts)


def build_compare_prompt(request: CompareRequest) -> str:
    car_list = "\n".join(f"{i}. {car.label}" for i, car in enumerate(request.cars, start=1))

    context_lines: list[str] = []
    ctx = request.user_context
    if ctx:
        if ctx.budget:
            context_lines.append(f"Budget: {_budget_line(ctx.budget)}")
        if ctx.primary_use:
            context_lines.append(f"Primary use: {ctx.primary_use}")
        if ctx.special_needs:
            context_lines.append(f"Special needs: {', '.join(ctx.special_needs)}")
        if ctx.location:
            context_lines.append(f"Location: {ctx.location}")

    context_block = "\n".join(context_lines) or "None provided"
    focus = ", ".join(request.focus_areas) or "Overall comparison"

    return (
        "Provide a thorough comparison of these cars.\n\n"
        f"CARS TO COMPARE:\n{car_list}\n\n"
        f"USER CONTEXT:\n{context_block}\n\n"
        f"FOCUS AREAS: {focus}\n\n"
        "REQUIREMENTS:\n"
        "1. Include current market pricing\n"
        "2. Emphasise comfort, ease of use and safety\n"
        "3. Consider service networks and ownership costs\n"
        "4. Highlight the key differentiators and give practical buying advice\n\n"
        f"RESPONSE FORMAT (JSON):\n{_COMPARE_FORMAT}"
    )


def _answers_block(answers: list[tuple[str, str]]) -> str:
    return "\n\n".join(f"Q: {q}\nA: {a}" for q, a in answers)


def build_questionnaire_prompt(request: QuestionnaireRequest) -> str:
    if request.stage == QuestionnaireStage.initial:
        return (
            "Generate an initial set of smart questions for car buyers that help "
            "understand their specific needs and preferences.\n\n"
            "REQUIREMENTS:\n"
            "1. Clear, simple language\n"
            "2. Start with the most important questions\n"
            "3. Use multiple-choice options where appropriate\n\n"
            f"RESPONSE FORMAT (JSON):\n{_INITIAL_QUESTIONNAIRE_FORMAT}\n\n"
            "Create 6-8 essential questions covering: budget, body type, primary "
            "usage, physical needs, driving experience and key features."
        )

    answers = _answers_block([(a.question, a.answer) for a in request.previous_answers])
    context = (
        request.current_context.model_dump_json(exclude_none=True)
        if request.current_context
        else "None"
    )
    return (
        "Based on the previous answers, generate 2-3 follow-up questions that "
        "will narrow down the best car recommendations.\n\n"
        f"PREVIOUS ANSWERS:\n{answers or 'None'}\n\n"
        f"CURRENT CONTEXT:\n{context}\n\n"
        "REQUIREMENTS:\n"
        "1. Clarify ambiguous preferences\n"
        "2. Ask about specific features that matter to this buyer\n"
        "3. Build on the previous answers\n\n"
        f"RESPONSE FORMAT (JSON):\n{_FOLLOWUP_QUESTIONNAIRE_FORMAT}"
    )


def _preferences_block(prefs: AdvisorPreferences) -> str:
    return "\n".join([
        f"- Budget: {_budget_line(prefs.budget)}",
        f"- Body types: {', '.join(prefs.body_type) or 'Any'}",
        f"- Fuel types: {', '.join(prefs.fuel_type) or 'Any'}",
        f"- Transmission: {prefs.transmission or 'Any'}",
        f"- Required features: {', '.join(prefs.features) or 'Standard features'}",
        f"- Primary use: {prefs.primary_use or 'General driving'}",
        f"- Driving experience: {prefs.driving_experience or 'Not specified'}",
        f"- Physical needs: {', '.join(prefs.physical_needs) or 'None specified'}",
        f"- Location: {prefs.location or 'Not specified'}",
    ])


def build_recommendation_prompt(request: AdvisorRecommendationRequest) -> str:
    answers = _answers_block([(a.question, a.answer) for a in request.previous_answers])
    return (
        "Based on the user preferences and conversation context, provide "
        "personalised car recommendations.\n\n"
        f"USER PREFERENCES:\n{_preferences_block(request.preferences)}\n\n"
        f"CONVERSATION CONTEXT:\n{answers or 'None'}\n\n"
        "REQUIREMENTS:\n"
        "1. Recommend 3-5 cars across popular and lesser-known brands\n"
        "2. Consider easy entry/exit, comfortable seating, simple controls, "
        "good visibility and safety features\n"
        "3. Provide current market pricing\n"
        "4. Explain why each car fits the buyer and list relevant pros and cons\n\n"
        f"RESPONSE FORMAT (JSON):\n{_RECOMMENDATION_FORMAT}"
    )
