from __future__ import annotations

import os
from dataclasses import dataclass, field

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig


@dataclass(frozen=True)
class CompletionSettings:
    temperature: float
    max_tokens: int


@dataclass(frozen=True)
class AdvisorConfig:
    """
    Settings for the advisor endpoints.

    Each operation has its own sampling temperature and token budget;
    comparisons need the longest replies, questionnaires the most variety.
    """

    llm: LLMConfig = DEFAULT_LLM_CONFIG
    cache_ttl_seconds: float = float(os.getenv("ADVISOR_CACHE_TTL", "300"))
    max_history_turns: int = 10
    max_catalog_cars: int = 5
    chat: CompletionSettings = field(
        default_factory=lambda: CompletionSettings(temperature=0.7, max_tokens=800)
    )
    compare: CompletionSettings = field(
        default_factory=lambda: CompletionSettings(temperature=0.6, max_tokens=2500)
    )
    questionnaire: CompletionSettings = field(
        default_factory=lambda: CompletionSettings(temperature=0.8, max_tokens=1500)
    )
    recommend: CompletionSettings = field(
        default_factory=lambda: CompletionSettings(temperature=0.7, max_tokens=2000)
    )


DEFAULT_ADVISOR_CONFIG = AdvisorConfig()
