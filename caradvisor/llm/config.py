from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# GROQ_API_KEY and GROQ_MODEL may come from a .env beside pyproject.toml
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    """Groq connection settings shared by every advisor call."""

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 20.0
    default_max_tokens: int = 1024
    json_responses: bool = True
    enabled: bool = True


DEFAULT_LLM_CONFIG = LLMConfig()
