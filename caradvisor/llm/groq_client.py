from __future__ import annotations

import json
import logging
import re
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def chat_completion(
    messages: list[dict[str, str]],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    *,
    temperature: float = 0.7,
    max_tokens: int | None = None,
    json_mode: bool = False,
) -> str | None:
    """
    Send *messages* to the Groq chat-completions API.

    Returns the assistant's reply, or ``None`` when the client is disabled,
    has no key, the call fails, or the reply is empty. ``json_mode`` asks
    for a JSON object reply unless the config turns that off.
    """
    if not config.enabled or not config.api_key:
        return None

    kwargs: dict[str, Any] = {
        "model": config.model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens if max_tokens is not None else config.default_max_tokens,
    }
    if json_mode and config.json_responses:
        kwargs["response_format"] = {"type": "json_object"}

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(**kwargs)
        content = (response.choices[0].message.content or "").strip()
    except Exception:
        logger.warning("Groq LLM call failed", exc_info=True)
        return None

    if not content:
        logger.warning("Groq LLM returned an empty response")
        return None
    return content


def parse_json_object(text: str | None) -> dict[str, Any] | None:
    """Parse an LLM reply as a JSON object, tolerating Markdown code fences."""
    if not text:
        return None

    raw = text.strip()
    fenced = _CODE_FENCE_RE.match(raw)
    if fenced:
        raw = fenced.group(1)

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("LLM response was not valid JSON")
        return None

    return parsed if isinstance(parsed, dict) else None
