"""
AI advisor layer.

Responsibilities:
- Validate chat, comparison, questionnaire and recommendation requests.
- Build prompts (with catalog data where relevant) and call the LLM.
- Validate LLM output against explicit response schemas.
- Fall back to fixed content when the LLM is unavailable or off-schema.
"""
