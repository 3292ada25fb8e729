"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send chat-completion requests on behalf of the advisor endpoints.
- Graceful fallback (``None``) when the LLM is unavailable or returns
  invalid output.
"""
