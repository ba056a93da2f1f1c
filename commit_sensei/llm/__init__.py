"""LLM Client Package"""

from commit_sensei.llm.base import LLMClient, LLMResponse, LLMError, SYSTEM_PROMPT
from commit_sensei.llm.claude import ClaudeClient
from commit_sensei.llm.gemini import GeminiClient

PROVIDERS = {
    "gemini": GeminiClient,
    "claude": ClaudeClient,
}

AUTO_DETECT_ORDER = ["gemini", "claude"]


def get_client(provider: str = "auto", model: str | None = None, api_keys: dict | None = None) -> LLMClient:
    """Get an LLM client. Provider can be 'gemini', 'claude', or 'auto'.

    `api_keys` maps provider name to its key; a missing key makes the
    client raise LLMError.
    """
    api_keys = api_keys or {}

    if provider in PROVIDERS:
        return PROVIDERS[provider](api_key=api_keys.get(provider), model=model)

    if provider == "auto":
        for name in AUTO_DETECT_ORDER:
            try:
                return PROVIDERS[name](api_key=api_keys.get(name), model=model)
            except LLMError:
                continue

        raise LLMError(
            "No LLM provider available.\n\n"
            "Option 1 - Use Gemini:\n"
            "  cm --setup   (stores the key in .genai-config.json)\n"
            "  or: export GEMINI_API_KEY='your-key-here'\n\n"
            "Option 2 - Use Claude API:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'"
        )

    raise LLMError(f"Unknown provider: {provider}. Use 'gemini', 'claude', or 'auto'.")


__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "ClaudeClient",
    "GeminiClient",
    "get_client",
    "PROVIDERS",
    "SYSTEM_PROMPT",
]
