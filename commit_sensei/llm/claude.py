"""Claude (Anthropic) LLM Client"""

from commit_sensei.llm.base import (
    LLMClient, LLMResponse, LLMError, SYSTEM_PROMPT, TEMPERATURE, MAX_OUTPUT_TOKENS,
)


class ClaudeClient(LLMClient):
    """Claude API client. Requires an API key from config or ANTHROPIC_API_KEY."""

    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL

        if not self.api_key:
            raise LLMError(
                "No API key found. Set ANTHROPIC_API_KEY environment variable:\n"
                "  export ANTHROPIC_API_KEY='your-key-here'"
            )

        try:
            from anthropic import Anthropic
            self._client = Anthropic(api_key=self.api_key)
        except ImportError:
            raise LLMError(
                "Anthropic SDK not installed. Run:\n"
                "  pip install anthropic"
            )

    @property
    def name(self) -> str:
        return f"Claude ({self.model})"

    def generate(self, prompt: str) -> LLMResponse:
        from anthropic import APIError, AuthenticationError, RateLimitError

        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=MAX_OUTPUT_TOKENS,
                temperature=TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}]
            )
        except AuthenticationError:
            raise LLMError("Invalid API key. Check your ANTHROPIC_API_KEY.")
        except RateLimitError as e:
            raise LLMError(f"Claude rate limit hit: {e.message}")
        except APIError as e:
            raise LLMError(f"Claude API error: {e.message}")

        content = ""
        for block in response.content:
            if block.type == "text":
                content = block.text.strip()
                break

        if not content:
            raise LLMError("Claude returned an empty response")

        usage = getattr(response, "usage", None)
        tokens = usage.input_tokens + usage.output_tokens if usage else None

        return LLMResponse(content=content, model=self.model, tokens_used=tokens)
