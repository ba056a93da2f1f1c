"""Gemini (Google Generative AI) LLM Client"""

from commit_sensei.llm.base import (
    LLMClient, LLMResponse, LLMError, SYSTEM_PROMPT, TEMPERATURE, MAX_OUTPUT_TOKENS,
)


class GeminiClient(LLMClient):
    """Gemini API client. Requires an API key from config or GEMINI_API_KEY."""

    DEFAULT_MODEL = "gemini-1.5-flash"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL

        if not self.api_key:
            raise LLMError(
                "No Gemini API key found. Run 'cm --setup' or set GEMINI_API_KEY:\n"
                "  export GEMINI_API_KEY='your-key-here'"
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise LLMError(
                "Google Generative AI SDK not installed. Run:\n"
                "  pip install google-generativeai"
            )

        genai.configure(api_key=self.api_key)
        self._model = genai.GenerativeModel(self.model, system_instruction=SYSTEM_PROMPT)

    @property
    def name(self) -> str:
        return f"Gemini ({self.model})"

    def generate(self, prompt: str) -> LLMResponse:
        from google.api_core import exceptions as google_exceptions

        try:
            response = self._model.generate_content(
                prompt,
                generation_config={
                    "temperature": TEMPERATURE,
                    "max_output_tokens": MAX_OUTPUT_TOKENS,
                },
            )
            # .text raises ValueError when the candidate was blocked or empty
            content = response.text.strip()
        except google_exceptions.ResourceExhausted as e:
            raise LLMError(f"Gemini quota exhausted: {e.message}")
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied):
            raise LLMError("Invalid Gemini API key. Check your config or GEMINI_API_KEY.")
        except google_exceptions.GoogleAPIError as e:
            raise LLMError(f"Gemini API error: {e}")
        except ValueError as e:
            raise LLMError(f"Gemini returned no text: {e}")

        if not content:
            raise LLMError("Gemini returned an empty response")

        usage = getattr(response, "usage_metadata", None)
        tokens = getattr(usage, "total_token_count", None) if usage else None

        return LLMResponse(content=content, model=self.model, tokens_used=tokens)
