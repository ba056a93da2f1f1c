"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


SYSTEM_PROMPT = """You write git commit messages that follow the Conventional Commits specification.
Reply with the commit message only: no preamble, no quotes, no code fences."""

TEMPERATURE = 0.4
MAX_OUTPUT_TOKENS = 200


@dataclass
class LLMResponse:
    """Structured response from any LLM provider.

    `tokens_used` is None when the provider reports no usage.
    """
    content: str
    model: str = ""
    tokens_used: int | None = None


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class LLMClient(ABC):
    """Abstract base for LLM clients."""

    @abstractmethod
    def generate(self, prompt: str) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
