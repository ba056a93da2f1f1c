"""Prompt Construction Package"""

from commit_sensei.prompts.builder import PromptBuilder, PromptConfig

__all__ = [
    "PromptBuilder",
    "PromptConfig",
]
