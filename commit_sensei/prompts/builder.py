"""Prompt Builder - Construct LLM prompts for commit message generation."""

from dataclasses import dataclass

from commit_sensei import COMMIT_TYPES


@dataclass
class PromptConfig:
    """User-provided context that shapes the prompt."""
    hint: str | None = None
    forced_type: str | None = None
    max_subject_length: int = 50


class PromptBuilder:
    """Constructs prompts for single-line conventional commit titles."""

    def build(self, diff: str, config: PromptConfig | None = None) -> str:
        config = config or PromptConfig()
        sections = [
            self._build_role_section(),
            self._build_types_section(config),
            self._build_rules_section(config),
            self._build_context_section(config),
            self._build_diff_section(diff),
        ]
        return "\n\n".join(s for s in sections if s)

    def _build_role_section(self) -> str:
        return (
            "You are an automated tool that writes a conventional git commit message "
            "for the staged diff below."
        )

    def _build_types_section(self, config: PromptConfig) -> str:
        if config.forced_type:
            return f"Use type '{config.forced_type}': {COMMIT_TYPES[config.forced_type]}."
        lines = ["Choose the type that matches the PRIMARY purpose of the change:"]
        lines.extend(f"- {name}: {desc}" for name, desc in COMMIT_TYPES.items())
        return "\n".join(lines)

    def _build_rules_section(self, config: PromptConfig) -> str:
        return f"""<format>
<type>[optional scope]: <description>

- Start the description with an imperative verb
- Be specific about what changed and why
- Keep the whole title within {config.max_subject_length} characters
- Wrap file names in single quotes, e.g. 'setup.py'
- Title only: no body, no footers
- Your response is passed directly to 'git commit -m'
</format>"""

    def _build_context_section(self, config: PromptConfig) -> str:
        if not config.hint:
            return ""
        return f"<context>\n{config.hint}\n</context>"

    def _build_diff_section(self, diff: str) -> str:
        return f"<diff>\n{diff.strip()}\n</diff>"
