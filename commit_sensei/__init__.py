"""
Commit Sensei

AI-generated commit messages from staged git changes, with local quota tracking.
"""

__version__ = "1.0.0"

# Centralized commit types - single source of truth
# Used by: prompts/builder.py, cli/utils.py (cleanup, emoji), cli/args.py (argparse)
COMMIT_TYPES = {
    'feat': 'A new feature',
    'fix': 'A bug fix',
    'build': 'Changes that affect the build system or external dependencies',
    'ci': 'Changes to CI configuration',
    'docs': 'Documentation only changes',
    'style': 'Code style changes (formatting, missing semi-colons, etc.)',
    'refactor': 'A code change that neither fixes a bug nor adds a feature',
    'perf': 'A code change that improves performance',
    'test': 'Adding or correcting tests',
    'chore': "Other changes that don't modify src or test files",
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

COMMIT_EMOJIS = {
    'feat': '✨',
    'fix': '🐛',
    'docs': '📚',
    'style': '💎',
    'refactor': '🔨',
    'perf': '🚀',
    'test': '🚨',
    'build': '📦',
    'ci': '👷',
    'chore': '🔧',
}
