"""Git Operations Package"""

from commit_sensei.git.analyzer import GitAnalyzer, GitError

__all__ = [
    "GitAnalyzer",
    "GitError",
]
