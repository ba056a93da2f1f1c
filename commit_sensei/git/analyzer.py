"""Git Analyzer - Read the staged diff and create the commit."""

import subprocess


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Runs the few git commands the generator needs."""

    def __init__(self):
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace'
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_staged_diff(self) -> str:
        """Staged diff text, or "" when nothing is staged."""
        return self._run_git('diff', '--staged', '--diff-algorithm=minimal')

    def commit(self, message: str) -> str:
        """Commit the staged changes with `message`. Returns git's summary output."""
        # Passed as an argument, never through a shell, so quotes in the message are safe
        return self._run_git('commit', '-m', message)
