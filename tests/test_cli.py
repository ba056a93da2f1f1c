"""
Tests for the CLI generation flow with stubbed git and LLM collaborators.

Run with:
    pytest tests/test_cli.py -v
"""

import json
import re
import time

import pytest

from commit_sensei.cli import main as cli_main
from commit_sensei.config import Config
from commit_sensei.git import GitError
from commit_sensei.llm import LLMError, LLMResponse

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


class FakeAnalyzer:
    def __init__(self, diff="diff --git a/app.py b/app.py\n+print('hi')\n"):
        self.diff = diff
        self.committed = []

    def get_staged_diff(self):
        return self.diff

    def commit(self, message):
        self.committed.append(message)
        return "[main abc123] " + message


class FakeClient:
    name = "Fake (test-model)"

    def __init__(self, content="feat(app): greet on startup", tokens_used=250, error=None):
        self.content = content
        self.tokens_used = tokens_used
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model="test-model", tokens_used=self.tokens_used)


@pytest.fixture
def usage_path(tmp_path):
    return tmp_path / ".genai-usage.json"


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def setup_cli(monkeypatch, usage_path, analyzer, client):
    """Wire the CLI to fakes and a temp usage file."""
    config = Config(usage_file=str(usage_path))
    monkeypatch.setattr(cli_main, "load_config", lambda: config)
    monkeypatch.setattr(cli_main, "GitAnalyzer", lambda: analyzer)
    monkeypatch.setattr(cli_main, "get_client", lambda **kwargs: client)
    return config


def read_usage(path):
    return json.loads(path.read_text())


def now_ms():
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Quota gating
# ---------------------------------------------------------------------------

class TestQuotaGate:

    def test_daily_limit_blocks_generation(self, setup_cli, usage_path, client, capsys):
        usage_path.write_text(json.dumps({"requests": 1500, "tokens": 0, "timestamp": now_ms() - 1000}))

        assert cli_main.main([]) == 1
        assert client.prompts == []
        assert "daily request limit exceeded" in capsys.readouterr().err

    def test_corrupt_usage_file_aborts_before_generation(self, setup_cli, usage_path, client, monkeypatch, capsys):
        usage_path.write_text("{not json")
        monkeypatch.setattr(cli_main, "GitAnalyzer", lambda: pytest.fail("git should not run"))

        assert cli_main.main([]) == 1
        assert client.prompts == []
        err = capsys.readouterr().err
        assert "refusing to call the API" in err
        assert usage_path.read_text() == "{not json"

    def test_expired_window_lets_request_through(self, setup_cli, usage_path, client):
        usage_path.write_text(json.dumps({"requests": 1500, "tokens": 99, "timestamp": now_ms() - 90_000_000}))

        assert cli_main.main(["--dry-run"]) == 0
        assert len(client.prompts) == 1
        usage = read_usage(usage_path)
        assert (usage["requests"], usage["tokens"]) == (1, 250)

    def test_minute_limit_flag(self, setup_cli, usage_path, client):
        now = now_ms()
        recent = [{"timestamp": now - 1000, "tokens": 10}] * 15
        usage_path.write_text(json.dumps({"requests": 15, "tokens": 150, "timestamp": now, "recent": recent}))

        assert cli_main.main(["--dry-run"]) == 1
        assert cli_main.main(["--dry-run", "--no-minute-limits"]) == 0
        assert len(client.prompts) == 1


# ---------------------------------------------------------------------------
# Generation and recording
# ---------------------------------------------------------------------------

class TestGenerationFlow:

    def test_pipe_mode_prints_title_and_records_usage(self, setup_cli, usage_path, analyzer, capsys):
        assert cli_main.main([]) == 0

        assert capsys.readouterr().out.strip() == "✨ feat(app): greet on startup"
        assert analyzer.committed == []
        usage = read_usage(usage_path)
        assert (usage["requests"], usage["tokens"]) == (1, 250)

    def test_no_emoji(self, setup_cli, capsys):
        assert cli_main.main(["--no-emoji"]) == 0
        assert capsys.readouterr().out.strip() == "feat(app): greet on startup"

    def test_emoji_disabled_in_config(self, setup_cli, capsys):
        setup_cli.emoji = False
        assert cli_main.main([]) == 0
        assert capsys.readouterr().out.strip() == "feat(app): greet on startup"

    def test_missing_token_usage_recorded_as_zero(self, setup_cli, usage_path, client):
        client.tokens_used = None
        assert cli_main.main([]) == 0
        usage = read_usage(usage_path)
        assert (usage["requests"], usage["tokens"]) == (1, 0)

    def test_generation_error_not_recorded(self, setup_cli, usage_path, client, capsys):
        client.error = LLMError("Gemini API error: boom")

        assert cli_main.main([]) == 1
        assert "boom" in capsys.readouterr().err
        assert read_usage(usage_path)["requests"] == 0

    def test_hint_and_type_reach_prompt(self, setup_cli, client):
        assert cli_main.main(["--hint", "login bug", "-t", "fix"]) == 0
        assert "login bug" in client.prompts[0]
        assert "Use type 'fix'" in client.prompts[0]

    def test_yes_commits_message(self, setup_cli, analyzer, capsys):
        assert cli_main.main(["--yes"]) == 0
        assert analyzer.committed == ["✨ feat(app): greet on startup"]
        assert "Commit successful." in capsys.readouterr().out

    def test_commit_failure(self, setup_cli, analyzer, capsys):
        def failing_commit(message):
            raise GitError("Git command failed: git commit")
        analyzer.commit = failing_commit

        assert cli_main.main(["--yes"]) == 1
        assert "git commit" in capsys.readouterr().err

    def test_empty_diff(self, setup_cli, analyzer, client, capsys):
        analyzer.diff = ""
        assert cli_main.main([]) == 1
        assert client.prompts == []
        assert "No changes to commit" in capsys.readouterr().err

    def test_git_unavailable(self, setup_cli, monkeypatch, client, capsys):
        def broken_analyzer():
            raise GitError("Not inside a git repository")
        monkeypatch.setattr(cli_main, "GitAnalyzer", broken_analyzer)

        assert cli_main.main([]) == 1
        assert client.prompts == []
        assert "Not inside a git repository" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Interactive review
# ---------------------------------------------------------------------------

class TestReviewMessage:

    def _answers(self, monkeypatch, *answers):
        replies = iter(answers)
        monkeypatch.setattr("builtins.input", lambda prompt: next(replies))

    def test_accept_default(self, monkeypatch):
        self._answers(monkeypatch, "", "")
        assert cli_main._review_message("fix: a") == "fix: a"

    def test_decline(self, monkeypatch):
        self._answers(monkeypatch, "n", "n")
        assert cli_main._review_message("fix: a") is None

    def test_edit_then_accept(self, monkeypatch):
        self._answers(monkeypatch, "y", "y")
        monkeypatch.setattr(cli_main, "edit_message", lambda message: "fix: edited")
        assert cli_main._review_message("fix: a") == "fix: edited"

    def test_failed_edit_keeps_message(self, monkeypatch):
        self._answers(monkeypatch, "y", "y")
        monkeypatch.setattr(cli_main, "edit_message", lambda message: None)
        assert cli_main._review_message("fix: a") == "fix: a"


# ---------------------------------------------------------------------------
# --usage
# ---------------------------------------------------------------------------

class TestUsageCommand:

    def test_shows_counts(self, setup_cli, usage_path, client, capsys):
        usage_path.write_text(json.dumps({"requests": 12, "tokens": 3400, "timestamp": now_ms() - 1000}))

        assert cli_main.main(["--usage"]) == 0
        out = strip_ansi(capsys.readouterr().out)
        assert "12/1,500" in out
        assert "3,400" in out
        assert "Requests last 60s" in out
        assert client.prompts == []

    def test_without_minute_limits(self, setup_cli, capsys):
        assert cli_main.main(["--usage", "--no-minute-limits"]) == 0
        assert "not enforced" in strip_ansi(capsys.readouterr().out)

    def test_out_of_range_timestamp(self, setup_cli, usage_path, capsys):
        usage_path.write_text(json.dumps({"requests": 1, "tokens": 0, "timestamp": 10**20}))
        assert cli_main.main(["--usage"]) == 1
        assert "plausible timestamp" in capsys.readouterr().err

    def test_corrupt_file(self, setup_cli, usage_path, capsys):
        usage_path.write_text("[]")
        assert cli_main.main(["--usage"]) == 1
        assert "JSON object" in capsys.readouterr().err
