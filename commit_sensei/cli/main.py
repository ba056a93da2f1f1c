"""CLI Main Entry Point"""

import os
import sys
from pathlib import Path

from commit_sensei.config import Config, load_config
from commit_sensei.git import GitAnalyzer, GitError
from commit_sensei.llm import LLMClient, LLMError, PROVIDERS, get_client
from commit_sensei.output import RULE, bold, dim, print_error, print_success, Spinner
from commit_sensei.prompts import PromptBuilder, PromptConfig
from commit_sensei.usage import QuotaExceeded, QuotaLimits, UsageError, UsageTracker

from commit_sensei.cli.args import parse_args
from commit_sensei.cli.commands import display_config, display_usage, run_setup, run_install_completion
from commit_sensei.cli.utils import add_emoji, clean_commit_message, confirm, edit_message

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 2


def _handle_subcommands(args):
    """Handle subcommands that exit early.

    Returns:
        tuple: (exit_code, should_exit) - exit_code if should_exit is True
    """
    if args.install_completion:
        return run_install_completion(), True
    if args.display_config:
        return display_config(), True
    if args.setup:
        return run_setup(), True
    return 0, False


def _get_provider_and_model(args, config):
    """Resolve provider and model from args, env, or config.

    Precedence: CLI args > environment variables > config file
    """
    provider = args.provider or os.environ.get('CM_PROVIDER') or config.provider
    model = args.model or os.environ.get('CM_MODEL') or config.model
    return provider, model


def build_tracker(config: Config, no_minute_limits: bool = False) -> UsageTracker:
    limits = QuotaLimits(enforce_per_minute=config.enforce_minute_limits and not no_minute_limits)
    return UsageTracker(path=Path(config.usage_file), limits=limits)


def _admit(tracker: UsageTracker) -> bool:
    """Check quota before anything reaches the generation service."""
    try:
        tracker.admit()
    except QuotaExceeded as e:
        print_error(str(e))
        return False
    except UsageError as e:
        print_error(f"Usage data unavailable, refusing to call the API: {e}")
        print(dim(f"  Fix or remove {tracker.path} to reset usage tracking."), file=sys.stderr)
        return False
    return True


def _get_staged_diff():
    """Return (analyzer, diff). diff is None after reporting why there is none."""
    try:
        analyzer = GitAnalyzer()
        diff = analyzer.get_staged_diff()
    except GitError as e:
        print_error(str(e))
        return None, None

    if not diff.strip():
        print_error("No changes to commit. Try 'git add .' first.")
        return analyzer, None

    return analyzer, diff


def _generate_message(client: LLMClient, prompt: str, tracker: UsageTracker):
    """Call the LLM and count the request. Failed calls are not counted."""
    with Spinner(f"Generating commit message with {client.name}..."):
        response = client.generate(prompt)
    tracker.record(response.tokens_used)
    return response


def _format_message(content: str, use_emoji: bool) -> str:
    title = clean_commit_message(content)
    return add_emoji(title) if use_emoji else title


def _display_message(message: str) -> None:
    width = max(len(message), 40)
    print(f"\n{dim('Generated commit message:')}")
    print(dim(RULE * width))
    print(bold(message))
    print(dim(RULE * width))


def _review_message(message: str) -> str | None:
    """Let the user edit and confirm the message. Returns None when declined."""
    if confirm("Do you want to edit the commit message?"):
        edited = edit_message(message)
        if edited:
            message = edited
            _display_message(message)
    if not confirm("Do you want to continue with this commit message?", default=True):
        return None
    return message


def _generate_commit_flow(args, config: Config, tracker: UsageTracker) -> int:
    """Main commit message generation flow.

    Returns:
        int: Exit code
    """
    is_pipe = not sys.stdout.isatty()
    is_interactive = sys.stdin.isatty() and not is_pipe

    if not _admit(tracker):
        return EXIT_ERROR

    analyzer, diff = _get_staged_diff()
    if diff is None:
        return EXIT_ERROR

    provider, model = _get_provider_and_model(args, config)
    api_keys = {name: config.resolve_api_key(name) for name in PROVIDERS}

    prompt_config = PromptConfig(
        hint=args.hint,
        forced_type=args.type,
        max_subject_length=config.max_subject_length,
    )
    prompt = PromptBuilder().build(diff, prompt_config)

    try:
        client = get_client(provider=provider, model=model, api_keys=api_keys)
        response = _generate_message(client, prompt, tracker)
    except LLMError as e:
        print_error(str(e))
        return EXIT_ERROR

    message = _format_message(response.content, use_emoji=config.emoji and not args.no_emoji)

    if args.dry_run or (is_pipe and not args.yes):
        if is_pipe:
            print(message)
        else:
            _display_message(message)
        return EXIT_OK

    if not is_pipe:
        _display_message(message)

    if not args.yes:
        if not is_interactive:
            return EXIT_OK
        try:
            message = _review_message(message)
        except (KeyboardInterrupt, EOFError):
            print(dim("\nCancelled."))
            return EXIT_CANCELLED
        if message is None:
            print("Commit aborted.")
            return EXIT_OK

    try:
        analyzer.commit(message)
    except GitError as e:
        print_error(str(e))
        return EXIT_ERROR

    print_success("Commit successful.")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)

    exit_code, should_exit = _handle_subcommands(args)
    if should_exit:
        return exit_code

    config = load_config()
    tracker = build_tracker(config, no_minute_limits=args.no_minute_limits)

    if args.usage:
        return display_usage(tracker)

    return _generate_commit_flow(args, config, tracker)


if __name__ == "__main__":
    sys.exit(main())
