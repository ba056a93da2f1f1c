"""CLI Commands"""

import getpass
import os
import sys
from datetime import datetime

from commit_sensei.config import Config, load_config, save_config, get_config_path
from commit_sensei.output import bold, dim, info, usage_meter, print_success, print_error
from commit_sensei.usage import UsageTracker, UsageError, WINDOW_MS, minute_usage


def _mask(key: str | None) -> str:
    if not key:
        return "not set"
    return f"{key[:4]}…{key[-4:]}" if len(key) > 12 else "****"


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .genai-config.json found)")

    env_provider = os.environ.get('CM_PROVIDER')
    env_model = os.environ.get('CM_MODEL')
    if env_provider or env_model:
        print(f"  {dim('Environment overrides:')}")
        if env_provider:
            print(f"    CM_PROVIDER={env_provider}")
        if env_model:
            print(f"    CM_MODEL={env_model}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    provider:              {info(config.provider)}")
    print(f"    model:                 {info(config.model or 'default')}")
    print(f"    api_key:               {info(_mask(config.api_key))}")
    print(f"    emoji:                 {info(str(config.emoji).lower())}")
    print(f"    enforce_minute_limits: {info(str(config.enforce_minute_limits).lower())}")
    print(f"    usage_file:            {info(config.usage_file)}")
    print(f"    max_subject_length:    {info(str(config.max_subject_length))}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .genai-config.json (in current directory)")
    print(f"    Global: ~/.genai-config.json")
    print(f"\n  {dim('Run')} cm --setup {dim('to configure')}\n")

    return 0


def display_usage(tracker: UsageTracker) -> int:
    """Show usage in the current window without touching the usage file."""
    now = tracker.clock()
    try:
        record = tracker.snapshot(now)
    except UsageError as e:
        print_error(str(e))
        return 1

    limits = tracker.limits
    minute_requests, minute_tokens = minute_usage(record, now)
    resets_at = datetime.fromtimestamp((record.window_start + WINDOW_MS) / 1000)

    print(f"\n{bold('API Usage')}  {dim(str(tracker.path))}\n")
    print(f"  Requests today:      {usage_meter(record.request_count, limits.rpd)}")
    print(f"  Tokens today:        {record.token_count:,}")
    print(f"  Window resets:       {resets_at:%Y-%m-%d %H:%M}")
    print()
    if limits.enforce_per_minute:
        print(f"  Requests last 60s:   {usage_meter(minute_requests, limits.rpm)}")
        print(f"  Tokens last 60s:     {usage_meter(minute_tokens, limits.tpm)}")
    else:
        print(dim("  Per-minute limits are not enforced"))
    print()
    return 0


def run_setup() -> int:
    """Quick setup wizard."""
    print(f"\n{bold('Commit Sensei Setup')}\n")

    print("Choose provider:\n")
    print("  1. Gemini (Google Generative AI)")
    print("  2. Claude API\n")

    while True:
        choice = input("Select [1/2]: ").strip()
        if choice == '1':
            provider = 'gemini'
            break
        elif choice == '2':
            provider = 'claude'
            break

    while True:
        api_key = getpass.getpass("API key (input hidden): ").strip()
        if api_key:
            break
        print("API key cannot be empty")

    model = input("Model (Enter for default): ").strip() or None

    print("\nPrefix commit type emoji? [Y/n]: ", end='')
    emoji = input().strip().lower() != 'n'

    print("Save globally to ~/.genai-config.json instead of this directory? [y/N]: ", end='')
    global_config = input().strip().lower() == 'y'

    config = Config(provider=provider, model=model, api_key=api_key, emoji=emoji)
    path = save_config(config, global_config=global_config)

    print_success(f"Saved to {path}")
    if not global_config:
        print(dim("Add .genai-config.json and .genai-usage.json to .gitignore to keep your key out of the repo."))
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete cm)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_name = '.zshrc' if 'zsh' in shell else '.bashrc'
        rc_file = os.path.expanduser(f'~/{rc_name}')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim(f'source ~/{rc_name}')}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell cm | Out-String | Invoke-Expression\n")
        print("To make it permanent, add the same line to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f'  {line}\n')
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish cm | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags.')}")
    return 0
