"""CLI Utility Functions"""

import os
import re
import shlex
import subprocess
import sys
import tempfile

from commit_sensei import COMMIT_EMOJIS, COMMIT_TYPE_NAMES
from commit_sensei.output import dim

TYPES_PATTERN = '|'.join(COMMIT_TYPE_NAMES)
TYPE_PREFIX_RE = re.compile(rf'^({TYPES_PATTERN})(\([^)]*\))?!?:')


def clean_commit_message(text: str) -> str:
    """Reduce an LLM response to a single commit title line.

    Skips any preamble before the first line that starts with a commit type
    and strips wrapping backticks or quotes. Falls back to the first
    non-empty line when no typed line is found.
    """
    lines = [line.strip() for line in text.strip().split('\n')]
    candidates = [line.strip('`"\' ') for line in lines if line.strip('`"\' ')]
    if not candidates:
        return ""
    for line in candidates:
        if TYPE_PREFIX_RE.match(line):
            return line
    return candidates[0]


def add_emoji(title: str) -> str:
    """Prefix the emoji for the title's commit type. Unknown types are left alone."""
    match = TYPE_PREFIX_RE.match(title)
    if not match:
        return title
    return f"{COMMIT_EMOJIS[match.group(1)]} {title}"


def confirm(question: str, default: bool = False) -> bool:
    """Ask a yes/no question. KeyboardInterrupt and EOFError propagate."""
    suffix = "[Y/n]" if default else "[y/N]"
    answer = input(f"{question} {dim(suffix)} ").strip().lower()
    if not answer:
        return default
    return answer in ('y', 'yes')


def edit_message(message: str) -> str | None:
    """Open message in user's editor. Returns edited text or None on failure."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    tmp = tempfile.NamedTemporaryFile(mode='w', suffix='.gitcommit', delete=False, encoding='utf-8')
    try:
        tmp.write(message)
        tmp.close()
        # EDITOR may carry flags, e.g. "code --wait"
        subprocess.run([*shlex.split(editor), tmp.name], check=True)
        with open(tmp.name, 'r', encoding='utf-8') as f:
            edited = f.read().strip()
        return edited if edited else None
    except (subprocess.CalledProcessError, OSError, ValueError):
        return None
    finally:
        try:
            os.unlink(tmp.name)
        except OSError as e:
            print(f"Warning: Could not delete temp file {tmp.name}: {e}", file=sys.stderr)
