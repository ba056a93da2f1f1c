"""Terminal Output - Styled status lines, usage meters and a spinner.

Errors and warnings go to stderr; everything else is regular stdout output.
Styling follows NO_COLOR / FORCE_COLOR and falls back to ASCII glyphs when the
console encoding cannot show the Unicode ones.
"""

import itertools
import os
import sys
import threading

# SGR parameters by style name
_SGR = {
    'bold': '1',
    'dim': '2',
    'red': '31',
    'green': '32',
    'yellow': '33',
    'cyan': '36',
}


def _color_wanted() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    isatty = getattr(sys.stdout, 'isatty', None)
    return bool(isatty and isatty()) and os.environ.get('TERM') != 'dumb'


def _encodable(sample: str) -> bool:
    try:
        sample.encode(sys.stdout.encoding or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = _color_wanted()
UNICODE_ENABLED = _encodable('✓✗⚠─█░⠋')


def _glyph(fancy: str, plain: str) -> str:
    return fancy if UNICODE_ENABLED else plain


CHECK = _glyph('✓', '[OK]')
CROSS = _glyph('✗', '[X]')
WARN = _glyph('⚠', '[!]')
RULE = _glyph('─', '-')


def style(text: str, *names: str) -> str:
    """Wrap `text` in the named SGR styles, e.g. style(s, 'bold', 'red')."""
    if not COLORS_ENABLED or not names:
        return text
    params = ';'.join(_SGR[name] for name in names)
    return f"\033[{params}m{text}\033[0m"


def info(text: str) -> str:
    return style(text, 'cyan')


def dim(text: str) -> str:
    return style(text, 'dim')


def bold(text: str) -> str:
    return style(text, 'bold')


def print_success(message: str) -> None:
    print(f"{style(CHECK, 'green')} {message}")


def print_error(message: str) -> None:
    print(style(f"{CROSS} {message}", 'red'), file=sys.stderr)


def print_warning(message: str) -> None:
    print(style(f"{WARN} {message}", 'yellow'), file=sys.stderr)


def usage_meter(used: int, limit: int, width: int = 20) -> str:
    """Render `used/limit` with a bar, yellow past 80% and red when full."""
    ratio = min(used / limit, 1.0) if limit > 0 else 1.0
    filled = round(ratio * width)
    bar = _glyph('█', '#') * filled + _glyph('░', '.') * (width - filled)
    if ratio >= 1.0:
        tone = 'red'
    elif ratio >= 0.8:
        tone = 'yellow'
    else:
        tone = 'green'
    return f"{style(bar, tone)} {used:,}/{limit:,}"


class Spinner:
    """Spinner shown on a terminal while `label` is in progress. Use as context manager.

    Does nothing when stdout is not a tty, so piped output stays clean.
    """
    FRAMES = _glyph('⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏', '-\\|/')
    INTERVAL = 0.08

    def __init__(self, label: str = ""):
        self.label = label
        self._done = threading.Event()
        self._thread = None

    def _run(self):
        for frame in itertools.cycle(self.FRAMES):
            print(f'\r\033[K{frame} {self.label}', end='', flush=True)
            if self._done.wait(self.INTERVAL):
                break
        print('\r\033[K', end='', flush=True)

    def __enter__(self):
        if sys.stdout.isatty():
            self._done.clear()
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._done.set()
        if self._thread:
            self._thread.join()
            self._thread = None


__all__ = [
    "COLORS_ENABLED", "UNICODE_ENABLED", "CHECK", "CROSS", "WARN", "RULE",
    "style", "info", "dim", "bold",
    "print_success", "print_error", "print_warning",
    "usage_meter", "Spinner",
]
