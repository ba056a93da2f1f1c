"""CLI Argument Parsing"""

import argparse
import argcomplete

from commit_sensei import COMMIT_TYPE_NAMES, __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cm',
        description='Generate AI-powered commit messages from staged changes',
        epilog='Example: git add . && cm'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Generation options
    parser.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "fixing the login bug"')
    parser.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    parser.add_argument('--no-emoji', action='store_true', help='Do not prefix the commit type emoji')

    # LLM options
    parser.add_argument('-p', '--provider', type=str, choices=['auto', 'gemini', 'claude'], help='LLM provider')
    parser.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')

    # Quota options
    parser.add_argument('--usage', action='store_true', help='Show request and token usage against the limits')
    parser.add_argument('--no-minute-limits', action='store_true', help='Only enforce the daily request limit')

    # Commit options
    parser.add_argument('-y', '--yes', action='store_true', help='Commit without asking for confirmation')
    parser.add_argument('--dry-run', action='store_true', help='Print the message only, do not commit')

    # Setup/config
    parser.add_argument('--setup', action='store_true', help='Configure provider and API key')
    parser.add_argument('--display-config', action='store_true', help='Show current configuration')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
