"""Color output support for pkgguard CLI.

Red marks errors and packages being removed, green a completed erase.
Colors are off with --nocolor, when NO_COLOR is set (https://no-color.org/)
or when stdout is not a terminal.
"""

import os
import sys

_RESET = '\033[0m'
_CODES = {
    'bold': '\033[1m',
    'dim': '\033[2m',
    'red': '\033[91m',
    'green': '\033[92m',
}

_colors_enabled = True


def init(nocolor: bool = False):
    global _colors_enabled
    _colors_enabled = not (nocolor or os.environ.get('NO_COLOR')) and sys.stdout.isatty()


def _wrap(text: str, color: str) -> str:
    if not _colors_enabled:
        return text
    return f"{_CODES[color]}{text}{_RESET}"


def error(text: str) -> str:
    return _wrap(text, 'red')


def success(text: str) -> str:
    return _wrap(text, 'green')


def dim(text: str) -> str:
    return _wrap(text, 'dim')


def bold(text: str) -> str:
    return _wrap(text, 'bold')


def pkg_remove(name: str) -> str:
    """Package name on its way out (red)."""
    return _wrap(name, 'red')
