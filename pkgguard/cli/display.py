"""Package list output for pkgguard commands.

--json prints one JSON array, --flat one name per line, and the default
lays names out in columns sized to the terminal.
"""

import json
import shutil
from enum import Enum
from typing import List, Optional, Callable


class DisplayMode(Enum):
    """Output display mode."""
    COLUMNS = "columns"
    FLAT = "flat"
    JSON = "json"


# Set once by main() from the command line
_display_mode = DisplayMode.COLUMNS
_show_all = False


def init(mode: str = "columns", show_all: bool = False):
    """Select the output mode; show_all disables truncation of column lists."""
    global _display_mode, _show_all
    _display_mode = DisplayMode(mode or "columns")
    _show_all = show_all


def get_mode() -> DisplayMode:
    return _display_mode


def get_terminal_width() -> int:
    return shutil.get_terminal_size(fallback=(80, 24)).columns


def format_package_list(
    packages: List[str],
    indent: int = 2,
    color_func: Optional[Callable[[str], str]] = None,
    mode: Optional[DisplayMode] = None,
    show_all: Optional[bool] = None,
    max_lines: int = 10,
    terminal_width: Optional[int] = None
) -> List[str]:
    """Format package names for the current display mode.

    Columns mode fills rows left to right, each column as wide as the
    longest name plus two spaces, and stops after max_lines rows unless
    show_all is set. indent and color_func only apply to columns mode.
    """
    if not packages:
        return []

    mode = mode if mode is not None else _display_mode
    if mode == DisplayMode.JSON:
        return [json.dumps(packages, ensure_ascii=False)]
    if mode == DisplayMode.FLAT:
        return list(packages)

    if show_all is None:
        show_all = _show_all
    width = max(len(p) for p in packages) + 2
    per_row = max(1, ((terminal_width or get_terminal_width()) - indent) // width)
    rows = [packages[i:i + per_row] for i in range(0, len(packages), per_row)]
    if not show_all:
        rows = rows[:max_lines]

    prefix = " " * indent
    lines = []
    for row in rows:
        # Pad on the plain name so color codes do not skew the columns
        cells = [(color_func(p) if color_func else p) + " " * (width - len(p)) for p in row]
        lines.append(prefix + "".join(cells).rstrip())

    hidden = len(packages) - sum(len(row) for row in rows)
    if hidden:
        lines.append(f"{prefix}... and {hidden} more")
    return lines


def print_package_list(packages: List[str], indent: int = 2,
                       color_func: Optional[Callable[[str], str]] = None):
    for line in format_package_list(packages, indent=indent, color_func=color_func):
        print(line)
