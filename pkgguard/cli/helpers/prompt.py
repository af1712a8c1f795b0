"""Interactive prompts: yes/no confirmation and installed package selection.

EOF on stdin counts as a refusal; Ctrl+C propagates so commands can
exit with 130.
"""

import difflib
from typing import Callable, Optional


def ask_yes_no(prompt: str, input_func: Callable[[str], str] = input) -> bool:
    """Ask a [y/N] question."""
    try:
        response = input_func(f"{prompt}[y/N] ")
    except EOFError:
        print()
        return False
    return response.strip().lower() in ('y', 'yes')


def select_installed_package(registry, input_func: Callable[[str], str] = input,
                             max_attempts: int = 3) -> Optional[str]:
    """Ask for a package name, accepting only currently installed ones.

    Args:
        registry: Installed package registry
        input_func: Reads one answer (input() by default)
        max_attempts: Give up after this many unknown names

    Returns:
        An installed package name, or None if the user gave up
    """
    installed = list(dict.fromkeys(pkg.name for pkg in registry.list_installed()))
    if not installed:
        print("No packages installed.")
        return None

    for _ in range(max_attempts):
        try:
            answer = input_func("Delete package: ").strip()
        except EOFError:
            print()
            return None
        if not answer:
            return None
        if answer in installed:
            return answer

        close = difflib.get_close_matches(answer, installed, n=3)
        if close:
            print(f"{answer} is not installed (did you mean: {', '.join(close)}?)")
        else:
            print(f"{answer} is not installed")

    return None
