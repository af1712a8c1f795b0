"""CLI helper functions shared by the pkgguard commands."""

from .package import (
    extract_pkg_name,
    resolve_requested_names,
)
from .registry import (
    create_registry,
)
from .prompt import (
    ask_yes_no,
    select_installed_package,
)

__all__ = [
    # Package helpers
    'extract_pkg_name',
    'resolve_requested_names',
    # Registry helpers
    'create_registry',
    # Prompt helpers
    'ask_yes_no',
    'select_installed_package',
]
