"""
Safe deletion of installed packages.

A batch is deleted only if every requested package is installed and no
package outside the batch still requires one of them. Any failure aborts
the whole batch before anything is removed.

Flow:
    installed check -> reverse dependency index (excluding the batch)
    -> dependency check -> confirmation -> removal
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .depindex import build_reverse_dependency_index

logger = logging.getLogger(__name__)


class DeletionError(Exception):
    """A deletion request was refused. Nothing has been removed."""


class NotInstalled(DeletionError):
    """Requested package is not installed."""

    def __init__(self, package: str):
        self.package = package
        super().__init__(f"Package {package} is not installed")


class RequiredBySingle(DeletionError):
    """Exactly one remaining package requires the requested one."""

    def __init__(self, package: str, dependent: str):
        self.package = package
        self.dependent = dependent
        super().__init__(f"Package {package} is required by {dependent}, not deleting")


class RequiredByMany(DeletionError):
    """Several remaining packages require the requested one."""

    def __init__(self, package: str, dependents: Sequence[str]):
        self.package = package
        self.dependents = tuple(dependents)
        super().__init__(
            f"Package {package} is required by: {', '.join(self.dependents)}, not deleting"
        )


class DeletionOutcome(Enum):
    """Result of a deletion request that was not refused."""
    DONE = "done"
    ABORTED = "aborted"  # declined at confirmation


def _unique(names: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(names))


def check_deletion(registry, requested: Sequence[str]) -> Dict[str, List[str]]:
    """Validate a deletion request without touching the registry.

    Args:
        registry: Installed package registry
        requested: Package names to delete

    Returns:
        The reverse dependency index built for the request

    Raises:
        NotInstalled: first requested package that is not installed
        RequiredBySingle, RequiredByMany: first requested package still
            needed by a package outside the request
    """
    requested = _unique(requested)

    for name in requested:
        if not registry.is_installed(name):
            raise NotInstalled(name)

    index = build_reverse_dependency_index(registry, excluded=set(requested))

    for name in requested:
        dependents = index.get(name)
        if not dependents:
            continue
        if len(dependents) == 1:
            raise RequiredBySingle(name, dependents[0])
        raise RequiredByMany(name, dependents)

    return index


def confirmation_prompt(names: Sequence[str]) -> str:
    """Build the confirmation question for the packages about to go."""
    if len(names) == 1:
        return f"Delete package {names[0]}? "
    return f"Delete these {len(names)} packages ({', '.join(names)})? "


def safe_delete_packages(
    registry,
    requested: Sequence[str],
    force: bool = False,
    confirm: Optional[Callable[[str], bool]] = None
) -> DeletionOutcome:
    """Delete installed packages unless something else still needs them.

    Args:
        registry: Installed package registry
        requested: Package names to delete, in display order
        force: Skip the confirmation step
        confirm: Called with the prompt text, returns True to proceed.
            Required unless force is set.

    Returns:
        DeletionOutcome.DONE once every package is removed,
        DeletionOutcome.ABORTED if the confirmation was declined

    Raises:
        DeletionError: request refused, registry unchanged
        ValueError: no confirm callback and force not set
    """
    names = _unique(requested)
    if not names:
        return DeletionOutcome.DONE

    if not force and confirm is None:
        raise ValueError("confirm callback required unless force is set")

    try:
        check_deletion(registry, names)
    except DeletionError as e:
        logger.warning(f"Deletion refused: {e}")
        raise

    if not force and not confirm(confirmation_prompt(names)):
        logger.info(f"Deletion of {', '.join(names)} declined")
        return DeletionOutcome.ABORTED

    for name in names:
        count = registry.remove_installed(name)
        logger.info(f"Removed {name} ({count} instance{'s' if count != 1 else ''})")

    return DeletionOutcome.DONE


def safe_delete(registry, name: str,
                confirm: Optional[Callable[[str], bool]] = None) -> DeletionOutcome:
    """Delete a single package, always asking for confirmation."""
    return safe_delete_packages(registry, [name], force=False, confirm=confirm)
