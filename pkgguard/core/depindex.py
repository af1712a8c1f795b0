"""Reverse dependency index for installed packages."""

import logging
from typing import Collection, Dict, List

logger = logging.getLogger(__name__)


def build_reverse_dependency_index(registry, excluded: Collection[str] = ()) -> Dict[str, List[str]]:
    """Map each installed requirement to the installed packages needing it.

    Packages listed in `excluded` are skipped as dependents: they are
    about to be deleted, so their requirements must not protect anything.

    Args:
        registry: Registry providing list_installed()
        excluded: Package names whose requirements are ignored

    Returns:
        Dict of requirement name -> dependents, in registry order
    """
    excluded = set(excluded)
    installed = registry.list_installed()
    installed_names = {pkg.name for pkg in installed}

    index: Dict[str, List[str]] = {}
    for pkg in installed:
        if pkg.name in excluded:
            continue
        for req in pkg.requires:
            if req not in installed_names:
                continue
            dependents = index.setdefault(req, [])
            # Same name twice: duplicate declaration or second instance
            if pkg.name not in dependents:
                dependents.append(pkg.name)

    logger.debug(f"Reverse dependency index: {len(index)} requirements, "
                 f"{len(excluded)} excluded packages")
    return index


def required_by(registry, name: str, excluded: Collection[str] = ()) -> List[str]:
    """Return installed packages (outside `excluded`) that require `name`."""
    return build_reverse_dependency_index(registry, excluded).get(name, [])
