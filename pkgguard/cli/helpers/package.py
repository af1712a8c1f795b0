"""Package name helpers for command line arguments."""

import re
from typing import List


def extract_pkg_name(package: str) -> str:
    """Extract package name from a NEVRA string.

    Args:
        package: Either a simple name like 'firefox' or NEVRA like 'firefox-120.0-1.mga10.x86_64'

    Returns:
        The package name
    """
    # Virtual packages (pkgconfig(...), etc.) carry versions inside the name
    if '(' in package:
        return package
    # name-version-release.arch where version starts with digit
    match = re.match(r'^(.+?)-\d+[.:]', package)
    if match:
        return match.group(1)
    return package


def resolve_requested_names(registry, args: List[str]) -> List[str]:
    """Turn command line arguments into package names.

    An argument naming an installed package is kept as is. A NEVRA is
    reduced to its name only when that exact version is installed;
    anything else is passed through unchanged so the deletion check
    reports it as not installed.
    """
    installed = registry.list_installed()
    names = []
    for arg in args:
        if registry.is_installed(arg):
            names.append(arg)
            continue
        name = extract_pkg_name(arg)
        if name != arg and any(pkg.name == name and pkg.nevra == arg for pkg in installed):
            names.append(name)
        else:
            names.append(arg)
    return names
