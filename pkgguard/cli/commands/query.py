"""Installed package queries: list and reverse dependencies."""

import json


def cmd_list(args, registry) -> int:
    """List installed packages."""
    from .. import display

    quiet = getattr(args, 'quiet', False)
    packages = registry.list_installed()
    if not packages:
        if display.get_mode() == display.DisplayMode.JSON:
            print(json.dumps([]))
        elif not quiet:
            print("No packages installed.")
        return 0

    display.print_package_list(sorted(pkg.nevra for pkg in packages), indent=0)
    return 0


def cmd_rdepends(args, registry) -> int:
    """Show installed packages that require a package."""
    from ...core.depindex import required_by
    from ..helpers.package import resolve_requested_names
    from .. import colors, display

    quiet = getattr(args, 'quiet', False)
    name = resolve_requested_names(registry, [args.package])[0]
    if not registry.is_installed(name):
        print(colors.error(f"Package {name} is not installed"))
        return 1

    dependents = required_by(registry, name)
    json_mode = display.get_mode() == display.DisplayMode.JSON

    if not dependents:
        if json_mode:
            print(json.dumps([]))
        elif not quiet:
            print(colors.success(f"No installed package requires {name}"))
        return 0

    # Quiet keeps the list itself, unindented like --flat
    if not json_mode and not quiet:
        print(colors.bold(f"{name} is required by {len(dependents)} package(s):"))
    display.print_package_list(dependents, indent=0 if json_mode or quiet else 2)
    return 0
