"""Package removal command."""

import sys
from typing import List


def cmd_erase(args, registry) -> int:
    """Handle erase (remove) command."""
    from ...core.guard import (
        DeletionError, DeletionOutcome, check_deletion,
        safe_delete, safe_delete_packages,
    )
    from ...core.audit import AuditLogger
    from ...core.config import get_assume_yes
    from ..helpers.package import resolve_requested_names
    from ..helpers.prompt import ask_yes_no, select_installed_package
    from .. import colors, display

    quiet = getattr(args, 'quiet', False)
    try:
        if args.packages:
            names = resolve_requested_names(registry, args.packages)
            single = False
        else:
            if not sys.stdin.isatty():
                print(colors.error("Error: no packages specified"))
                return 1
            selected = select_installed_package(registry)
            if selected is None:
                if not quiet:
                    print("Aborted.")
                return 0
            names = [selected]
            single = True
    except KeyboardInterrupt:
        print("\nAborted.")
        return 130

    names = list(dict.fromkeys(names))

    if args.test:
        try:
            check_deletion(registry, names)
        except DeletionError as e:
            print(colors.error(f"Error: {e}"))
            return 1
        if quiet:
            return 0
        print(colors.bold(f"The following {len(names)} package(s) would be erased:"))
        display.print_package_list(names, indent=4, color_func=colors.pkg_remove)
        print("\n(dry run - no changes made)")
        return 0

    force = args.force or args.auto or get_assume_yes()

    def confirm(prompt: str) -> bool:
        return ask_yes_no(f"\n{prompt}")

    audit = AuditLogger()
    try:
        audit.log_erase_start(names, command=' '.join(['pkgguard', 'erase'] + list(args.packages)))

        try:
            if single and not force:
                outcome = safe_delete(registry, names[0], confirm=confirm)
            else:
                outcome = safe_delete_packages(registry, names, force=force, confirm=confirm)
        except DeletionError as e:
            audit.log_erase_rejected(names, str(e))
            print(colors.error(f"Error: {e}"))
            if not quiet:
                _print_hint(e)
            return 1
        except KeyboardInterrupt:
            audit.log_erase_complete(names, success=False, error="interrupted")
            print("\nAborted.")
            return 130
        except Exception as e:
            audit.log_erase_complete(names, success=False, error=str(e))
            raise

        if outcome is DeletionOutcome.ABORTED:
            audit.log_erase_complete(names, success=False, error="declined")
            if not quiet:
                print("Aborted.")
            return 0

        audit.log_erase_complete(names, success=True)
        if not quiet:
            print(colors.success(f"  {_count_label(names)} erased"))
        return 0
    finally:
        audit.close()


def _count_label(names: List[str]) -> str:
    if len(names) == 1:
        return f"Package {names[0]}"
    return f"{len(names)} packages"


def _print_hint(error) -> None:
    """Explain how to get past a refused deletion."""
    from ...core.guard import NotInstalled, RequiredBySingle, RequiredByMany
    from .. import colors

    if isinstance(error, NotInstalled):
        print(colors.dim("  Use 'pkgguard list' to see installed packages"))
    elif isinstance(error, RequiredBySingle):
        print(colors.dim(f"  Erase {error.dependent} first, or add it to the same command"))
    elif isinstance(error, RequiredByMany):
        print(colors.dim("  Erase the dependent packages first, or add them to the same command"))
