"""
Main CLI entry point for pkgguard

Commands and short aliases:
- pkgguard erase / pkgguard e      (refuses to break dependencies)
- pkgguard rdepends / pkgguard rd  (what requires a package)
- pkgguard list / pkgguard l       (installed packages)
"""

import argparse
import logging
import sys

from .. import __version__
from .commands import cmd_erase, cmd_list, cmd_rdepends


def check_dependencies(registry_spec: str) -> list:
    """Check for Python modules the selected registry needs.

    Returns:
        List of (package, purpose) tuples (empty if all OK)
    """
    missing = []

    if registry_spec == 'rpm':
        try:
            import rpm  # noqa: F401
        except ImportError:
            missing.append(('python3-rpm', 'RPM database access'))

    return missing


def print_missing_dependencies(missing: list):
    """Print error message for missing dependencies."""
    print("ERROR: Missing required Python modules:\n", file=sys.stderr)
    for pkg, purpose in missing:
        print(f"  - {pkg} ({purpose})", file=sys.stderr)
    print("\nOr use a JSON manifest: pkgguard --registry installed.json ...", file=sys.stderr)


class AliasedSubParsersAction(argparse._SubParsersAction):
    """Custom action to support command aliases in argparse."""

    def add_parser(self, name, **kwargs):
        aliases = kwargs.pop('aliases', [])
        parser = super().add_parser(name, **kwargs)

        for alias in aliases:
            self._name_parser_map[alias] = parser

        return parser


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all commands and aliases."""

    parser = argparse.ArgumentParser(
        prog='pkgguard',
        description='Delete installed packages without breaking their dependents',
        epilog='Use "pkgguard <command> --help" for command-specific help.'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'pkgguard {__version__}'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only print errors and requested data'
    )

    parser.add_argument(
        '--nocolor',
        action='store_true',
        help='Disable colored output'
    )

    parser.add_argument(
        '--root',
        metavar='DIR',
        help='Operate on the installation rooted at DIR'
    )

    parser.add_argument(
        '--registry',
        metavar='SOURCE',
        help="Installed package source: 'rpm' or a JSON manifest path"
    )

    # Parent parser for display options (inherited by subparsers)
    display_parent = argparse.ArgumentParser(add_help=False)
    display_parent.add_argument(
        '--json',
        action='store_true',
        help='JSON output for scripting'
    )
    display_parent.add_argument(
        '--flat',
        action='store_true',
        help='Flat output (one item per line, parsable)'
    )
    display_parent.add_argument(
        '--show-all',
        action='store_true',
        help='Show all items without truncation'
    )

    parser.register('action', 'parsers', AliasedSubParsersAction)

    subparsers = parser.add_subparsers(
        dest='command',
        title='commands',
        metavar='<command>'
    )

    # =========================================================================
    # erase / e
    # =========================================================================
    erase_parser = subparsers.add_parser(
        'erase', aliases=['e'],
        help='Erase packages nothing else requires',
        parents=[display_parent]
    )
    erase_parser.add_argument(
        'packages', nargs='*',
        help='Packages to erase (asked interactively when omitted)'
    )
    erase_parser.add_argument(
        '--auto', '-y',
        action='store_true',
        help='Do not ask for confirmation'
    )
    erase_parser.add_argument(
        '--force', '-f',
        action='store_true',
        help='Skip the confirmation step (dependency checks still apply)'
    )
    erase_parser.add_argument(
        '--test',
        action='store_true',
        help='Check only, do not erase anything'
    )

    # =========================================================================
    # rdepends / rd
    # =========================================================================
    rdepends_parser = subparsers.add_parser(
        'rdepends', aliases=['rd'],
        help='Show installed packages requiring a package',
        parents=[display_parent]
    )
    rdepends_parser.add_argument('package', help='Package name')

    # =========================================================================
    # list / l
    # =========================================================================
    subparsers.add_parser(
        'list', aliases=['l'],
        help='List installed packages',
        parents=[display_parent]
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbose flag
    if getattr(args, 'verbose', False):
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s',
            stream=sys.stderr
        )

    from . import colors
    colors.init(nocolor=getattr(args, 'nocolor', False))

    from . import display
    if getattr(args, 'json', False):
        display.init(mode='json', show_all=True)
    elif getattr(args, 'flat', False):
        display.init(mode='flat', show_all=True)
    else:
        display.init(mode='columns', show_all=getattr(args, 'show_all', False))

    if not args.command:
        parser.print_help()
        return 1

    from ..core.config import get_registry_spec
    missing = check_dependencies(get_registry_spec(args.registry))
    if missing:
        print_missing_dependencies(missing)
        return 1

    from .helpers.registry import create_registry
    try:
        registry = create_registry(args)
    except (OSError, ValueError) as e:
        print(colors.error(f"Error: cannot load installed packages: {e}"))
        return 1

    if args.command in ('erase', 'e'):
        return cmd_erase(args, registry)

    elif args.command in ('rdepends', 'rd'):
        return cmd_rdepends(args, registry)

    elif args.command in ('list', 'l'):
        return cmd_list(args, registry)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
