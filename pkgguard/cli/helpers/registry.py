"""Registry helper functions for CLI commands."""

from pathlib import Path


def create_registry(args):
    """Create the installed package registry selected by args and config.

    Args:
        args: Parsed arguments (may contain root, registry)

    Returns:
        RpmRegistry for 'rpm', otherwise a MemoryRegistry loaded from the
        given JSON manifest (changes are written back to it)
    """
    from ...core.config import get_install_root, get_registry_spec

    spec = get_registry_spec(getattr(args, 'registry', None))
    if spec == 'rpm':
        from ...core.rpmdb import RpmRegistry
        return RpmRegistry(root=get_install_root(getattr(args, 'root', None)))

    from ...core.registry import MemoryRegistry
    return MemoryRegistry.from_json(Path(spec).expanduser())
