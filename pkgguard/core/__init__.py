"""Core modules for pkgguard"""

from .registry import InstalledPackage, MemoryRegistry
from .depindex import build_reverse_dependency_index, required_by
from .guard import (
    DeletionError,
    NotInstalled,
    RequiredBySingle,
    RequiredByMany,
    DeletionOutcome,
    check_deletion,
    safe_delete_packages,
    safe_delete,
)

__all__ = [
    'InstalledPackage',
    'MemoryRegistry',
    'build_reverse_dependency_index',
    'required_by',
    'DeletionError',
    'NotInstalled',
    'RequiredBySingle',
    'RequiredByMany',
    'DeletionOutcome',
    'check_deletion',
    'safe_delete_packages',
    'safe_delete',
]
