"""CLI command modules."""

from .erase import (
    cmd_erase,
)
from .query import (
    cmd_list,
    cmd_rdepends,
)

__all__ = [
    'cmd_erase',
    'cmd_list',
    'cmd_rdepends',
]
