"""
pkgguard - Safe package deletion

Refuses to remove installed packages that other installed packages
still need:
- Reverse-dependency index built per request
- All-or-nothing batch deletion
- RPM database backend, JSON manifests for dry runs
"""

__version__ = "0.1.0"
__author__ = "pkgguard contributors"
