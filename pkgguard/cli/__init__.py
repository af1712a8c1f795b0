"""Command line interface for pkgguard."""
