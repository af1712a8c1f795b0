"""
Central configuration for pkgguard.

Sources, later ones overriding earlier ones:
    1. /etc/pkgguard.conf                 - system configuration
    2. <project root>/.pkgguard.local     - DEV tree (running from ./bin/pkgguard)
    3. PKGGUARD_ROOT environment variable - install root only
    4. Command line options

Config file format (one setting per line):
    root=/mnt/target
    registry=rpm              # or a path to a JSON manifest
    audit_log=/var/log/pkgguard/audit.log
    assume_yes=no
    # Comments start with #
"""

import os
import sys
from pathlib import Path
from typing import Optional

SYSTEM_CONFIG_FILE = Path("/etc/pkgguard.conf")
LOCAL_CONFIG_FILE = ".pkgguard.local"

DEFAULT_ROOT = "/"
DEFAULT_REGISTRY = "rpm"
DEFAULT_AUDIT_LOG = Path("/var/log/pkgguard/audit.log")

ROOT_ENV_VAR = "PKGGUARD_ROOT"

_TRUE_VALUES = ('1', 'yes', 'true', 'on')

# Cache for merged config (avoid repeated filesystem reads)
_cached_config: Optional[dict] = None


def _get_project_root() -> Optional[Path]:
    """Find project root when running from ./bin/pkgguard.

    Returns:
        Project root path, or None if not in a dev environment
    """
    if sys.argv and sys.argv[0]:
        script_path = Path(sys.argv[0]).resolve()
        if script_path.parent.name == 'bin':
            return script_path.parent.parent
    return None


def read_config_file(config_path: Path) -> Optional[dict]:
    """Read a key=value config file.

    Returns:
        Dict with config values, or None if the file doesn't exist
    """
    if not config_path.exists():
        return None

    config = {}
    try:
        with open(config_path) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, value = line.split('=', 1)
                    value = value.split('#', 1)[0]
                    config[key.strip()] = value.strip()
    except OSError:
        return None

    return config


def load_config(system_file: Path = None, project_root: Path = None) -> dict:
    """Merge the system and DEV config files (cached).

    Args:
        system_file: Override the system config path (for testing)
        project_root: Override the detected project root (for testing)
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    config = {}
    system_config = read_config_file(system_file or SYSTEM_CONFIG_FILE)
    if system_config:
        config.update(system_config)

    project_root = project_root or _get_project_root()
    if project_root:
        local_config = read_config_file(project_root / LOCAL_CONFIG_FILE)
        if local_config:
            config.update(local_config)

    _cached_config = config
    return _cached_config


def reset_config_cache():
    """Forget the merged config so the next call re-reads the files."""
    global _cached_config
    _cached_config = None


def get_install_root(cli_root: str = None) -> str:
    """Get the install root to operate on.

    Args:
        cli_root: Value of --root, wins over everything else
    """
    if cli_root:
        return cli_root
    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        return env_root
    return load_config().get('root') or DEFAULT_ROOT


def get_registry_spec(cli_value: str = None) -> str:
    """Get the registry backend: 'rpm' or a path to a JSON manifest."""
    if cli_value:
        return cli_value
    return load_config().get('registry') or DEFAULT_REGISTRY


def get_audit_log_path() -> Path:
    """Get the audit log file path."""
    value = load_config().get('audit_log')
    return Path(value).expanduser() if value else DEFAULT_AUDIT_LOG


def get_assume_yes() -> bool:
    """True if the config asks to skip confirmation prompts."""
    return load_config().get('assume_yes', '').lower() in _TRUE_VALUES
