"""Structured audit logging for pkgguard deletions.

Logs every deletion request (started, completed, refused) in JSON format,
one event per line. The log is append-only and never blocks an operation:
if it cannot be written, the failure is only logged at debug level.
"""

import getpass
import json
import logging
import os
import time
from pathlib import Path
from typing import List

from .config import get_audit_log_path

logger = logging.getLogger(__name__)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return str(os.getuid())


class AuditLogger:
    """Append-only JSON audit logger for deletion requests."""

    def __init__(self, log_path: Path = None):
        self._log_path = Path(log_path) if log_path else get_audit_log_path()
        self._fd = None

    def _ensure_open(self) -> bool:
        """Open log file, creating directory if needed. Returns True on success."""
        if self._fd is not None:
            return True
        try:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            self._fd = open(self._log_path, 'a')
            return True
        except OSError as e:
            logger.debug(f"Cannot open audit log {self._log_path}: {e}")
            return False

    def _write(self, event: dict):
        """Write a single event to the audit log."""
        if not self._ensure_open():
            return
        event = {
            'timestamp': time.time(),
            'user': _current_user(),
            'pid': os.getpid(),
            **event,
        }
        try:
            self._fd.write(json.dumps(event, ensure_ascii=False) + '\n')
            self._fd.flush()
        except OSError as e:
            logger.debug(f"Cannot write to audit log: {e}")

    def close(self):
        """Close the audit log file."""
        if self._fd:
            try:
                self._fd.close()
            except OSError:
                pass
            self._fd = None

    # --- Event methods ---

    def log_erase_start(self, packages: List[str], command: str = ""):
        self._write({
            'event': 'erase_start',
            'packages': packages,
            'command': command,
        })

    def log_erase_complete(self, packages: List[str], success: bool, error: str = ""):
        event = {
            'event': 'erase_complete',
            'packages': packages,
            'success': success,
        }
        if error:
            event['error'] = error
        self._write(event)

    def log_erase_rejected(self, packages: List[str], reason: str):
        self._write({
            'event': 'erase_rejected',
            'packages': packages,
            'reason': reason,
        })
