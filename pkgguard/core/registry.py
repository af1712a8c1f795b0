"""
Installed package registry for pkgguard.

A registry is any object providing:
    - list_installed() -> Sequence[InstalledPackage]
    - is_installed(name) -> bool
    - remove_installed(name) -> int  (removes every instance, returns count)

MemoryRegistry keeps records in process; it backs the tests and the
JSON manifests accepted by the CLI. RpmRegistry (rpmdb.py) reads the
system RPM database.

JSON manifest format:
    {"packages": [
        {"name": "foo", "version": "1.0", "release": "1", "arch": "noarch",
         "requires": ["bar", "baz"]},
        ...
    ]}
A bare list of package objects is accepted as well.
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstalledPackage:
    """One installed instance of a package."""
    name: str
    requires: Tuple[str, ...] = ()
    version: str = ""
    release: str = ""
    arch: str = ""
    epoch: int = 0

    @property
    def nevra(self) -> str:
        """Return name-[epoch:]version-release.arch, or just the name."""
        if not self.version:
            return self.name
        evr = f"{self.epoch}:{self.version}" if self.epoch else self.version
        if self.release:
            evr = f"{evr}-{self.release}"
        if self.arch:
            return f"{self.name}-{evr}.{self.arch}"
        return f"{self.name}-{evr}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InstalledPackage':
        """Build a record from a manifest entry."""
        if not data.get('name'):
            raise ValueError(f"Package entry without a name: {data!r}")
        return cls(
            name=str(data['name']),
            requires=tuple(str(r) for r in data.get('requires') or ()),
            version=str(data.get('version') or ''),
            release=str(data.get('release') or ''),
            arch=str(data.get('arch') or ''),
            epoch=int(data.get('epoch') or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'epoch': self.epoch,
            'version': self.version,
            'release': self.release,
            'arch': self.arch,
            'requires': list(self.requires),
        }


class MemoryRegistry:
    """In-memory registry of installed packages.

    Several instances may share a name (e.g. two kernel versions);
    remove_installed() drops all of them.
    """

    def __init__(self, packages: Iterable[InstalledPackage] = (),
                 path: Optional[Path] = None):
        self._packages: List[InstalledPackage] = list(packages)
        self.path = path

    @classmethod
    def from_json(cls, path: Path) -> 'MemoryRegistry':
        """Load a registry from a JSON manifest file.

        Raises:
            OSError: if the file cannot be read
            ValueError: if the manifest is malformed
        """
        path = Path(path)
        with open(path) as f:
            data = json.load(f)

        if isinstance(data, dict):
            entries = data.get('packages', [])
        else:
            entries = data
        if not isinstance(entries, list):
            raise ValueError(f"{path}: 'packages' must be a list")

        packages = [InstalledPackage.from_dict(entry) for entry in entries]
        logger.debug(f"Loaded {len(packages)} installed packages from {path}")
        return cls(packages, path=path)

    def save(self, path: Optional[Path] = None):
        """Write the registry back to its JSON manifest."""
        self._write_manifest(self._packages, Path(path or self.path))

    @staticmethod
    def _write_manifest(packages: List[InstalledPackage], path: Path):
        """Replace the manifest at `path` with `packages`.

        The payload goes to a temp file next to the manifest which is then
        moved into place, so a failed write leaves the old manifest intact.
        """
        payload = {'packages': [pkg.to_dict() for pkg in packages]}
        with tempfile.NamedTemporaryFile(mode='w', dir=path.parent, prefix=f'.{path.name}.',
                                         suffix='.tmp', delete=False) as tmp:
            temp_path = Path(tmp.name)
            try:
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
                tmp.write('\n')
            except Exception:
                tmp.close()
                temp_path.unlink()
                raise
        os.replace(temp_path, path)

    def list_installed(self) -> List[InstalledPackage]:
        return list(self._packages)

    def is_installed(self, name: str) -> bool:
        return any(pkg.name == name for pkg in self._packages)

    def remove_installed(self, name: str) -> int:
        """Remove every installed instance named `name`.

        With a manifest attached, the file is rewritten first; the in-memory
        set only changes once the write succeeded.

        Returns:
            Number of instances removed
        """
        kept = [pkg for pkg in self._packages if pkg.name != name]
        removed = len(self._packages) - len(kept)
        if not removed:
            return 0
        if self.path is not None:
            self._write_manifest(kept, Path(self.path))
        self._packages = kept
        return removed

    def names(self) -> List[str]:
        """Installed package names, first-seen order, without duplicates."""
        return list(dict.fromkeys(pkg.name for pkg in self._packages))

    def __len__(self) -> int:
        return len(self._packages)
