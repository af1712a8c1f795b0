"""Installed package registry backed by the RPM database."""

import logging
from typing import Dict, List, Optional, Set

from .registry import InstalledPackage

logger = logging.getLogger(__name__)

# Pseudo packages present in the rpmdb that are never real dependencies
IGNORED_PACKAGES = {'gpg-pubkey'}


def _strip_capability(cap: str) -> str:
    """Drop the '(...)' qualifier of a capability, e.g. 'libc.so.6(GLIBC_2.2)'."""
    return cap.split('(')[0] if '(' in cap else cap


class RpmRegistry:
    """Registry reading installed packages from the RPM database.

    Requirements in the rpmdb are capabilities; each one is mapped to the
    installed package providing it, so that requires hold package names
    like every other registry. A capability with more than one installed
    provider is not recorded: removing one provider leaves it satisfied.
    """

    def __init__(self, root: str = "/"):
        self.root = root or "/"
        self._cache: Optional[List[InstalledPackage]] = None

    def _transaction_set(self):
        import rpm
        ts = rpm.TransactionSet(self.root)
        ts.setVSFlags(rpm._RPMVSF_NOSIGNATURES)
        return ts

    def _load(self) -> List[InstalledPackage]:
        import rpm

        ts = self._transaction_set()
        headers = []
        provides_map: Dict[str, Set[str]] = {}  # capability -> provider names

        for hdr in ts.dbMatch():
            name = hdr[rpm.RPMTAG_NAME]
            if name in IGNORED_PACKAGES:
                continue
            headers.append(hdr)
            for prov in (hdr[rpm.RPMTAG_PROVIDENAME] or []):
                provides_map.setdefault(prov, set()).add(name)
                provides_map.setdefault(_strip_capability(prov), set()).add(name)

        packages = []
        for hdr in headers:
            name = hdr[rpm.RPMTAG_NAME]
            requires = []
            for req in (hdr[rpm.RPMTAG_REQUIRENAME] or []):
                if req.startswith('rpmlib(') or req.startswith('/'):
                    continue
                providers = provides_map.get(req) or provides_map.get(_strip_capability(req), set())
                # Self-provides do not make a package its own dependent
                if not providers or name in providers:
                    continue
                # Alternatives (e.g. several MTAs) pin none of their providers
                if len(providers) > 1:
                    logger.debug(f"{name}: {req} provided by {', '.join(sorted(providers))}, not recorded")
                    continue
                provider = next(iter(providers))
                if provider not in requires:
                    requires.append(provider)

            packages.append(InstalledPackage(
                name=name,
                requires=tuple(requires),
                version=hdr[rpm.RPMTAG_VERSION] or '',
                release=hdr[rpm.RPMTAG_RELEASE] or '',
                arch=hdr[rpm.RPMTAG_ARCH] or '',
                epoch=hdr[rpm.RPMTAG_EPOCH] or 0,
            ))

        logger.debug(f"Read {len(packages)} installed packages from rpmdb in {self.root}")
        return packages

    def list_installed(self) -> List[InstalledPackage]:
        if self._cache is None:
            self._cache = self._load()
        return list(self._cache)

    def is_installed(self, name: str) -> bool:
        return any(pkg.name == name for pkg in self.list_installed())

    def remove_installed(self, name: str) -> int:
        """Erase every installed instance of `name` in one rpm transaction.

        Dependency checking is left to the caller; the transaction is run
        without rpm's own check so all instances go together.

        Raises:
            RuntimeError: if rpm reports problems running the transaction
        """
        import rpm

        ts = self._transaction_set()
        count = 0
        for hdr in ts.dbMatch('name', name):
            ts.addErase(hdr)
            count += 1

        if not count:
            return 0

        ts.order()

        def callback(reason, amount, total, key, client_data):
            if reason == rpm.RPMCALLBACK_UNINST_START:
                logger.debug(f"Erasing {name}")

        problems = ts.run(callback, '')
        self._cache = None
        if problems:
            raise RuntimeError(f"rpm failed to erase {name}: "
                               + "; ".join(str(p) for p in problems))
        return count
