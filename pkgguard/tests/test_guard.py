"""Tests for safe package deletion

These tests verify:
1. Installation check before anything else
2. Dependency violations (single and multiple dependents)
3. Batches containing a package together with its dependents
4. Confirmation handling (declined, forced, prompt text)
5. Nothing removed when a request is refused
"""

import pytest
from unittest.mock import Mock

from pkgguard.core.registry import InstalledPackage, MemoryRegistry
from pkgguard.core.guard import (
    DeletionError,
    NotInstalled,
    RequiredBySingle,
    RequiredByMany,
    DeletionOutcome,
    check_deletion,
    confirmation_prompt,
    safe_delete_packages,
    safe_delete,
)


def pkg(name, *requires):
    return InstalledPackage(name=name, requires=tuple(requires))


class RecordingRegistry(MemoryRegistry):
    """MemoryRegistry remembering every remove_installed() call."""

    def __init__(self, packages=()):
        super().__init__(packages)
        self.removed = []

    def remove_installed(self, name):
        self.removed.append(name)
        return super().remove_installed(name)


@pytest.fixture
def registry():
    """A requires nothing, B and C require A."""
    return RecordingRegistry([pkg('A'), pkg('B', 'A'), pkg('C', 'A')])


def names(registry):
    return [p.name for p in registry.list_installed()]


def always_yes(prompt):
    return True


class TestInstalledCheck:
    """Requested packages must be installed."""

    def test_not_installed(self):
        reg = RecordingRegistry([pkg('X')])
        with pytest.raises(NotInstalled) as exc:
            safe_delete_packages(reg, ['Y'], force=True)
        assert exc.value.package == 'Y'
        assert 'Y' in str(exc.value)
        assert reg.removed == []
        assert names(reg) == ['X']

    def test_first_missing_reported(self, registry):
        with pytest.raises(NotInstalled) as exc:
            safe_delete_packages(registry, ['B', 'Q', 'R'], force=True)
        assert exc.value.package == 'Q'

    def test_checked_before_dependencies(self, registry):
        """A missing package wins over a dependency violation."""
        with pytest.raises(NotInstalled):
            safe_delete_packages(registry, ['A', 'Z'], force=True)
        assert registry.removed == []

    def test_not_installed_is_deletion_error(self):
        assert issubclass(NotInstalled, DeletionError)


class TestDependencyCheck:
    """Packages still required by others are refused."""

    def test_required_by_many(self, registry):
        with pytest.raises(RequiredByMany) as exc:
            safe_delete_packages(registry, ['A'], force=True)
        assert exc.value.package == 'A'
        assert exc.value.dependents == ('B', 'C')
        assert 'required by: B, C' in str(exc.value)
        assert registry.removed == []
        assert names(registry) == ['A', 'B', 'C']

    def test_required_by_single(self, registry):
        with pytest.raises(RequiredBySingle) as exc:
            safe_delete_packages(registry, ['A', 'B'], force=True)
        assert exc.value.package == 'A'
        assert exc.value.dependent == 'C'
        assert 'A' in str(exc.value) and 'C' in str(exc.value)
        assert registry.removed == []

    def test_first_violation_in_request_order(self):
        reg = RecordingRegistry([
            pkg('lib1'), pkg('lib2'),
            pkg('app1', 'lib1'), pkg('app2', 'lib2'),
        ])
        with pytest.raises(RequiredBySingle) as exc:
            safe_delete_packages(reg, ['lib2', 'lib1'], force=True)
        assert exc.value.package == 'lib2'
        assert exc.value.dependent == 'app2'

    def test_violation_later_in_batch_blocks_everything(self):
        reg = RecordingRegistry([pkg('free'), pkg('lib'), pkg('app', 'lib')])
        with pytest.raises(RequiredBySingle):
            safe_delete_packages(reg, ['free', 'lib'], force=True)
        assert reg.removed == []
        assert names(reg) == ['free', 'lib', 'app']

    def test_indirect_dependents_ignored(self):
        """Only direct requirements are checked."""
        reg = RecordingRegistry([pkg('base'), pkg('mid', 'base'), pkg('top', 'mid')])
        with pytest.raises(RequiredBySingle) as exc:
            safe_delete_packages(reg, ['base'], force=True)
        assert exc.value.dependent == 'mid'


class TestBatchDeletion:
    """Whole batches are removed when nothing outside depends on them."""

    def test_delete_all(self, registry):
        outcome = safe_delete_packages(registry, ['A', 'B', 'C'], force=True)
        assert outcome is DeletionOutcome.DONE
        assert names(registry) == []
        assert registry.removed == ['A', 'B', 'C']

    def test_delete_leaf(self, registry):
        outcome = safe_delete_packages(registry, ['B'], force=True)
        assert outcome is DeletionOutcome.DONE
        assert names(registry) == ['A', 'C']

    def test_package_with_its_only_dependent(self):
        reg = RecordingRegistry([pkg('B'), pkg('A', 'B'), pkg('other')])
        safe_delete_packages(reg, ['A', 'B'], force=True)
        assert names(reg) == ['other']

    def test_removes_exactly_requested(self):
        reg = RecordingRegistry([
            pkg('lib'), pkg('app', 'lib'), pkg('tool'), pkg('doc', 'tool'),
        ])
        safe_delete_packages(reg, ['doc', 'tool'], force=True)
        assert names(reg) == ['lib', 'app']
        assert reg.removed == ['doc', 'tool']

    def test_all_instances_removed(self):
        reg = RecordingRegistry([
            InstalledPackage('kernel', version='6.1'),
            InstalledPackage('kernel', version='6.6'),
            pkg('bash'),
        ])
        safe_delete_packages(reg, ['kernel'], force=True)
        assert names(reg) == ['bash']
        assert reg.removed == ['kernel']

    def test_duplicate_request_removed_once(self, registry):
        safe_delete_packages(registry, ['B', 'B'], force=True)
        assert registry.removed == ['B']

    def test_empty_request(self, registry):
        confirm = Mock(return_value=True)
        outcome = safe_delete_packages(registry, [], confirm=confirm)
        assert outcome is DeletionOutcome.DONE
        confirm.assert_not_called()
        assert registry.removed == []

    def test_removal_error_propagates(self, registry):
        registry.remove_installed = Mock(side_effect=OSError("disk on fire"))
        with pytest.raises(OSError):
            safe_delete_packages(registry, ['B'], force=True)


class TestConfirmation:
    """Confirmation step."""

    def test_declined(self, registry):
        confirm = Mock(return_value=False)
        outcome = safe_delete_packages(registry, ['B', 'C'], confirm=confirm)
        assert outcome is DeletionOutcome.ABORTED
        assert registry.removed == []
        confirm.assert_called_once()

    def test_accepted(self, registry):
        outcome = safe_delete_packages(registry, ['B'], confirm=always_yes)
        assert outcome is DeletionOutcome.DONE
        assert names(registry) == ['A', 'C']

    def test_force_skips_confirmation(self, registry):
        confirm = Mock(return_value=False)
        outcome = safe_delete_packages(registry, ['B'], force=True, confirm=confirm)
        assert outcome is DeletionOutcome.DONE
        confirm.assert_not_called()

    def test_not_asked_when_refused(self, registry):
        confirm = Mock(return_value=True)
        with pytest.raises(RequiredByMany):
            safe_delete_packages(registry, ['A'], confirm=confirm)
        confirm.assert_not_called()

    def test_confirm_required_without_force(self, registry):
        with pytest.raises(ValueError):
            safe_delete_packages(registry, ['B'])
        assert registry.removed == []

    def test_prompt_names_single_package(self, registry):
        confirm = Mock(return_value=False)
        safe_delete_packages(registry, ['B'], confirm=confirm)
        assert confirm.call_args[0][0] == "Delete package B? "

    def test_prompt_lists_batch(self, registry):
        confirm = Mock(return_value=False)
        safe_delete_packages(registry, ['C', 'B', 'A'], confirm=confirm)
        assert confirm.call_args[0][0] == "Delete these 3 packages (C, B, A)? "

    def test_confirmation_prompt(self):
        assert confirmation_prompt(['x']) == "Delete package x? "
        assert confirmation_prompt(['x', 'y']) == "Delete these 2 packages (x, y)? "


class TestSafeDelete:
    """Single package entry point."""

    def test_asks_confirmation(self, registry):
        confirm = Mock(return_value=True)
        outcome = safe_delete(registry, 'C', confirm=confirm)
        assert outcome is DeletionOutcome.DONE
        confirm.assert_called_once_with("Delete package C? ")
        assert names(registry) == ['A', 'B']

    def test_declined(self, registry):
        outcome = safe_delete(registry, 'C', confirm=lambda prompt: False)
        assert outcome is DeletionOutcome.ABORTED
        assert names(registry) == ['A', 'B', 'C']

    def test_refused(self, registry):
        with pytest.raises(RequiredByMany):
            safe_delete(registry, 'A', confirm=always_yes)


class TestCheckDeletion:
    """Check phase on its own."""

    def test_same_verdict_twice(self, registry):
        for _ in range(2):
            with pytest.raises(RequiredByMany) as exc:
                check_deletion(registry, ['A'])
            assert exc.value.dependents == ('B', 'C')
        assert registry.removed == []

    def test_returns_index_without_batch(self, registry):
        index = check_deletion(registry, ['B', 'C'])
        assert index == {}
        assert names(registry) == ['A', 'B', 'C']

    def test_index_excludes_batch(self):
        reg = MemoryRegistry([pkg('A'), pkg('B', 'A'), pkg('C', 'B')])
        with pytest.raises(RequiredBySingle):
            check_deletion(reg, ['B'])
        assert check_deletion(reg, ['B', 'C']) == {}
