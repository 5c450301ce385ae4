"""
Unit tests for data models.
"""

from rclone_wrapper.models import (
    Action, Outcome, MountSpec, MountStatus, ReconcileResult, ReconcileSummary
)


class TestMountSpec:

    def test_command_args_splits_flag_and_value(self):
        spec = MountSpec('/mnt/a', ['--vfs-cache-mode full', '--allow-other', '--buffer-size', '32M'])

        assert spec.command_args() == [
            '--vfs-cache-mode', 'full', '--allow-other', '--buffer-size', '32M'
        ]

    def test_to_dict(self):
        assert MountSpec('/mnt/a').to_dict() == {'mount_point': '/mnt/a', 'mount_params': []}


class TestMountStatus:

    def test_str(self):
        assert str(MountStatus.unmounted()) == 'Unmounted'
        assert str(MountStatus.mounted_at('/mnt/a')) == 'MountedAt(/mnt/a)'


class TestReconcileSummary:
    """Test aggregate exit status"""

    def result(self, remote, outcome):
        return ReconcileResult(remote=remote, action=Action.MOUNT, outcome=outcome)

    def test_empty_summary_is_ok(self):
        assert ReconcileSummary().exit_code == 0

    def test_already_in_state_is_ok(self):
        summary = ReconcileSummary()
        summary.add(self.result('a', Outcome.SUCCESS))
        summary.add(self.result('b', Outcome.ALREADY_IN_STATE))

        assert summary.ok
        assert summary.failed == []

    def test_conflict_and_failure_are_not_ok(self):
        summary = ReconcileSummary()
        summary.add(self.result('a', Outcome.CONFLICT))
        summary.add(self.result('b', Outcome.SUCCESS))
        summary.add(self.result('c', Outcome.FAILURE))

        assert summary.exit_code == 1
        assert [r.remote for r in summary.failed] == ['a', 'c']

    def test_to_dict(self):
        summary = ReconcileSummary()
        summary.add(ReconcileResult(remote='a', action=Action.SKIP,
                                    outcome=Outcome.ALREADY_IN_STATE, mount_point='/mnt/a'))

        assert summary.to_dict() == {
            'ok': True,
            'results': [{
                'remote': 'a', 'action': 'skip', 'outcome': 'already_in_state',
                'detail': '', 'mount_point': '/mnt/a', 'error': None,
            }],
        }
