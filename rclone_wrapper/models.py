"""Data models for mount specs, mount status and reconcile results"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any, List


# Baseline rclone mount options, used when a remote has no configured params.
BASELINE_MOUNT_PARAMS = [
    '--vfs-cache-mode', 'full',
    '--vfs-cache-max-age', '1h',
    '--dir-cache-time', '30s',
    '--buffer-size', '32M',
]


class Action(str, Enum):
    MOUNT = 'mount'
    UNMOUNT = 'unmount'
    SKIP = 'skip'


class Outcome(str, Enum):
    SUCCESS = 'success'
    ALREADY_IN_STATE = 'already_in_state'
    CONFLICT = 'conflict'
    FAILURE = 'failure'


@dataclass
class MountSpec:
    """Desired mount configuration for one remote"""
    mount_point: str
    mount_params: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mount_point': self.mount_point,
            'mount_params': list(self.mount_params),
        }

    def command_args(self) -> List[str]:
        """
        Flatten mount_params into command line arguments.

        Entries are either single tokens ('--allow-other', 'full') or a flag
        and its value on one line ('--vfs-cache-mode full'); the latter is
        split on whitespace.
        """
        args = []
        for param in self.mount_params:
            args.extend(str(param).split())
        return args


@dataclass(frozen=True)
class MountEntry:
    """One row of the live mount table"""
    source: str
    target: str
    fstype: str = ''


@dataclass(frozen=True)
class MountStatus:
    """Unmounted when path is None, otherwise MountedAt(path)"""
    path: Optional[str] = None

    @property
    def mounted(self) -> bool:
        return self.path is not None

    @classmethod
    def unmounted(cls) -> 'MountStatus':
        return cls(None)

    @classmethod
    def mounted_at(cls, path: str) -> 'MountStatus':
        return cls(path)

    def __str__(self):
        return f"MountedAt({self.path})" if self.mounted else 'Unmounted'


@dataclass
class ReconcileResult:
    """Outcome of reconciling a single remote"""
    remote: str
    action: Action
    outcome: Outcome
    detail: str = ''
    mount_point: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.ALREADY_IN_STATE)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['action'] = self.action.value
        data['outcome'] = self.outcome.value
        return data


@dataclass
class ReconcileSummary:
    """Aggregate of per-remote results for one invocation"""
    results: List[ReconcileResult] = field(default_factory=list)

    def add(self, result: ReconcileResult) -> ReconcileResult:
        self.results.append(result)
        return result

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    @property
    def failed(self) -> List[ReconcileResult]:
        return [result for result in self.results if not result.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ok': self.ok,
            'results': [result.to_dict() for result in self.results],
        }
