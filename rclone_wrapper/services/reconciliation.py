"""Reconciliation service - converges remotes to their desired mount state"""

import os
from typing import Any, Dict, List, Optional

from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.drivers import RcloneDriver
from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.exceptions import (
    ConfigCorruptException, ConflictException, LockFailedException, LockTimeoutException,
    MountException,
    UnknownRemoteException, UnmountFailedException
)
from rclone_wrapper.lock_manager import MountLockManager
from rclone_wrapper.models import (
    Action, Outcome, MountSpec, ReconcileResult, ReconcileSummary, BASELINE_MOUNT_PARAMS
)
from rclone_wrapper.services.catalog import RemoteCatalog
from rclone_wrapper.services.inspector import MountStatusInspector
from rclone_wrapper.services.registry import MountRegistry
from rclone_wrapper.utils.logger import get_logger
from rclone_wrapper.utils.validators import normalize_path, validate_mount_path

LOG = get_logger(__name__)

# Error codes carried by failed results
UNKNOWN_REMOTE = 'UnknownRemote'
ALREADY_MOUNTED = 'AlreadyMounted'
INVALID_MOUNT_PATH = 'InvalidMountPath'
MOUNT_FAILED = 'MountFailed'
UNMOUNT_FAILED = 'UnmountFailed'
LOCK_TIMEOUT = 'LockTimeout'
LOCK_FAILED = 'LockFailed'


class Reconciler:
    """
    Decides and performs the single mount or unmount action needed per remote.

    Single-remote operations stop at the first blocking error. Sweeps
    ("all") attempt every remote and aggregate the outcomes.
    """

    def __init__(self, config: WrapperConfig,
                 driver: Optional[BaseMountDriver] = None,
                 registry: Optional[MountRegistry] = None,
                 catalog: Optional[RemoteCatalog] = None,
                 inspector: Optional[MountStatusInspector] = None,
                 lock_manager: Optional[MountLockManager] = None):
        self.config = config
        self.driver = driver or RcloneDriver.from_config(config)
        self.registry = registry or MountRegistry.from_config(config)
        self.catalog = catalog or RemoteCatalog(self.driver)
        self.inspector = inspector or MountStatusInspector(self.driver)
        self.lock_manager = lock_manager or MountLockManager.from_config(config)

    # Mount

    def mount(self, remote: str) -> ReconcileSummary:
        """Mount one remote using its registry (or default) spec"""
        summary = ReconcileSummary()
        if not self._validate(remote, Action.MOUNT, summary):
            return summary
        summary.add(self._locked(remote, Action.MOUNT, lambda: self._mount_one(remote)))
        return summary

    def mount_at(self, remote: str, mount_point: str) -> ReconcileSummary:
        """
        Mount one remote at an explicit path with the baseline options.

        Stricter than mount(): a remote that is already mounted is a failure
        and must be unmounted first.
        """
        summary = ReconcileSummary()
        if not self._validate(remote, Action.MOUNT, summary):
            return summary

        mount_point = os.path.expanduser(mount_point)
        if not validate_mount_path(mount_point):
            summary.add(ReconcileResult(
                remote=remote, action=Action.MOUNT, outcome=Outcome.FAILURE,
                detail=f"Invalid mount path '{mount_point}': must be absolute",
                mount_point=mount_point, error=INVALID_MOUNT_PATH
            ))
            return summary

        spec = MountSpec(mount_point=mount_point, mount_params=list(BASELINE_MOUNT_PARAMS))
        summary.add(self._locked(
            remote, Action.MOUNT, lambda: self._mount_one(remote, spec=spec, strict=True)
        ))
        return summary

    def mount_all(self) -> ReconcileSummary:
        """Mount every catalog remote; failures never stop the sweep"""
        summary = ReconcileSummary()
        remotes = self.catalog.list()
        LOG.info(f"Mounting all remotes: {', '.join(remotes)}")
        for remote in remotes:
            summary.add(self._locked(remote, Action.MOUNT, lambda r=remote: self._mount_one(r)))
        return summary

    def _mount_one(self, remote: str, spec: Optional[MountSpec] = None,
                   strict: bool = False) -> ReconcileResult:
        status = self.inspector.current_mount(remote)
        if status.mounted:
            if strict:
                return ReconcileResult(
                    remote=remote, action=Action.MOUNT, outcome=Outcome.FAILURE,
                    detail=f"Remote '{remote}' is already mounted at {status.path}; unmount it first",
                    mount_point=status.path, error=ALREADY_MOUNTED
                )
            LOG.info(f"Skipping {remote}: already mounted at {status.path}")
            return ReconcileResult(
                remote=remote, action=Action.SKIP, outcome=Outcome.ALREADY_IN_STATE,
                detail=f"already mounted at {status.path}", mount_point=status.path
            )

        spec = spec or self.registry.get(remote)
        target = spec.mount_point
        if not validate_mount_path(target):
            return ReconcileResult(
                remote=remote, action=Action.MOUNT, outcome=Outcome.FAILURE,
                detail=f"Invalid mount path '{target}': must be absolute",
                mount_point=target, error=INVALID_MOUNT_PATH
            )

        # An occupied target may not be stat-able (dead FUSE endpoint, foreign mount).
        if self.inspector.path_in_use(target):
            raise ConflictException(f"mount point '{target}' is already in use", mount_point=target)

        try:
            if not os.path.isdir(target):
                LOG.info(f"Creating mount directory: {target}")
            os.makedirs(target, mode=0o755, exist_ok=True)
        except OSError as e:
            raise MountException(f"Cannot create mount point {target}: {e}", mount_point=target)

        self.driver.mount(remote, target, spec.command_args())

        return ReconcileResult(
            remote=remote, action=Action.MOUNT, outcome=Outcome.SUCCESS,
            detail=f"mounted at {target}", mount_point=target
        )

    # Unmount

    def unmount(self, remote: str) -> ReconcileSummary:
        """Unmount one catalog remote"""
        summary = ReconcileSummary()
        if not self._validate(remote, Action.UNMOUNT, summary):
            return summary
        summary.add(self._locked(remote, Action.UNMOUNT, lambda: self._unmount_one(remote)))
        return summary

    def unmount_all(self) -> ReconcileSummary:
        """Unmount every currently mounted remote, catalog or not"""
        summary = ReconcileSummary()
        mounted = self.inspector.mounted_remotes()
        LOG.info(f"Unmounting {len(mounted)} mounted remote(s)")
        for remote, _ in mounted:
            summary.add(self._locked(remote, Action.UNMOUNT, lambda r=remote: self._unmount_one(r)))
        return summary

    def _unmount_one(self, remote: str) -> ReconcileResult:
        status = self.inspector.current_mount(remote)
        if not status.mounted:
            LOG.info(f"Skipping {remote}: not mounted")
            return ReconcileResult(
                remote=remote, action=Action.SKIP, outcome=Outcome.ALREADY_IN_STATE,
                detail='not mounted'
            )

        path = status.path
        if not self.driver.unmount(path):
            LOG.warning(f"Unmount command reported failure for {path}, verifying")

        if self.inspector.current_mount(remote).mounted:
            raise UnmountFailedException(f"still mounted at {path} after unmount", mount_point=path)

        if normalize_path(path) == normalize_path(self.registry.default_mount_point(remote)):
            try:
                os.rmdir(path)
                LOG.debug(f"Removed mount directory {path}")
            except OSError as e:
                LOG.debug(f"Could not remove mount directory {path}: {e}")

        return ReconcileResult(
            remote=remote, action=Action.UNMOUNT, outcome=Outcome.SUCCESS,
            detail=f"unmounted from {path}", mount_point=path
        )

    def describe_remotes(self) -> List[Dict[str, Any]]:
        """
        Status of every catalog remote for display.

        Returns:
            One dict per remote with mounted flag, current or planned mount
            point and the configured mount params
        """
        try:
            stored = self.registry.load()
        except ConfigCorruptException as e:
            LOG.warning(f"{e}; showing defaults")
            stored = {}

        states = []
        for remote in self.catalog.list():
            status = self.inspector.current_mount(remote)
            configured = stored.get(remote)
            spec = self.registry.resolve(remote, configured)
            states.append({
                'remote': remote,
                'mounted': status.mounted,
                'mount_point': status.path if status.mounted else spec.mount_point,
                'mount_params': list(configured.mount_params) if configured else [],
            })
        return states

    # Helpers

    def _validate(self, remote: str, action: Action, summary: ReconcileSummary) -> bool:
        """Catalog membership check; NoRemotesConfiguredException propagates"""
        try:
            self.catalog.require(remote)
        except UnknownRemoteException as e:
            LOG.error(str(e))
            summary.add(ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=str(e), error=UNKNOWN_REMOTE
            ))
            return False
        return True

    def _locked(self, remote: str, action: Action, operation) -> ReconcileResult:
        """Run operation under the remote's lock, turning per-remote errors into results"""
        try:
            with self.lock_manager.acquire_lock(remote):
                return operation()
        except ConflictException as e:
            LOG.warning(f"Skipping {remote}: {e}")
            return ReconcileResult(
                remote=remote, action=Action.SKIP, outcome=Outcome.CONFLICT,
                detail=str(e), mount_point=e.mount_point
            )
        except MountException as e:
            LOG.error(f"Mount failed for {remote}: {e}")
            return ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=f"mount failed: {e}", mount_point=e.mount_point, error=MOUNT_FAILED
            )
        except UnmountFailedException as e:
            LOG.error(f"Unmount failed for {remote}: {e}")
            return ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=str(e), mount_point=e.mount_point, error=UNMOUNT_FAILED
            )
        except LockTimeoutException as e:
            LOG.error(str(e))
            return ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=str(e), error=LOCK_TIMEOUT
            )
        except LockFailedException as e:
            LOG.error(str(e))
            return ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=str(e), error=LOCK_FAILED
            )
        except OSError as e:
            LOG.error(f"{action.value.capitalize()} of {remote} failed: {e}")
            return ReconcileResult(
                remote=remote, action=action, outcome=Outcome.FAILURE,
                detail=f"{action.value} failed: {e}",
                error=MOUNT_FAILED if action == Action.MOUNT else UNMOUNT_FAILED
            )
