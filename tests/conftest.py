"""
Shared fixtures: an in-memory mount driver and a config rooted in tmp_path.
"""

import logging

import pytest

from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.drivers.rclone import RCLONE_FSTYPE
from rclone_wrapper.exceptions import MountException
from rclone_wrapper.models import MountEntry
from rclone_wrapper.services.reconciliation import Reconciler
from rclone_wrapper.utils.logger import ROOT_LOGGER


class FakeDriver(BaseMountDriver):
    """Mount driver backed by an in-memory mount table."""

    def __init__(self, remotes=None, mounts=None):
        self.remotes = list(remotes or [])
        self.mounts = list(mounts or [])
        self.mount_calls = []
        self.unmount_calls = []
        self.configure_calls = 0
        # remote -> stderr of a failing `rclone mount`
        self.mount_errors = {}
        # paths that stay mounted after unmount
        self.stuck = set()

    def add_mount(self, remote, path, fstype=RCLONE_FSTYPE):
        self.mounts.append(MountEntry(source=f"{remote}:", target=path, fstype=fstype))

    def list_mounts(self):
        return list(self.mounts)

    def list_remotes(self):
        return list(self.remotes)

    def mount(self, remote, mount_path, params):
        self.mount_calls.append((remote, mount_path, list(params)))
        if remote in self.mount_errors:
            raise MountException(self.mount_errors[remote], mount_point=mount_path)
        self.add_mount(remote, mount_path)

    def unmount(self, mount_path):
        self.unmount_calls.append(mount_path)
        if mount_path in self.stuck:
            return False
        self.mounts = [m for m in self.mounts if m.target != mount_path]
        return True

    def configure(self):
        self.configure_calls += 1
        return 0


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by CLI runs so later tests do not log to closed streams."""
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config(tmp_path):
    """Configuration with every path under tmp_path and no environment."""
    return WrapperConfig(
        config_data={
            'base_mount_dir': str(tmp_path / 'mnt'),
            'settings_file': str(tmp_path / 'settings.json'),
            'rclone_config': str(tmp_path / 'rclone.conf'),
            'lock_dir': str(tmp_path / 'locks'),
            'lock_timeout': 1,
            'user': 'tester',
        },
        environ={}
    )


@pytest.fixture
def driver():
    return FakeDriver(remotes=['a', 'b', 'c'])


@pytest.fixture
def reconciler(config, driver):
    return Reconciler(config, driver=driver)
