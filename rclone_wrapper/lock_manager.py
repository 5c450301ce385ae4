"""
Per-remote lock manager for mount/unmount operations.
Uses file-based locking so that two invocations never run the
inspect-then-act sequence for the same remote at the same time.
"""

import errno
import fcntl
import os
import re
import time
from contextlib import contextmanager
from typing import Optional

from rclone_wrapper.exceptions import LockFailedException, LockTimeoutException
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r'[^\w.@+-]')


class MountLockManager:
    """
    Manages advisory locks, one lock file per remote.
    Uses flock for cross-process synchronization.
    """

    LOCK_TIMEOUT = 30
    POLL_INTERVAL = 0.1

    def __init__(self, lock_dir: str, timeout: Optional[float] = None):
        """
        Args:
            lock_dir: Directory to store lock files (created on first use)
            timeout: Maximum time to wait for a lock in seconds
        """
        self.lock_dir = lock_dir
        self.timeout = self.LOCK_TIMEOUT if timeout is None else timeout

    @classmethod
    def from_config(cls, config) -> 'MountLockManager':
        return cls(config.lock_dir, config.lock_timeout)

    def lock_path(self, remote: str) -> str:
        return os.path.join(self.lock_dir, f"{_UNSAFE_CHARS.sub('_', remote)}.lock")

    @contextmanager
    def acquire_lock(self, remote: str):
        """
        Context manager holding the lock for one remote.

        Raises:
            LockTimeoutException: If the lock cannot be acquired within timeout
            LockFailedException: If the lock file cannot be created or locked

        Example:
            with lock_manager.acquire_lock('gdrive'):
                # inspect mount table and mount
                pass
        """
        lock_file_path = self.lock_path(remote)
        try:
            os.makedirs(self.lock_dir, mode=0o755, exist_ok=True)
            lock_file = open(lock_file_path, 'w')
        except OSError as e:
            raise LockFailedException(f"Cannot open lock file {lock_file_path}: {e}")
        acquired = False

        try:
            start_time = time.monotonic()
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    acquired = True
                    LOG.debug(f"Acquired lock for {remote}")
                    break
                except OSError as e:
                    if e.errno not in (errno.EAGAIN, errno.EACCES):
                        raise LockFailedException(f"Cannot lock {lock_file_path}: {e}")

                    elapsed = time.monotonic() - start_time
                    if elapsed >= self.timeout:
                        raise LockTimeoutException(
                            f"Could not acquire lock for {remote} after {self.timeout} seconds"
                        )
                    time.sleep(self.POLL_INTERVAL)
                    LOG.debug(f"Waiting for lock on {remote} ({elapsed:.1f}s elapsed)...")

            yield True

        finally:
            if acquired:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                LOG.debug(f"Released lock for {remote}")
            lock_file.close()
