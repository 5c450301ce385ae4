"""Mount status inspector - live view of the OS mount table"""

from typing import List, Tuple

from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.drivers.rclone import RCLONE_FSTYPE
from rclone_wrapper.models import MountEntry, MountStatus
from rclone_wrapper.utils.logger import get_logger
from rclone_wrapper.utils.validators import normalize_path

LOG = get_logger(__name__)

REMOTE_SEPARATOR = ':'


def remote_of(source: str) -> str:
    """Remote name of a mount source ('gdrive:docs' -> 'gdrive')"""
    return source.split(REMOTE_SEPARATOR, 1)[0]


class MountStatusInspector:
    """Queries the mount table; owns no state and never caches."""

    def __init__(self, driver: BaseMountDriver):
        self.driver = driver

    def _mounts(self) -> List[MountEntry]:
        try:
            return self.driver.list_mounts()
        except Exception as e:
            # An unreadable mount table is treated as empty.
            LOG.warning(f"Could not read mount table: {e}")
            return []

    def current_mount(self, remote: str) -> MountStatus:
        """
        Current mount of a remote.

        Matches sources starting with '<remote>:' so that 'gdrive1' never
        matches 'gdrive10:'.
        """
        prefix = f"{remote}{REMOTE_SEPARATOR}"
        for entry in self._mounts():
            if entry.source.startswith(prefix):
                return MountStatus.mounted_at(entry.target)
        return MountStatus.unmounted()

    def path_in_use(self, path: str) -> bool:
        """True if any mount target equals path, whatever its source"""
        wanted = normalize_path(path)
        return any(normalize_path(entry.target) == wanted for entry in self._mounts())

    def mounted_remotes(self) -> List[Tuple[str, str]]:
        """(remote, mount path) for every rclone FUSE mount, in table order"""
        mounted = []
        seen = set()
        for entry in self._mounts():
            if entry.fstype != RCLONE_FSTYPE or REMOTE_SEPARATOR not in entry.source:
                continue
            remote = remote_of(entry.source)
            if remote not in seen:
                seen.add(remote)
                mounted.append((remote, entry.target))
        return mounted
