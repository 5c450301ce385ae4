"""Base mount driver interface"""

from abc import ABC, abstractmethod
from typing import List

from rclone_wrapper.models import MountEntry


class BaseMountDriver(ABC):
    """Abstract base class for mount drivers"""

    @abstractmethod
    def list_mounts(self) -> List[MountEntry]:
        """
        List active mounts.

        Returns:
            Mount table entries as source/target pairs
        """
        pass

    @abstractmethod
    def list_remotes(self) -> List[str]:
        """
        List remotes known to the storage client.

        Returns:
            Remote names in configuration order, empty if none
        """
        pass

    @abstractmethod
    def mount(self, remote: str, mount_path: str, params: List[str]) -> None:
        """
        Mount a remote in the background.

        Args:
            remote: Remote name
            mount_path: Local mount point
            params: Command line options passed verbatim

        Raises:
            MountException: If the mount could not be started
        """
        pass

    @abstractmethod
    def unmount(self, mount_path: str) -> bool:
        """
        Unmount a path.

        Args:
            mount_path: Path to unmount

        Returns:
            True if unmount command succeeded, False otherwise
        """
        pass

    @abstractmethod
    def configure(self) -> int:
        """
        Run the storage client's interactive configuration.

        Returns:
            Exit code of the configuration tool
        """
        pass
