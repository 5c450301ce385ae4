"""Remote catalog - remotes defined in rclone.conf"""

from typing import List

from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.exceptions import NoRemotesConfiguredException, UnknownRemoteException
from rclone_wrapper.utils.logger import get_logger
from rclone_wrapper.utils.validators import validate_remote_name

LOG = get_logger(__name__)


class RemoteCatalog:
    """Enumerates remotes configured in the storage client."""

    def __init__(self, driver: BaseMountDriver):
        self.driver = driver

    def list(self) -> List[str]:
        """
        Configured remote names, in configuration order.

        Raises:
            NoRemotesConfiguredException: If no remotes are configured
        """
        remotes = []
        for name in self.driver.list_remotes():
            if not validate_remote_name(name):
                LOG.warning(f"Ignoring invalid remote name in rclone config: {name!r}")
                continue
            if name not in remotes:
                remotes.append(name)

        if not remotes:
            raise NoRemotesConfiguredException(
                "No remotes found in configuration. Run 'rclone-wrapper config' to set up a remote."
            )
        return remotes

    def exists(self, remote: str) -> bool:
        return remote in self.list()

    def require(self, remote: str):
        """
        Raises:
            UnknownRemoteException: If the remote is not configured
            NoRemotesConfiguredException: If no remotes are configured
        """
        if not self.exists(remote):
            raise UnknownRemoteException(remote)
