"""rclone mount driver implementation"""

import os
import subprocess
from configparser import ConfigParser, Error as ConfigParserError
from typing import List, Optional

import psutil

from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.exceptions import ConfigurationException, MountException
from rclone_wrapper.models import MountEntry
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)

RCLONE_FSTYPE = 'fuse.rclone'


def parse_remote_sections(text: str) -> List[str]:
    """
    Extract remote names from rclone.conf content.

    Args:
        text: Content of rclone.conf

    Returns:
        Section names in file order

    Raises:
        configparser.Error: If the content is not a plain INI file
            (e.g. an encrypted rclone config)
    """
    parser = ConfigParser(interpolation=None, strict=False)
    parser.read_string(text)
    return parser.sections()


def parse_listremotes(output: str) -> List[str]:
    """Parse `rclone listremotes` output ('name:' per line)"""
    remotes = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        name = line[:-1] if line.endswith(':') else line
        if name and name not in remotes:
            remotes.append(name)
    return remotes


class RcloneDriver(BaseMountDriver):
    """Driver for mounting rclone remotes through FUSE."""

    def __init__(self, rclone_bin: str = 'rclone', fusermount_bin: str = 'fusermount',
                 rclone_config: Optional[str] = None, timeout: int = 60):
        self.rclone_bin = rclone_bin
        self.fusermount_bin = fusermount_bin
        self.rclone_config = rclone_config
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'RcloneDriver':
        return cls(
            rclone_bin=config.rclone_bin,
            fusermount_bin=config.fusermount_bin,
            rclone_config=config.rclone_config,
            timeout=config.command_timeout,
        )

    def _rclone_cmd(self, subcommand: str) -> List[str]:
        cmd = [self.rclone_bin, subcommand]
        if self.rclone_config:
            cmd.extend(['--config', self.rclone_config])
        return cmd

    def mount(self, remote: str, mount_path: str, params: List[str]) -> None:
        """
        Mount remote with `rclone mount --daemon`.

        rclone forks into the background once the mount is set up, so this
        returns without waiting for the mount to serve traffic.
        """
        cmd = self._rclone_cmd('mount') + ['--daemon'] + list(params) + [f"{remote}:", mount_path]
        LOG.info(f"Mounting {remote} at {mount_path}")
        LOG.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise MountException(f"rclone binary not found: {self.rclone_bin}", mount_point=mount_path)
        except subprocess.TimeoutExpired:
            raise MountException(
                f"rclone mount timed out after {self.timeout} seconds", mount_point=mount_path
            )

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            LOG.error(f"Mount failed for {remote}: {stderr}")
            raise MountException(
                stderr or f"rclone mount exited with code {result.returncode}",
                mount_point=mount_path
            )

        LOG.info(f"Started rclone mount for {remote} at {mount_path}")

    def unmount(self, mount_path: str) -> bool:
        """Unmount with `fusermount -u`"""
        cmd = [self.fusermount_bin, '-u', mount_path]
        LOG.info(f"Unmounting {mount_path}")
        LOG.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            LOG.error(f"fusermount binary not found: {self.fusermount_bin}")
            return False
        except subprocess.TimeoutExpired:
            LOG.error(f"Unmount command timed out for {mount_path}")
            return False

        if result.returncode != 0:
            LOG.error(f"Unmount failed for {mount_path}: {(result.stderr or '').strip()}")
            return False

        LOG.info(f"Successfully unmounted {mount_path}")
        return True

    def list_mounts(self) -> List[MountEntry]:
        """Read the mount table through psutil"""
        return [
            MountEntry(source=part.device, target=part.mountpoint, fstype=part.fstype)
            for part in psutil.disk_partitions(all=True)
        ]

    def list_remotes(self) -> List[str]:
        """
        List remotes from rclone.conf.

        Falls back to `rclone listremotes` when the file is not plain INI
        (encrypted configs).
        """
        if not self.rclone_config or not os.path.exists(self.rclone_config):
            LOG.debug(f"rclone config not found: {self.rclone_config}")
            return []

        try:
            with open(self.rclone_config, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationException(f"Cannot read rclone config {self.rclone_config}: {e}")

        try:
            return parse_remote_sections(text)
        except ConfigParserError as e:
            LOG.info(f"Could not parse {self.rclone_config} ({e}), asking rclone instead")
            return self._listremotes()

    def _listremotes(self) -> List[str]:
        try:
            result = subprocess.run(
                self._rclone_cmd('listremotes'),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            LOG.error(f"rclone listremotes failed: {e}")
            return []

        if result.returncode != 0:
            LOG.error(f"rclone listremotes failed: {(result.stderr or '').strip()}")
            return []
        return parse_listremotes(result.stdout)

    def configure(self) -> int:
        """Run `rclone config` attached to the current terminal"""
        cmd = self._rclone_cmd('config')
        LOG.debug(f"Executing: {' '.join(cmd)}")
        try:
            return subprocess.call(cmd)
        except FileNotFoundError:
            raise ConfigurationException(f"rclone binary not found: {self.rclone_bin}")
