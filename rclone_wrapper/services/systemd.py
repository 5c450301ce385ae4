"""systemd integration - boot-time `mount all` / shutdown-time `unmount all`"""

import os
import shutil
import subprocess
from typing import List

from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.exceptions import ConfigurationException
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)

REQUIRED_BINARIES = ('rclone_bin', 'fusermount_bin')

UNIT_TEMPLATE = """[Unit]
Description=RClone Auto-Mount Service
After=network-online.target
Wants=network-online.target

[Service]
Type=oneshot
RemainAfterExit=yes
ExecStart={wrapper_bin} mount all
ExecStop={wrapper_bin} unmount all
User={user}
Environment="RCLONE_WRAPPER_SETTINGS_FILE={settings_file}"
Environment="RCLONE_WRAPPER_RCLONE_CONFIG={rclone_config}"
Environment="RCLONE_WRAPPER_BASE_MOUNT_DIR={base_mount_dir}"

[Install]
WantedBy=multi-user.target
"""


class SystemdService:
    """Writes and controls the auto-mount unit"""

    def __init__(self, config: WrapperConfig):
        self.config = config

    @property
    def unit_name(self) -> str:
        return f"{self.config.service_name}.service"

    def missing_binaries(self) -> List[str]:
        """Required external tools not found on PATH"""
        missing = []
        for key in REQUIRED_BINARIES:
            binary = getattr(self.config, key)
            if shutil.which(binary) is None:
                missing.append(binary)
        return missing

    def render_unit(self) -> str:
        return UNIT_TEMPLATE.format(
            wrapper_bin=self.config.wrapper_bin,
            user=self.config.user,
            settings_file=self.config.settings_file,
            rclone_config=self.config.rclone_config,
            base_mount_dir=self.config.base_mount_dir,
        )

    def write_unit(self, output_file: str = None) -> str:
        """
        Write the unit file.

        Returns:
            Path of the written file

        Raises:
            ConfigurationException: If the file cannot be written
        """
        output_file = output_file or self.config.service_file
        try:
            with open(output_file, 'w') as f:
                f.write(self.render_unit())
            os.chmod(output_file, 0o644)
        except OSError as e:
            raise ConfigurationException(f"Failed to create service file {output_file}: {e}")

        LOG.info(f"Service file created: {output_file}")
        return output_file

    def _systemctl(self, *args: str) -> subprocess.CompletedProcess:
        cmd = ['systemctl'] + list(args)
        LOG.debug(f"Executing: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.config.command_timeout
            )
        except FileNotFoundError:
            raise ConfigurationException("systemctl not found (not running on systemd)")
        except subprocess.TimeoutExpired:
            raise ConfigurationException(f"systemctl {' '.join(args)} timed out")

    def enable(self, start: bool = True):
        """daemon-reload, enable and optionally start the unit"""
        steps = [('daemon-reload',), ('enable', self.unit_name)]
        if start:
            steps.append(('start', self.unit_name))

        for step in steps:
            result = self._systemctl(*step)
            if result.returncode != 0:
                raise ConfigurationException(
                    f"systemctl {' '.join(step)} failed: {(result.stderr or '').strip()}"
                )
        LOG.info(f"Auto-mount service {self.unit_name} enabled")

    def status(self) -> subprocess.CompletedProcess:
        return self._systemctl('status', self.unit_name)
