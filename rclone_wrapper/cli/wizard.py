"""Configuration wizard - rclone remotes and their mount preferences"""

import os
from typing import Dict, List, Optional

from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.drivers import RcloneDriver
from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.exceptions import ConfigCorruptException
from rclone_wrapper.models import BASELINE_MOUNT_PARAMS, MountSpec
from rclone_wrapper.services.catalog import RemoteCatalog
from rclone_wrapper.services.registry import MountRegistry
from rclone_wrapper.utils.logger import get_logger
from rclone_wrapper.utils.validators import validate_mount_path

LOG = get_logger(__name__)


class ConfigWizard:
    """Interactive wizard for remote mount configuration"""

    def __init__(self, config: WrapperConfig,
                 driver: Optional[BaseMountDriver] = None,
                 registry: Optional[MountRegistry] = None,
                 input_func=input):
        self.config = config
        self.driver = driver or RcloneDriver.from_config(config)
        self.registry = registry or MountRegistry.from_config(config)
        self.catalog = RemoteCatalog(self.driver)
        self.input = input_func

    def run(self, force: bool = False) -> Dict[str, MountSpec]:
        """
        Run the interactive wizard.

        Args:
            force: Run `rclone config` even if rclone.conf already exists

        Returns:
            The saved mapping of remote name to MountSpec

        Raises:
            NoRemotesConfiguredException: If rclone still has no remotes
            StorageUnwritableException: If the settings cannot be saved
        """
        print("\n" + "=" * 60)
        print("rclone Mount Configuration Wizard")
        print("=" * 60 + "\n")

        if force or not os.path.exists(self.config.rclone_config):
            print("Starting rclone configuration...\n")
            code = self.driver.configure()
            if code != 0:
                LOG.warning(f"rclone config exited with code {code}")

        remotes = self.catalog.list()
        existing = self._existing_specs()

        specs = {}
        for remote in remotes:
            specs[remote] = self._configure_remote(remote, existing.get(remote))

        self.registry.save(specs)
        print(f"\n✅ Settings saved to {self.registry.settings_file}")
        return specs

    def _existing_specs(self) -> Dict[str, MountSpec]:
        try:
            return self.registry.load()
        except ConfigCorruptException as e:
            print(f"⚠️  {e}")
            print("   Existing settings will be replaced")
            return {}

    def _configure_remote(self, remote: str, current: Optional[MountSpec]) -> MountSpec:
        """Prompt for the mount point and params of one remote"""
        print(f"\nConfiguring remote: {remote}")
        print("-" * 40)

        default_path = (current.mount_point if current and current.mount_point
                        else self.registry.default_mount_point(remote))
        while True:
            mount_point = self.input(f"Mount point [{default_path}]: ").strip() or default_path
            mount_point = os.path.expanduser(mount_point)
            if validate_mount_path(mount_point):
                break
            print("❌ Mount point must be an absolute path")

        default_params = (list(current.mount_params) if current and current.mount_params
                          else list(BASELINE_MOUNT_PARAMS))
        print("\nMount parameters (one per line, empty line to finish).")
        print(f"Press Enter right away to keep: {' '.join(default_params)}")
        params = self._read_params()

        return MountSpec(mount_point=mount_point, mount_params=params or default_params)

    def _read_params(self) -> List[str]:
        params = []
        while True:
            line = self.input("  > ").strip()
            if not line:
                return params
            params.append(line)
