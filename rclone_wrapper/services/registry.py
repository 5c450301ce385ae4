"""Mount registry - persisted mount preferences per remote"""

import json
import os
import tempfile
from typing import Dict, Optional

from rclone_wrapper.exceptions import ConfigCorruptException, StorageUnwritableException
from rclone_wrapper.models import BASELINE_MOUNT_PARAMS, MountSpec
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)


class MountRegistry:
    """
    JSON-backed mapping of remote name to MountSpec.

    Document layout:
        {"<remote>": {"mount_point": "/mnt/rclone/<remote>",
                      "mount_params": ["--vfs-cache-mode", "full"]}}
    """

    def __init__(self, settings_file: str, base_mount_dir: str):
        self.settings_file = settings_file
        self.base_mount_dir = base_mount_dir

    @classmethod
    def from_config(cls, config) -> 'MountRegistry':
        return cls(config.settings_file, config.base_mount_dir)

    def default_mount_point(self, remote: str) -> str:
        return os.path.join(self.base_mount_dir, remote)

    def default_spec(self, remote: str) -> MountSpec:
        return MountSpec(
            mount_point=self.default_mount_point(remote),
            mount_params=list(BASELINE_MOUNT_PARAMS)
        )

    def load(self) -> Dict[str, MountSpec]:
        """
        Read all stored specs.

        Returns:
            Mapping of remote name to MountSpec, empty if the file does not exist

        Raises:
            ConfigCorruptException: If the file exists but has the wrong structure
        """
        if not os.path.exists(self.settings_file):
            LOG.debug(f"Settings file not found: {self.settings_file}")
            return {}

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigCorruptException(f"Cannot read settings file {self.settings_file}: {e}")

        if not isinstance(data, dict):
            raise ConfigCorruptException(
                f"Settings file {self.settings_file} must contain a JSON object"
            )

        specs = {}
        for remote, entry in data.items():
            specs[remote] = self._parse_entry(remote, entry)
        return specs

    def _parse_entry(self, remote: str, entry) -> MountSpec:
        if entry is None:
            entry = {}
        if not isinstance(entry, dict):
            raise ConfigCorruptException(f"Entry for remote '{remote}' must be an object")

        mount_point = entry.get('mount_point')
        if mount_point is not None and not isinstance(mount_point, str):
            raise ConfigCorruptException(f"mount_point for remote '{remote}' must be a string")

        mount_params = entry.get('mount_params')
        if mount_params is None:
            mount_params = []
        if not isinstance(mount_params, list) or not all(isinstance(p, str) for p in mount_params):
            raise ConfigCorruptException(
                f"mount_params for remote '{remote}' must be a list of strings"
            )

        return MountSpec(mount_point=mount_point or '', mount_params=list(mount_params))

    def get(self, remote: str) -> MountSpec:
        """
        Resolve the effective spec for a remote.

        Never fails: unknown remotes and null/empty fields get defaults, and
        a corrupt settings file falls back to defaults with a warning.
        """
        try:
            stored: Optional[MountSpec] = self.load().get(remote)
        except ConfigCorruptException as e:
            LOG.warning(f"{e}; using defaults for {remote}")
            stored = None

        return self.resolve(remote, stored)

    def resolve(self, remote: str, stored: Optional[MountSpec]) -> MountSpec:
        """Fill null/empty fields of a stored spec with defaults"""
        default = self.default_spec(remote)
        if stored is None:
            return default

        return MountSpec(
            mount_point=stored.mount_point or default.mount_point,
            mount_params=list(stored.mount_params) or default.mount_params
        )

    def save(self, specs: Dict[str, MountSpec]):
        """
        Atomically replace the settings file with the given mapping.

        Raises:
            StorageUnwritableException: If the file cannot be written
        """
        document = {remote: spec.to_dict() for remote, spec in specs.items()}
        directory = os.path.dirname(os.path.abspath(self.settings_file))

        tmp_path = None
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.settings-', suffix='.json', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
                f.write('\n')
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.settings_file)
            tmp_path = None
        except OSError as e:
            raise StorageUnwritableException(f"Cannot write settings file {self.settings_file}: {e}")
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        LOG.info(f"Saved {len(document)} mount spec(s) to {self.settings_file}")
