"""
rclone-wrapper Configuration Module
Supports loading from:
1. INI config file (~/.config/rclone-wrapper/wrapper.conf or --config FILE)
2. Environment variables (override config file)
3. Default values (fallback)

Command line options are applied on top by the CLI.
"""

import getpass
import os
from configparser import ConfigParser, Error as ConfigParserError
from typing import Dict, Any, Optional

from rclone_wrapper.exceptions import ConfigurationException
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)

ENV_PREFIX = 'RCLONE_WRAPPER_'
SECTION = 'wrapper'


def _home() -> str:
    return os.path.expanduser('~')


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


class WrapperConfig:
    """Wrapper configuration, passed explicitly to every service"""

    # Default values
    DEFAULT_BASE_MOUNT_DIR = '/mnt/rclone'
    DEFAULT_RCLONE_BIN = 'rclone'
    DEFAULT_FUSERMOUNT_BIN = 'fusermount'
    DEFAULT_LOCK_TIMEOUT = 30
    DEFAULT_COMMAND_TIMEOUT = 60
    DEFAULT_LOG_LEVEL = 'WARNING'
    DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    DEFAULT_SERVICE_NAME = 'rclone-automount'
    DEFAULT_SERVICE_DIR = '/etc/systemd/system'
    DEFAULT_WRAPPER_BIN = '/usr/local/bin/rclone-wrapper'

    # key -> type, used for INI/env lookups
    FIELDS = {
        'base_mount_dir': str,
        'settings_file': str,
        'rclone_config': str,
        'rclone_bin': str,
        'fusermount_bin': str,
        'user': str,
        'lock_dir': str,
        'lock_timeout': int,
        'command_timeout': int,
        'log_level': str,
        'log_format': str,
        'log_json': bool,
        'service_name': str,
        'service_file': str,
        'wrapper_bin': str,
    }

    def __init__(self, config_data: Optional[Dict[str, Any]] = None,
                 environ: Optional[Dict[str, str]] = None):
        """
        Build configuration with priority: env var > config data > default.

        Args:
            config_data: Values read from a config file
            environ: Environment mapping (default: os.environ)
        """
        config_data = config_data or {}
        environ = os.environ if environ is None else environ
        defaults = self.defaults()

        for key, field_type in self.FIELDS.items():
            env_key = f"{ENV_PREFIX}{key.upper()}"
            value = environ.get(env_key, config_data.get(key, defaults[key]))
            try:
                if field_type is bool:
                    value = _as_bool(value)
                elif field_type is int:
                    value = int(value)
            except (TypeError, ValueError):
                raise ConfigurationException(
                    f"Invalid value for {key}: {value!r} (expected {field_type.__name__})"
                )
            setattr(self, key, value)

        self._expand_paths()

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Default values, computed from the current user's home directory"""
        home = _home()
        wrapper_dir = os.path.join(home, '.config', 'rclone-wrapper')
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = 'root'
        service_name = cls.DEFAULT_SERVICE_NAME
        return {
            'base_mount_dir': cls.DEFAULT_BASE_MOUNT_DIR,
            'settings_file': os.path.join(wrapper_dir, 'settings.json'),
            'rclone_config': os.path.join(home, '.config', 'rclone', 'rclone.conf'),
            'rclone_bin': cls.DEFAULT_RCLONE_BIN,
            'fusermount_bin': cls.DEFAULT_FUSERMOUNT_BIN,
            'user': user,
            'lock_dir': os.path.join(wrapper_dir, 'locks'),
            'lock_timeout': cls.DEFAULT_LOCK_TIMEOUT,
            'command_timeout': cls.DEFAULT_COMMAND_TIMEOUT,
            'log_level': cls.DEFAULT_LOG_LEVEL,
            'log_format': cls.DEFAULT_LOG_FORMAT,
            'log_json': False,
            'service_name': service_name,
            'service_file': os.path.join(cls.DEFAULT_SERVICE_DIR, f"{service_name}.service"),
            'wrapper_bin': cls.DEFAULT_WRAPPER_BIN,
        }

    @classmethod
    def default_config_file(cls) -> str:
        return os.path.join(_home(), '.config', 'rclone-wrapper', 'wrapper.conf')

    @classmethod
    def from_file(cls, config_file: Optional[str] = None,
                  environ: Optional[Dict[str, str]] = None) -> 'WrapperConfig':
        """
        Load configuration from an INI file.

        Expected format:
        [wrapper]
        base_mount_dir = /mnt/rclone
        settings_file = /home/user/.config/rclone-wrapper/settings.json
        log_level = INFO

        A missing default file is not an error. A missing explicit file is.

        Args:
            config_file: Path to config file (default: ~/.config/rclone-wrapper/wrapper.conf)
            environ: Environment mapping (default: os.environ)

        Returns:
            WrapperConfig instance

        Raises:
            ConfigurationException: If an explicit file is missing or unreadable
        """
        explicit = config_file is not None
        config_file = config_file or cls.default_config_file()

        if not os.path.exists(config_file):
            if explicit:
                raise ConfigurationException(f"Config file not found: {config_file}")
            LOG.debug(f"Config file not found: {config_file}, using defaults")
            return cls(environ=environ)

        parser = ConfigParser(interpolation=None)
        try:
            parser.read(config_file)
        except ConfigParserError as e:
            raise ConfigurationException(f"Failed to parse config file {config_file}: {e}")

        config_data = {}
        # [wrapper] section first, then [DEFAULT]
        if parser.has_section(SECTION):
            config_data.update(dict(parser.items(SECTION)))
        for key, value in parser.defaults().items():
            config_data.setdefault(key, value)

        unknown = set(config_data) - set(cls.FIELDS)
        if unknown:
            LOG.warning(f"Ignoring unknown config keys in {config_file}: {', '.join(sorted(unknown))}")

        LOG.info(f"Loaded {len(config_data)} config parameters from {config_file}")
        return cls(config_data=config_data, environ=environ)

    def _expand_paths(self):
        for key in ('base_mount_dir', 'settings_file', 'rclone_config', 'lock_dir'):
            setattr(self, key, os.path.expanduser(getattr(self, key)))

    def apply_overrides(self, **overrides):
        """Apply command line values on top of file/env/default values (None is ignored)"""
        for key, value in overrides.items():
            if key not in self.FIELDS:
                raise ConfigurationException(f"Unknown config key: {key}")
            if value is not None:
                setattr(self, key, value)
        self._expand_paths()

    def default_mount_point(self, remote: str) -> str:
        """Default mount point for a remote: <base_mount_dir>/<remote>"""
        return os.path.join(self.base_mount_dir, remote)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in self.FIELDS}

    def __repr__(self):
        return (
            f"<WrapperConfig("
            f"base_mount_dir='{self.base_mount_dir}', "
            f"settings_file='{self.settings_file}', "
            f"rclone_config='{self.rclone_config}')>"
        )
