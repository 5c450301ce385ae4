"""Utilities package"""

from rclone_wrapper.utils.logger import get_logger, setup_logging
from rclone_wrapper.utils.validators import (
    validate_remote_name, validate_mount_path, normalize_path
)

__all__ = [
    'get_logger',
    'setup_logging',
    'validate_remote_name',
    'validate_mount_path',
    'normalize_path',
]
