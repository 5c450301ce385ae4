"""Validation utilities"""

import os
import re

# rclone remote names: letters, digits, '_', '-', '.', '+', '@' and spaces,
# not starting with '-' or a space.
REMOTE_NAME_PATTERN = re.compile(r'^[\w.+@][\w.+@ -]*$')


def validate_remote_name(name: str) -> bool:
    """Validate remote name format"""
    if not name or name != name.strip():
        return False
    return bool(REMOTE_NAME_PATTERN.match(name))


def validate_mount_path(path: str) -> bool:
    """Validate mount path"""
    if not path or not os.path.isabs(path):
        return False
    return '..' not in path.split('/')


def normalize_path(path: str) -> str:
    """Normalize a mount path for comparison"""
    return os.path.normpath(os.path.expanduser(path))
