"""
Unit tests for validation helpers.
"""

import pytest

from rclone_wrapper.utils.validators import (
    normalize_path, validate_mount_path, validate_remote_name
)


@pytest.mark.parametrize('name', ['gdrive', 'my remote', 's3-backup', 'b2.eu', 'x@y', 'a_1'])
def test_valid_remote_names(name):
    assert validate_remote_name(name)


@pytest.mark.parametrize('name', ['', ' gdrive', 'gdrive ', '-gdrive', 'g:drive', 'a/b'])
def test_invalid_remote_names(name):
    assert not validate_remote_name(name)


def test_validate_mount_path():
    assert validate_mount_path('/mnt/rclone/gdrive')
    assert not validate_mount_path('mnt/rclone')
    assert not validate_mount_path('/mnt/../etc')
    assert not validate_mount_path('')


def test_normalize_path():
    assert normalize_path('/mnt/rclone/') == '/mnt/rclone'
    assert normalize_path('/mnt//rclone/./a') == '/mnt/rclone/a'
