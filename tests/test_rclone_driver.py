"""
Test rclone driver command construction and mount table parsing
"""

import os
import shutil
import subprocess
import tempfile
import unittest
from unittest.mock import Mock, patch, MagicMock

from rclone_wrapper.drivers.rclone import (
    RcloneDriver, parse_listremotes, parse_remote_sections
)
from rclone_wrapper.exceptions import ConfigurationException, MountException
from rclone_wrapper.models import MountEntry

ENCRYPTED_CONFIG = """# Encrypted rclone configuration File

RCLONE_ENCRYPT_V0:
XIkAr3p+y+zai82cHFH8UoW1iezpgUNUBlM0yDt6Mbd3k+dQ4rVlSwT7E1hbn2fBR=
"""


class TestRcloneDriver(unittest.TestCase):
    """Test subprocess calls made by the driver"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.rclone_config = os.path.join(self.temp_dir, 'rclone.conf')
        self.driver = RcloneDriver(rclone_config=self.rclone_config, timeout=10)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def write_config(self, content):
        with open(self.rclone_config, 'w') as f:
            f.write(content)

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_mount_command(self, mock_run):
        """Test rclone mount --daemon command line"""
        mock_run.return_value = MagicMock(returncode=0, stdout='', stderr='')

        self.driver.mount('gdrive', '/mnt/rclone/gdrive', ['--vfs-cache-mode', 'full'])

        mock_run.assert_called_once_with(
            ['rclone', 'mount', '--config', self.rclone_config, '--daemon',
             '--vfs-cache-mode', 'full', 'gdrive:', '/mnt/rclone/gdrive'],
            capture_output=True,
            text=True,
            timeout=10
        )

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_mount_failure_carries_stderr(self, mock_run):
        """Test non-zero exit raises with rclone's message"""
        mock_run.return_value = MagicMock(returncode=1, stdout='',
                                          stderr='Fatal error: directory not empty\n')

        with self.assertRaises(MountException) as ctx:
            self.driver.mount('gdrive', '/mnt/rclone/gdrive', [])

        self.assertEqual(str(ctx.exception), 'Fatal error: directory not empty')
        self.assertEqual(ctx.exception.mount_point, '/mnt/rclone/gdrive')

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_mount_binary_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError('rclone')

        with self.assertRaises(MountException):
            self.driver.mount('gdrive', '/mnt/rclone/gdrive', [])

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_mount_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd='rclone', timeout=10)

        with self.assertRaises(MountException):
            self.driver.mount('gdrive', '/mnt/rclone/gdrive', [])

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_unmount(self, mock_run):
        """Test fusermount -u command line"""
        mock_run.return_value = MagicMock(returncode=0, stderr='')

        self.assertTrue(self.driver.unmount('/mnt/rclone/gdrive'))
        mock_run.assert_called_once_with(
            ['fusermount', '-u', '/mnt/rclone/gdrive'],
            capture_output=True,
            text=True,
            timeout=10
        )

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_unmount_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stderr='Device or resource busy')

        self.assertFalse(self.driver.unmount('/mnt/rclone/gdrive'))

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_unmount_binary_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError('fusermount')

        self.assertFalse(self.driver.unmount('/mnt/rclone/gdrive'))

    @patch('rclone_wrapper.drivers.rclone.psutil.disk_partitions')
    def test_list_mounts(self, mock_partitions):
        """Test mount table comes from psutil"""
        mock_partitions.return_value = [
            Mock(device='/dev/sda1', mountpoint='/', fstype='ext4'),
            Mock(device='gdrive:', mountpoint='/mnt/rclone/gdrive', fstype='fuse.rclone'),
        ]

        mounts = self.driver.list_mounts()

        mock_partitions.assert_called_once_with(all=True)
        self.assertEqual(mounts[1], MountEntry('gdrive:', '/mnt/rclone/gdrive', 'fuse.rclone'))

    def test_list_remotes_missing_config(self):
        self.assertEqual(self.driver.list_remotes(), [])

    def test_list_remotes(self):
        """Test remotes are read from section headers"""
        self.write_config(
            "[gdrive]\ntype = drive\nscope = drive\n\n"
            "[s3-backup]\ntype = s3\nprovider = AWS\n"
        )

        self.assertEqual(self.driver.list_remotes(), ['gdrive', 's3-backup'])

    def test_list_remotes_non_utf8_config(self):
        """Test undecodable rclone.conf is a configuration error"""
        with open(self.rclone_config, 'wb') as f:
            f.write(b'\xff\xfe\x00[gdrive]\n')

        with self.assertRaises(ConfigurationException) as ctx:
            self.driver.list_remotes()
        self.assertIn(self.rclone_config, str(ctx.exception))

    @patch('rclone_wrapper.drivers.rclone.open', create=True)
    def test_list_remotes_unreadable_config(self, mock_open):
        self.write_config("[gdrive]\ntype = drive\n")
        mock_open.side_effect = PermissionError(13, 'Permission denied')

        with self.assertRaises(ConfigurationException):
            self.driver.list_remotes()

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_list_remotes_encrypted_config(self, mock_run):
        """Test encrypted config falls back to rclone listremotes"""
        self.write_config(ENCRYPTED_CONFIG)
        mock_run.return_value = MagicMock(returncode=0, stdout='gdrive:\nonedrive:\n', stderr='')

        self.assertEqual(self.driver.list_remotes(), ['gdrive', 'onedrive'])
        self.assertEqual(mock_run.call_args[0][0],
                         ['rclone', 'listremotes', '--config', self.rclone_config])

    @patch('rclone_wrapper.drivers.rclone.subprocess.run')
    def test_list_remotes_encrypted_config_rclone_fails(self, mock_run):
        self.write_config(ENCRYPTED_CONFIG)
        mock_run.return_value = MagicMock(returncode=1, stdout='', stderr='password required')

        self.assertEqual(self.driver.list_remotes(), [])

    @patch('rclone_wrapper.drivers.rclone.subprocess.call')
    def test_configure(self, mock_call):
        """Test rclone config runs attached to the terminal"""
        mock_call.return_value = 0

        self.assertEqual(self.driver.configure(), 0)
        mock_call.assert_called_once_with(['rclone', 'config', '--config', self.rclone_config])

    @patch('rclone_wrapper.drivers.rclone.subprocess.call')
    def test_configure_binary_missing(self, mock_call):
        mock_call.side_effect = FileNotFoundError('rclone')

        with self.assertRaises(ConfigurationException):
            self.driver.configure()


class TestParsers(unittest.TestCase):
    """Test rclone output parsing"""

    def test_parse_remote_sections(self):
        text = "[a]\ntype = drive\n\n[b]\ntype = s3\n\n[a]\ntoken = x\n"

        self.assertEqual(parse_remote_sections(text), ['a', 'b'])

    def test_parse_remote_sections_with_spaces(self):
        self.assertEqual(parse_remote_sections("[my remote]\ntype = local\n"), ['my remote'])

    def test_parse_listremotes(self):
        self.assertEqual(parse_listremotes("gdrive:\n\n s3:\ngdrive:\n"), ['gdrive', 's3'])
