"""Custom exceptions for rclone-wrapper"""

from typing import Optional


class WrapperException(Exception):
    """Base exception for rclone-wrapper"""
    pass


class ConfigurationException(WrapperException):
    """Exception raised for invalid wrapper configuration"""
    pass


class UnknownRemoteException(WrapperException):
    """Exception raised when a remote is not present in rclone.conf"""

    def __init__(self, remote: str):
        self.remote = remote
        super().__init__(f"Remote '{remote}' not found in configuration")


class NoRemotesConfiguredException(WrapperException):
    """Exception raised when rclone.conf is missing or defines no remotes"""
    pass


class ConfigCorruptException(WrapperException):
    """Exception raised when the settings file cannot be parsed"""
    pass


class StorageUnwritableException(WrapperException):
    """Exception raised when the settings file cannot be written"""
    pass


class MountException(WrapperException):
    """Exception raised during mount operations"""

    def __init__(self, message: str, mount_point: Optional[str] = None):
        self.mount_point = mount_point
        super().__init__(message)


class ConflictException(MountException):
    """Exception raised when a mount point is already occupied"""
    pass


class UnmountFailedException(WrapperException):
    """Exception raised when a remote is still mounted after unmount"""

    def __init__(self, message: str, mount_point: Optional[str] = None):
        self.mount_point = mount_point
        super().__init__(message)


class LockTimeoutException(WrapperException):
    """Exception raised when a per-remote lock cannot be acquired"""
    pass


class LockFailedException(WrapperException):
    """Exception raised when a lock file cannot be created or locked"""
    pass
