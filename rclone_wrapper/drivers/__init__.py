"""Mount drivers package"""

from rclone_wrapper.drivers.base import BaseMountDriver
from rclone_wrapper.drivers.rclone import RcloneDriver

__all__ = ['BaseMountDriver', 'RcloneDriver']
