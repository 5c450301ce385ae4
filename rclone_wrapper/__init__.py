"""rclone-wrapper - manage rclone remote mounts"""

__version__ = '1.0.0'
