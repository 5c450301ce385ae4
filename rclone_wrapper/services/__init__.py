"""Services package"""

from rclone_wrapper.services.catalog import RemoteCatalog
from rclone_wrapper.services.inspector import MountStatusInspector
from rclone_wrapper.services.registry import MountRegistry
from rclone_wrapper.services.reconciliation import Reconciler
from rclone_wrapper.services.systemd import SystemdService

__all__ = [
    'RemoteCatalog',
    'MountStatusInspector',
    'MountRegistry',
    'Reconciler',
    'SystemdService',
]
