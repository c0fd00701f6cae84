"""
Repository re-export

Usage:
    from expiry_notifier.infrastructure.database.repos import UserRepository
"""

from .user_repo import UserRepository
from .product_repo import ProductRepository
from .notification_log_repo import NotificationLogRepository

__all__ = [
    "UserRepository",
    "ProductRepository",
    "NotificationLogRepository",
]
