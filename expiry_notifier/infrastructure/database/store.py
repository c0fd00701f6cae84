"""
Store -- 웹 핸들러와 스캔 작업이 공유하는 저장소 진입점

전역 DB 핸들 대신 명시적으로 생성해 주입한다.

Usage:
    store = Store(db_path)
    store.init()
    user = store.create_user("A", "a@x.com")
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from expiry_notifier.domain.models import Product, User
from expiry_notifier.infrastructure.database.repos import (
    NotificationLogRepository,
    ProductRepository,
    UserRepository,
)
from expiry_notifier.infrastructure.database.schema import init_db


class Store:
    """사용자/상품/알림 이력 저장소"""

    def __init__(self, db_path: Optional[Path] = None):
        self.users = UserRepository(db_path=db_path)
        self.db_path = self.users.db_path
        self.products = ProductRepository(db_path=self.db_path)
        self.notification_log = NotificationLogRepository(db_path=self.db_path)

    def init(self) -> None:
        """스키마 생성/마이그레이션 (시작 시 1회)"""
        init_db(self.db_path)

    def create_user(self, name: str, email: str) -> User:
        return self.users.create_user(name, email)

    def list_users(self) -> List[User]:
        return self.users.list_users()

    def find_user(self, user_id: int) -> User:
        return self.users.find_user(user_id)

    def create_product(self, name: str, expiry: datetime, user_id: int) -> Product:
        return self.products.create_product(name, expiry, user_id)

    def list_products_for_user(self, user_id: int) -> List[Product]:
        return self.products.list_for_user(user_id)

    def list_users_with_products(self) -> List[User]:
        return self.users.list_users_with_products()
