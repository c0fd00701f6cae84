"""사용자 Repository"""

import sqlite3
from typing import List

from expiry_notifier.domain.exceptions import NotFoundError
from expiry_notifier.domain.models import Product, User, parse_timestamp
from expiry_notifier.infrastructure.database.base_repository import BaseRepository
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


def _row_to_user(row: sqlite3.Row) -> User:
    return User(id=row["id"], name=row["name"], email=row["email"])


class UserRepository(BaseRepository):
    """사용자 생성/조회"""

    def create_user(self, name: str, email: str) -> User:
        """사용자 생성. 반환: 생성된 User (products 비어 있음)."""
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO users (name, email) VALUES (?, ?)",
                (name, email),
            )
            conn.commit()
            user_id = cursor.lastrowid
        logger.info(f"[DB] 사용자 생성: id={user_id}")
        return User(id=user_id, name=name, email=email)

    def list_users(self) -> List[User]:
        """전체 사용자 목록 (products 미포함)"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, email FROM users ORDER BY id"
            ).fetchall()
        return [_row_to_user(r) for r in rows]

    def find_user(self, user_id: int) -> User:
        """id로 사용자 조회

        Raises:
            NotFoundError: 사용자가 없을 때
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, email FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError(f"user not found: {user_id}")
        return _row_to_user(row)

    def list_users_with_products(self) -> List[User]:
        """전체 사용자 + 소유 상품 (단일 JOIN 쿼리)

        사용자 순서와 사용자별 상품 순서는 id 오름차순이다.
        """
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT u.id AS user_id, u.name AS user_name, u.email,
                          p.id AS product_id, p.name AS product_name,
                          p.expiry, p.created_at
                   FROM users u
                   LEFT JOIN products p ON p.user_id = u.id
                   ORDER BY u.id, p.id"""
            ).fetchall()

        users: List[User] = []
        current = None
        for row in rows:
            if current is None or current.id != row["user_id"]:
                current = User(id=row["user_id"], name=row["user_name"], email=row["email"])
                users.append(current)
            if row["product_id"] is not None:
                current.products.append(Product(
                    id=row["product_id"],
                    name=row["product_name"],
                    expiry=parse_timestamp(row["expiry"]),
                    user_id=row["user_id"],
                    created_at=parse_timestamp(row["created_at"]),
                ))
        return users
