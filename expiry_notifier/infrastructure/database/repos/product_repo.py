"""상품 Repository"""

import sqlite3
from datetime import datetime
from typing import List

from expiry_notifier.domain.exceptions import NotFoundError
from expiry_notifier.domain.models import Product, format_timestamp, parse_timestamp
from expiry_notifier.infrastructure.database.base_repository import BaseRepository
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


def _row_to_product(row: sqlite3.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        expiry=parse_timestamp(row["expiry"]),
        user_id=row["user_id"],
        created_at=parse_timestamp(row["created_at"]),
    )


class ProductRepository(BaseRepository):
    """사용자 소유 상품 생성/조회"""

    def create_product(self, name: str, expiry: datetime, user_id: int) -> Product:
        """상품 생성

        Raises:
            NotFoundError: user_id 사용자가 없을 때 (행을 만들지 않음)
        """
        created_at = self._now()
        with self._connect() as conn:
            exists = conn.execute(
                "SELECT 1 FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if exists is None:
                raise NotFoundError(f"user not found: {user_id}")
            try:
                cursor = conn.execute(
                    """INSERT INTO products (name, expiry, user_id, created_at)
                       VALUES (?, ?, ?, ?)""",
                    (name, format_timestamp(expiry), user_id, created_at),
                )
            except sqlite3.IntegrityError as e:
                # 확인 직후 사용자가 사라진 경우 (외래키 위반)
                conn.rollback()
                raise NotFoundError(f"user not found: {user_id}") from e
            conn.commit()
            product_id = cursor.lastrowid

        logger.info(f"[DB] 상품 생성: id={product_id}, user_id={user_id}")
        return Product(
            id=product_id,
            name=name,
            expiry=parse_timestamp(format_timestamp(expiry)),
            user_id=user_id,
            created_at=parse_timestamp(created_at),
        )

    def list_for_user(self, user_id: int) -> List[Product]:
        """사용자 소유 상품 목록 (id 오름차순)

        Raises:
            NotFoundError: 사용자가 없을 때
        """
        with self._connect() as conn:
            exists = conn.execute(
                "SELECT 1 FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            if exists is None:
                raise NotFoundError(f"user not found: {user_id}")
            rows = conn.execute(
                """SELECT id, name, expiry, user_id, created_at
                   FROM products WHERE user_id = ? ORDER BY id""",
                (user_id,),
            ).fetchall()
        return [_row_to_product(r) for r in rows]
