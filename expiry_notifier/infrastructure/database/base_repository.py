"""
BaseRepository -- 모든 Repository의 기반 클래스

db_path를 생성자에서 받고, 작업마다 연결을 열고 닫는다.
sqlite3 예외는 StorageError로 변환된다.
"""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from expiry_notifier.domain.exceptions import StorageError
from expiry_notifier.infrastructure.database.connection import (
    get_connection,
    get_default_db_path,
)
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


class BaseRepository:
    """기본 저장소 클래스

    Usage:
        class UserRepository(BaseRepository):
            def list_users(self):
                with self._connect() as conn:
                    return conn.execute("SELECT * FROM users").fetchall()

        repo = UserRepository(db_path=Path("data/products.db"))
    """

    def __init__(self, db_path: Optional[Path] = None):
        """초기화

        Args:
            db_path: DB 경로. None이면 data/products.db
        """
        self.db_path = Path(db_path) if db_path else get_default_db_path()

    def _get_conn(self) -> sqlite3.Connection:
        """DB 연결 반환"""
        return get_connection(self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """연결을 열고 작업 후 닫는다. sqlite3 오류는 StorageError로 변환."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StorageError(f"DB 연결 실패: {e}") from e
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"[DB] 쿼리 실패: {e}")
            raise StorageError(f"DB 오류: {e}") from e
        finally:
            conn.close()

    @staticmethod
    def _now() -> str:
        """현재 시각 (UTC ISO-8601)"""
        return datetime.now(timezone.utc).isoformat()
