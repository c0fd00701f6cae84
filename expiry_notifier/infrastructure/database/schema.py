"""
DB 스키마 정의 및 마이그레이션

schema_version 테이블에 적용된 버전을 기록하고
시작 시 미적용 버전만 순서대로 실행한다.
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from expiry_notifier.domain.exceptions import StorageError
from expiry_notifier.settings.constants import DB_SCHEMA_VERSION
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


SCHEMA_MIGRATIONS = {
    1: """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at TEXT NOT NULL
    );

    -- 사용자 (알림 수신자)
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL DEFAULT '',
        email TEXT NOT NULL DEFAULT ''
    );

    -- 사용자 소유 상품
    CREATE TABLE IF NOT EXISTS products (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL DEFAULT '',
        expiry TEXT NOT NULL,               -- UTC ISO-8601
        user_id INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id)
    );

    CREATE INDEX IF NOT EXISTS idx_products_user ON products(user_id);
    """,

    2: """
    -- 알림 발송 이력 (상품 단위)
    CREATE TABLE IF NOT EXISTS notification_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        product_id INTEGER NOT NULL,
        notified_on TEXT NOT NULL,          -- UTC 날짜 (YYYY-MM-DD)
        sent_at TEXT NOT NULL,
        status TEXT NOT NULL,               -- sent, failed
        error TEXT,
        FOREIGN KEY (user_id) REFERENCES users(id),
        FOREIGN KEY (product_id) REFERENCES products(id)
    );

    CREATE INDEX IF NOT EXISTS idx_notification_log_product_day
        ON notification_log(product_id, notified_on);
    """,
}


def _split_statements(script: str) -> list:
    """마이그레이션 스크립트를 개별 SQL 문으로 분리 (주석 전용 블록 제외)"""
    statements = []
    for raw in script.split(";"):
        lines = [l for l in raw.split("\n") if l.strip() and not l.strip().startswith("--")]
        if lines:
            statements.append(raw.strip())
    return statements


def get_schema_version(conn: sqlite3.Connection) -> int:
    """현재 적용된 스키마 버전 (테이블이 없으면 0)"""
    try:
        row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    return row[0] if row and row[0] else 0


def init_db(db_path: Path) -> None:
    """DB 초기화 (마이그레이션 포함)

    Raises:
        StorageError: DB 파일을 열거나 마이그레이션할 수 없을 때
    """
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
    except (OSError, sqlite3.Error) as e:
        raise StorageError(f"DB를 열 수 없습니다: {db_path}: {e}") from e

    try:
        current_version = get_schema_version(conn)
        for version in range(current_version + 1, DB_SCHEMA_VERSION + 1):
            script = SCHEMA_MIGRATIONS.get(version)
            if not script:
                continue
            logger.info(f"Applying migration v{version}...")
            for stmt in _split_statements(script):
                conn.execute(stmt)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version, applied_at) VALUES (?, ?)",
                (version, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
            logger.info(f"Migration v{version} applied successfully")
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageError(f"마이그레이션 실패: {e}") from e
    finally:
        conn.close()

    logger.info(f"Database initialized at {db_path}")
