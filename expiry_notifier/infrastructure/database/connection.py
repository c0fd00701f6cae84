"""
DB 커넥션

작업 단위마다 새 연결을 연다. 스케줄러 스레드와 웹 워커 스레드가
같은 DB 파일을 공유하므로 연결 객체는 스레드 간에 공유하지 않는다.
"""

import sqlite3
from pathlib import Path

from expiry_notifier.settings.app_config import DATA_DIR
from expiry_notifier.settings.constants import DEFAULT_DB_NAME

# 쓰기 잠금 대기 시간 (초)
CONNECT_TIMEOUT = 10


def get_default_db_path() -> Path:
    """기본 DB 경로 (data/products.db)"""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return DATA_DIR / DEFAULT_DB_NAME


def get_connection(db_path: Path) -> sqlite3.Connection:
    """DB 연결 반환

    Args:
        db_path: DB 파일 경로

    Returns:
        Row 팩토리 + 외래키 검사가 설정된 SQLite 연결 객체
    """
    conn = sqlite3.connect(str(db_path), timeout=CONNECT_TIMEOUT)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
