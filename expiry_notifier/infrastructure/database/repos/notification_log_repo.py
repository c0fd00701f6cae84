"""알림 발송 이력 Repository"""

from datetime import date
from typing import Iterable, Optional, Set

from expiry_notifier.infrastructure.database.base_repository import BaseRepository
from expiry_notifier.settings.constants import NOTIFY_STATUS_FAILED, NOTIFY_STATUS_SENT


class NotificationLogRepository(BaseRepository):
    """상품 단위 알림 이력 기록/조회"""

    def record(
        self,
        user_id: int,
        product_ids: Iterable[int],
        notified_on: date,
        success: bool,
        error: Optional[str] = None,
    ) -> int:
        """알림 1건(사용자)에 포함된 상품들의 발송 결과 기록. 반환: 기록 행 수."""
        sent_at = self._now()
        status = NOTIFY_STATUS_SENT if success else NOTIFY_STATUS_FAILED
        rows = [
            (user_id, pid, notified_on.isoformat(), sent_at, status, error)
            for pid in product_ids
        ]
        if not rows:
            return 0
        with self._connect() as conn:
            conn.executemany(
                """INSERT INTO notification_log
                   (user_id, product_id, notified_on, sent_at, status, error)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                rows,
            )
            conn.commit()
        return len(rows)

    def get_notified_product_ids(self, notified_on: date) -> Set[int]:
        """해당 날짜에 발송 성공한 상품 id 집합"""
        with self._connect() as conn:
            rows = conn.execute(
                """SELECT DISTINCT product_id FROM notification_log
                   WHERE notified_on = ? AND status = ?""",
                (notified_on.isoformat(), NOTIFY_STATUS_SENT),
            ).fetchall()
        return {r["product_id"] for r in rows}

    def count(self, user_id: Optional[int] = None) -> int:
        """기록 건수 (user_id 지정 시 해당 사용자만)"""
        with self._connect() as conn:
            if user_id is None:
                row = conn.execute("SELECT COUNT(*) FROM notification_log").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM notification_log WHERE user_id = ?",
                    (user_id,),
                ).fetchone()
        return row[0]
