"""
ExpiryAlertFlow -- 유통기한 임박 알림 플로우

전체 사용자와 소유 상품을 한 번에 읽고, 임박 상품이 있는 사용자마다
메일 1통을 보낸다. 사용자별 발송 실패는 서로 영향을 주지 않는다.
"""

from datetime import datetime
from typing import Callable, Optional

from expiry_notifier.alert.config import ALERT_SUBJECT
from expiry_notifier.alert.expiry_checker import ExpiryChecker, format_alert_body
from expiry_notifier.domain.exceptions import StorageError, TransportError
from expiry_notifier.domain.models import ScanResult, UserNotification, utc_now
from expiry_notifier.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)


class ExpiryAlertFlow:
    """유통기한 알림 플로우

    Usage:
        flow = ExpiryAlertFlow(store=store, notifier=EmailNotifier(config.smtp))
        result = flow.run()
    """

    def __init__(
        self,
        store,
        notifier,
        checker: Optional[ExpiryChecker] = None,
        notify_once_per_day: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            store: Store (list_users_with_products, notification_log)
            notifier: send(to_address, subject, body)를 제공하는 발송기
            checker: 임박 판정기 (기본: 3일 기준)
            notify_once_per_day: True면 당일 발송 완료된 상품은 다시 알리지 않음
            clock: 현재 시각 함수 (테스트 주입용)
        """
        self.store = store
        self.notifier = notifier
        self.checker = checker or ExpiryChecker()
        self.notify_once_per_day = notify_once_per_day
        self.clock = clock

    def run(self, now: Optional[datetime] = None) -> ScanResult:
        """스캔 1회 실행

        Args:
            now: 기준 시각. None이면 clock()을 1회 호출해 고정한다.

        Returns:
            ScanResult (DB 읽기 실패 시 aborted=True, 발송 0건)
        """
        now = now or self.clock()
        result = ScanResult(started_at=now)
        logger.info(f"[Expiry] 유통기한 점검 시작: now={now.isoformat()}")

        try:
            users = self.store.list_users_with_products()
            already_notified = set()
            if self.notify_once_per_day:
                already_notified = self.store.notification_log.get_notified_product_ids(now.date())
        except StorageError as e:
            logger.error(f"[Expiry] 사용자/상품 조회 실패, 이번 실행 중단: {e}")
            result.aborted = True
            result.error = str(e)
            return result

        result.users_scanned = len(users)

        for user in users:
            items = self.checker.find_expiring(user, now, exclude_product_ids=already_notified)
            if not items:
                continue

            notification = UserNotification(user_id=user.id, email=user.email, items=items)
            log_with_context(
                logger, "info", "[Expiry] 알림 발송 준비",
                user_id=user.id, email=user.email,
                items=", ".join(item.describe() for item in items),
            )

            try:
                self.notifier.send(user.email, ALERT_SUBJECT, format_alert_body(items))
                notification.success = True
                logger.info(f"[Expiry] 알림 발송 성공: {user.email}")
            except TransportError as e:
                notification.error = str(e)
                logger.error(f"[Expiry] 알림 발송 실패: {user.email}: {e}")

            result.notifications.append(notification)
            self._record(notification, now)

        logger.info(
            f"[Expiry] 유통기한 점검 완료:"
            f" users={result.users_scanned},"
            f" notified={result.notified_count},"
            f" failed={result.failed_count}"
        )
        return result

    def _record(self, notification: UserNotification, now: datetime) -> None:
        """발송 결과를 알림 이력에 기록. 기록 실패는 다른 사용자 발송에 영향 없음."""
        try:
            self.store.notification_log.record(
                user_id=notification.user_id,
                product_ids=[item.product_id for item in notification.items],
                notified_on=now.date(),
                success=notification.success,
                error=notification.error,
            )
        except StorageError as e:
            logger.warning(f"[Expiry] 알림 이력 기록 실패: user_id={notification.user_id}: {e}")
