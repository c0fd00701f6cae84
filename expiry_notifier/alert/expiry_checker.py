"""
유통기한 임박 상품 감지기
- 남은 일수 계산 (24시간 단위, 0 방향 절사)
- 사용자별 임박 상품 선별
- 알림 본문 생성
"""

from datetime import datetime
from typing import Collection, List, Optional

from expiry_notifier.alert.config import ALERT_FOOTER, ALERT_HEADING
from expiry_notifier.domain.models import ExpiringItem, User
from expiry_notifier.settings.constants import DEFAULT_THRESHOLD_DAYS, SECONDS_PER_DAY


def days_until_expiry(expiry: datetime, now: datetime) -> int:
    """남은 일수 = trunc((expiry - now) / 24h)

    floor가 아닌 0 방향 절사: 36시간 남음 → 1, 12시간 지남 → 0, 36시간 지남 → -1
    """
    return int((expiry - now).total_seconds() / SECONDS_PER_DAY)


class ExpiryChecker:
    """유통기한 임박 판정기

    Usage:
        checker = ExpiryChecker(threshold_days=3)
        items = checker.find_expiring(user, now)
    """

    def __init__(self, threshold_days: int = DEFAULT_THRESHOLD_DAYS) -> None:
        self.threshold_days = threshold_days

    def is_expiring(self, days_left: int) -> bool:
        """days_left <= 기준일 (이미 만료된 상품 포함)"""
        return days_left <= self.threshold_days

    def find_expiring(
        self,
        user: User,
        now: datetime,
        exclude_product_ids: Optional[Collection[int]] = None,
    ) -> List[ExpiringItem]:
        """사용자의 임박 상품 목록 (로드 순서 유지)

        Args:
            user: products가 채워진 User
            now: 실행 기준 시각 (실행 1회당 고정)
            exclude_product_ids: 제외할 상품 id (당일 발송 완료 등)
        """
        excluded = exclude_product_ids or ()
        items = []
        for product in user.products:
            if product.id in excluded:
                continue
            days_left = days_until_expiry(product.expiry, now)
            if self.is_expiring(days_left):
                items.append(ExpiringItem(
                    product_id=product.id,
                    name=product.name,
                    days_left=days_left,
                ))
        return items


def format_alert_body(items: List[ExpiringItem]) -> str:
    """알림 본문 (한 줄에 상품 1개)"""
    lines = [ALERT_HEADING]
    lines.extend(f"- {item.describe()}" for item in items)
    if ALERT_FOOTER:
        lines.append("")
        lines.append(ALERT_FOOTER)
    return "\n".join(lines) + "\n"
