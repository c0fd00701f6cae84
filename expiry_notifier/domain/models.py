"""
도메인 값 객체

사용자, 상품, 알림 결과 등 비즈니스 로직에서 쓰는 데이터 구조.
I/O 의존성 없이 순수 데이터 구조만 포함한다.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# 초 소수부 (나노초 등 6자리 초과 표기 포함)
_FRACTION_RE = re.compile(r"(:\d{2})\.(\d+)")


def utc_now() -> datetime:
    """현재 시각 (UTC, timezone-aware)"""
    return datetime.now(timezone.utc)


def _normalize_fraction(match: "re.Match") -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 문자열을 UTC aware datetime으로 변환

    'Z' 접미사와 오프셋 표기를 모두 허용한다.
    오프셋이 없으면 UTC로 간주한다.
    초 소수부는 마이크로초(6자리)로 맞춘다. 7자리 이상은 버린다.

    Raises:
        ValueError: 형식이 올바르지 않을 때
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty ISO-8601 string")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(_normalize_fraction, text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as e:
        # UTC 변환 시 1~9999년 범위를 벗어남
        raise ValueError(f"timestamp out of range: {value}") from e


def format_timestamp(value: datetime) -> str:
    """UTC ISO-8601 문자열 (DB 저장 및 JSON 응답용)"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


@dataclass
class Product:
    """사용자 소유 상품"""
    id: int
    name: str
    expiry: datetime
    user_id: int
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "expiry": format_timestamp(self.expiry),
            "user_id": self.user_id,
            "created_at": format_timestamp(self.created_at),
        }


@dataclass
class User:
    """상품 소유자 (알림 수신자)"""
    id: int
    name: str
    email: str
    products: List[Product] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "products": [p.to_dict() for p in self.products],
        }


@dataclass
class ExpiringItem:
    """임박 판정된 상품 1건"""
    product_id: int
    name: str
    days_left: int

    def describe(self) -> str:
        if self.days_left < 0:
            return f"{self.name} ({-self.days_left}일 지남)"
        return f"{self.name} ({self.days_left}일 남음)"


@dataclass
class UserNotification:
    """사용자별 알림 1건의 결과"""
    user_id: int
    email: str
    items: List[ExpiringItem] = field(default_factory=list)
    success: bool = False
    error: Optional[str] = None


@dataclass
class ScanResult:
    """스캔 1회 실행 결과"""
    started_at: datetime
    users_scanned: int = 0
    notifications: List[UserNotification] = field(default_factory=list)
    aborted: bool = False
    error: Optional[str] = None

    @property
    def notified_count(self) -> int:
        return sum(1 for n in self.notifications if n.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for n in self.notifications if not n.success)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": format_timestamp(self.started_at),
            "users_scanned": self.users_scanned,
            "notified": self.notified_count,
            "failed": self.failed_count,
            "aborted": self.aborted,
            "error": self.error,
        }
