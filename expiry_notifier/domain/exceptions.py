"""
도메인 예외

API 응답과 작업 로그에서 일관되게 다루기 위해
모든 예외는 ExpiryNotifierError를 상속한다.
"""

from typing import Any, Dict, Optional


class ExpiryNotifierError(Exception):
    """모든 애플리케이션 예외의 기반 클래스"""

    http_status = 500
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """API 응답용 dict 변환"""
        result = {"error": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(ExpiryNotifierError):
    """요청 본문이 올바르지 않음 (400)"""

    http_status = 400
    default_code = "BAD_REQUEST"


class NotFoundError(ExpiryNotifierError):
    """참조한 사용자가 없음 (404)"""

    http_status = 404
    default_code = "NOT_FOUND"


class StorageError(ExpiryNotifierError):
    """DB 계층 실패. 현재 요청/작업을 중단시킨다."""

    http_status = 500
    default_code = "STORAGE_ERROR"


class TransportError(ExpiryNotifierError):
    """메일 발송 실패. 알림 1건에 한정되며 재시도하지 않는다."""

    http_status = 502
    default_code = "TRANSPORT_ERROR"
