"""
통합 로깅 모듈

사용법:
    from expiry_notifier.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("스캔 시작")
    logger.warning("메일 설정 없음")
    logger.error("DB 연결 실패", exc_info=True)
"""

import logging
import os
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


# 로그 디렉토리 (EXPIRY_LOG_DIR로 변경 가능)
LOG_DIR = Path(os.getenv("EXPIRY_LOG_DIR") or Path(__file__).parent.parent.parent / "logs")
LOG_DIR.mkdir(parents=True, exist_ok=True)


class SafeRotatingFileHandler(RotatingFileHandler):
    """파일 잠금에 안전한 RotatingFileHandler

    로테이션 중 PermissionError가 나면 기존 파일에 계속 쓴다.
    """

    def doRollover(self):
        try:
            super().doRollover()
        except PermissionError:
            if self.stream is None and not self.delay:
                self.stream = self._open()


# 로그 포맷
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


LOG_FILES = {
    "main": LOG_DIR / "expiry_notifier.log",    # 전체 로그
    "mail": LOG_DIR / "mail.log",               # 메일 발송
    "error": LOG_DIR / "error.log",             # 에러만
}

# 이미 설정된 로거 추적
_configured_loggers = set()


def _default_level() -> int:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logger(
    name: str,
    level: int = None,
    log_file: str = "main",
    console: bool = True,
    max_bytes: int = 20 * 1024 * 1024,  # 20MB
    backup_count: int = 10
) -> logging.Logger:
    """
    로거 설정

    Args:
        name: 로거 이름 (보통 __name__)
        level: 로그 레벨 (None이면 LOG_LEVEL 환경변수)
        log_file: 로그 파일 키 ("main", "mail", "error")
        console: 콘솔 출력 여부
        max_bytes: 파일당 최대 크기
        backup_count: 백업 파일 수

    Returns:
        설정된 Logger
    """
    logger = logging.getLogger(name)

    if name in _configured_loggers:
        return logger

    if level is None:
        level = _default_level()
    logger.setLevel(level)

    # 이미 핸들러가 있으면 스킵
    if logger.handlers:
        _configured_loggers.add(name)
        return logger

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    simple_formatter = logging.Formatter(LOG_FORMAT_SIMPLE, DATE_FORMAT)

    file_path = LOG_FILES.get(log_file, LOG_FILES["main"])
    try:
        file_handler = SafeRotatingFileHandler(
            file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"[WARN] 로그 파일 핸들러 설정 실패: {e}")

    # 에러 전용 파일 핸들러
    try:
        error_handler = SafeRotatingFileHandler(
            LOG_FILES["error"],
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setFormatter(formatter)
        error_handler.setLevel(logging.ERROR)
        logger.addHandler(error_handler)
    except OSError as e:
        print(f"[WARN] 에러 로그 파일 핸들러 설정 실패: {e}")

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(simple_formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    # 상위 로거로 전파하여 pytest caplog 등에서도 수집되도록 둔다
    logger.propagate = True

    _configured_loggers.add(name)
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    로거 가져오기 (편의 함수)

    모듈별 자동 분류:
        - *.notification.* → mail.log
        - 그 외 → expiry_notifier.log

    Args:
        name: 모듈 이름 (보통 __name__)

    Returns:
        모듈에 맞게 설정된 Logger 인스턴스
    """
    if "notification" in name:
        return setup_logger(name, log_file="mail")
    return setup_logger(name, log_file="main")


def log_with_context(
    _logger: logging.Logger,
    level: str,
    msg: str,
    exc_info: bool = False,
    **ctx: Any,
) -> None:
    """컨텍스트 키워드를 자동 포맷하는 로깅 헬퍼

    Usage:
        log_with_context(logger, "warning", "메일 발송 실패",
                        user_id=3, email="a@x.com")
        # Output: "메일 발송 실패 | user_id=3 | email=a@x.com"
    """
    if ctx:
        ctx_str = " | ".join(f"{k}={v}" for k, v in ctx.items() if v is not None)
        if ctx_str:
            msg = f"{msg} | {ctx_str}"

    log_fn = getattr(_logger, level, None) or _logger.info
    log_fn(msg, exc_info=exc_info)


def cleanup_old_logs(max_age_days: int = 30, max_file_mb: int = 50) -> None:
    """앱 시작 시 오래된 로그 백업 삭제 + 비대해진 로그 파일 잘라내기

    Args:
        max_age_days: 이 일수보다 오래된 .log.N 파일 삭제
        max_file_mb: 이 크기(MB) 초과 시 로그 파일 잘라내기 (마지막 2MB 유지)
    """
    if not LOG_DIR.exists():
        return

    cutoff = datetime.now() - timedelta(days=max_age_days)
    max_bytes_limit = max_file_mb * 1024 * 1024

    for log_file in LOG_DIR.iterdir():
        if not log_file.is_file():
            continue

        try:
            # 오래된 백업 파일(.log.1, .log.2 등)
            if log_file.suffix and log_file.suffix[1:].isdigit():
                mtime = datetime.fromtimestamp(log_file.stat().st_mtime)
                if mtime < cutoff:
                    log_file.unlink()
                    continue

            if log_file.suffix == ".log" and log_file.stat().st_size > max_bytes_limit:
                _truncate_log_file(log_file, keep_bytes=2 * 1024 * 1024)

        except OSError as e:
            print(f"[WARN] 로그 정리 실패: {log_file.name}: {e}")


def _truncate_log_file(file_path: Path, keep_bytes: int = 2 * 1024 * 1024) -> None:
    """로그 파일을 잘라서 마지막 keep_bytes만 유지"""
    size = file_path.stat().st_size
    if size <= keep_bytes:
        return

    with open(file_path, 'rb') as f:
        f.seek(size - keep_bytes)
        # 줄 경계까지 이동 (잘린 줄 방지)
        f.readline()
        tail = f.read()

    with open(file_path, 'wb') as f:
        f.write(b"[LOG TRUNCATED - previous content removed]\n")
        f.write(tail)
