"""
통합 설정 진입점

환경변수(및 프로젝트 루트의 .env)에서 설정을 한 번 읽어
AppConfig로 묶는다. 비밀값(SMTP 비밀번호 등)은 코드에 두지 않는다.

Usage:
    from expiry_notifier.settings.app_config import load_config

    config = load_config()
    config.smtp.host, config.http_port, config.scan_interval_seconds
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from expiry_notifier.settings.constants import (
    DEFAULT_DB_NAME,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_HTTP_THREADS,
    DEFAULT_SCAN_INTERVAL_SECONDS,
    DEFAULT_SMTP_HOST,
    DEFAULT_SMTP_PORT,
    DEFAULT_SMTP_TIMEOUT,
    DEFAULT_THRESHOLD_DAYS,
)

# ── 프로젝트 경로 ──
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
ENV_FILE = PROJECT_ROOT / ".env"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class SmtpConfig:
    """SMTP 발송 설정"""
    host: str = DEFAULT_SMTP_HOST
    port: int = DEFAULT_SMTP_PORT
    user: str = ""
    password: str = ""
    from_email: str = ""
    use_tls: bool = True
    timeout: int = DEFAULT_SMTP_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and self.password)


@dataclass
class AppConfig:
    """애플리케이션 설정"""
    db_path: Path = DATA_DIR / DEFAULT_DB_NAME
    http_host: str = DEFAULT_HTTP_HOST
    http_port: int = DEFAULT_HTTP_PORT
    http_threads: int = DEFAULT_HTTP_THREADS
    scan_interval_seconds: int = DEFAULT_SCAN_INTERVAL_SECONDS
    threshold_days: int = DEFAULT_THRESHOLD_DAYS
    notify_once_per_day: bool = False
    smtp: SmtpConfig = field(default_factory=SmtpConfig)


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """환경변수에서 AppConfig 생성

    Args:
        env: 환경변수 매핑 (테스트용). None이면 .env 로드 후 os.environ 사용.

    Returns:
        AppConfig

    Raises:
        ValueError: 숫자 설정값이 올바르지 않을 때
    """
    if env is None:
        load_dotenv(ENV_FILE)
        env = os.environ

    smtp_user = env.get("SMTP_USER", "")
    smtp = SmtpConfig(
        host=env.get("SMTP_HOST") or DEFAULT_SMTP_HOST,
        port=_get_int(env, "SMTP_PORT", DEFAULT_SMTP_PORT),
        user=smtp_user,
        password=env.get("SMTP_PASSWORD", ""),
        from_email=env.get("SMTP_FROM_EMAIL") or smtp_user,
        use_tls=_get_bool(env, "SMTP_USE_TLS", True),
        timeout=_get_int(env, "SMTP_TIMEOUT", DEFAULT_SMTP_TIMEOUT),
    )

    db_path = env.get("EXPIRY_DB_PATH")
    config = AppConfig(
        db_path=Path(db_path) if db_path else DATA_DIR / DEFAULT_DB_NAME,
        http_host=env.get("EXPIRY_HTTP_HOST") or DEFAULT_HTTP_HOST,
        http_port=_get_int(env, "EXPIRY_HTTP_PORT", DEFAULT_HTTP_PORT),
        http_threads=_get_int(env, "EXPIRY_HTTP_THREADS", DEFAULT_HTTP_THREADS),
        scan_interval_seconds=_get_int(
            env, "EXPIRY_SCAN_INTERVAL_SECONDS", DEFAULT_SCAN_INTERVAL_SECONDS
        ),
        threshold_days=_get_int(env, "EXPIRY_THRESHOLD_DAYS", DEFAULT_THRESHOLD_DAYS),
        notify_once_per_day=_get_bool(env, "NOTIFY_ONCE_PER_DAY", False),
        smtp=smtp,
    )

    if config.scan_interval_seconds <= 0:
        raise ValueError("EXPIRY_SCAN_INTERVAL_SECONDS must be positive")

    return config
