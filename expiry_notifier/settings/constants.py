"""
유통기한 알림 서비스 - 상수
- 임박 기준 / 스캔 주기 기본값
- HTTP 기본값
- DB 스키마 버전
"""

# =====================================================================
# 유통기한 판정
# =====================================================================

DEFAULT_THRESHOLD_DAYS = 3       # days_left <= 3 이면 알림 대상 (만료 포함)
SECONDS_PER_DAY = 24 * 60 * 60

# =====================================================================
# 스케줄러
# =====================================================================

DEFAULT_SCAN_INTERVAL_SECONDS = 60   # 1분마다 스캔
SCHEDULER_POLL_SECONDS = 1           # run_pending() 호출 간격

# =====================================================================
# HTTP 서버
# =====================================================================

DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 8081
DEFAULT_HTTP_THREADS = 4

# =====================================================================
# SMTP
# =====================================================================

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 30

# =====================================================================
# DB
# =====================================================================

DEFAULT_DB_NAME = "products.db"
DB_SCHEMA_VERSION = 2  # v2: notification_log 추가

# 알림 이력 상태
NOTIFY_STATUS_SENT = "sent"
NOTIFY_STATUS_FAILED = "failed"
