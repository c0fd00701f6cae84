"""
서버 + 스케줄러 실행기

- HTTP API (waitress) 와 유통기한 점검 작업을 한 프로세스에서 실행
- 유통기한 점검: EXPIRY_SCAN_INTERVAL_SECONDS 주기 (기본 60초)
- 중복 실행 방지 (락 파일)

Usage:
    python run_scheduler.py                   # API + 스케줄러
    python run_scheduler.py --now             # 유통기한 점검 1회 즉시 실행
    python run_scheduler.py --serve-only      # API만
    python run_scheduler.py --scheduler-only  # 스케줄러만
"""

import argparse
import atexit
import os
import sys
from pathlib import Path

from expiry_notifier.alert.expiry_checker import ExpiryChecker
from expiry_notifier.application.scheduler.job_scheduler import ExpiryJobScheduler
from expiry_notifier.application.use_cases.expiry_alert_flow import ExpiryAlertFlow
from expiry_notifier.domain.exceptions import StorageError
from expiry_notifier.infrastructure.database.store import Store
from expiry_notifier.notification.email_notifier import EmailNotifier
from expiry_notifier.settings.app_config import AppConfig, DATA_DIR, load_config
from expiry_notifier.utils.logger import cleanup_old_logs, get_logger

logger = get_logger(__name__)

# 락 파일 경로
LOCK_FILE = DATA_DIR / "scheduler.lock"


def _is_pid_running(pid: int) -> bool:
    """PID가 실행 중인지 확인"""
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def acquire_lock(lock_file: Path = LOCK_FILE) -> bool:
    """락 파일 생성 (중복 실행 방지)"""
    lock_file.parent.mkdir(parents=True, exist_ok=True)

    if lock_file.exists():
        try:
            old_pid = int(lock_file.read_text().strip())
        except ValueError:
            old_pid = None

        if old_pid and _is_pid_running(old_pid):
            logger.error(f"[Scheduler] 이미 실행 중입니다 (PID: {old_pid})")
            return False
        logger.warning("[Scheduler] 오래된 락 파일 발견. 삭제합니다.")
        lock_file.unlink()

    lock_file.write_text(str(os.getpid()))
    return True


def release_lock(lock_file: Path = LOCK_FILE) -> None:
    """락 파일 삭제"""
    if lock_file.exists():
        lock_file.unlink()
        logger.info("[Scheduler] 락 파일 삭제됨")


def build_flow(store: Store, config: AppConfig) -> ExpiryAlertFlow:
    """설정으로 ExpiryAlertFlow 구성"""
    return ExpiryAlertFlow(
        store=store,
        notifier=EmailNotifier(config.smtp),
        checker=ExpiryChecker(threshold_days=config.threshold_days),
        notify_once_per_day=config.notify_once_per_day,
    )


def serve(store: Store, config: AppConfig) -> None:
    """waitress로 API 서버 실행 (블로킹)"""
    from waitress import serve as waitress_serve

    from expiry_notifier.web.app import create_app

    app = create_app(store=store, config=config)
    logger.info(f"[API] Server started on {config.http_host}:{config.http_port}")
    waitress_serve(app, host=config.http_host, port=config.http_port, threads=config.http_threads)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Expiry notifier server + scheduler")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--now", "-n", action="store_true",
                      help="Run one expiry scan immediately and exit")
    mode.add_argument("--serve-only", action="store_true",
                      help="Run the HTTP API without the scheduler")
    mode.add_argument("--scheduler-only", action="store_true",
                      help="Run the scheduler without the HTTP API")
    args = parser.parse_args(argv)

    cleanup_old_logs(max_age_days=30, max_file_mb=50)

    # 시작 단계 실패는 프로세스 종료
    try:
        config = load_config()
        store = Store(config.db_path)
        store.init()
    except (ValueError, StorageError) as e:
        logger.error(f"[Startup] 초기화 실패: {e}")
        return 1

    if args.now:
        result = build_flow(store, config).run()
        logger.info(f"[Expiry] 결과: {result.to_dict()}")
        return 1 if result.aborted else 0

    if args.serve_only:
        serve(store, config)
        return 0

    if not acquire_lock():
        return 1
    atexit.register(release_lock)

    flow = build_flow(store, config)
    try:
        scheduler = ExpiryJobScheduler(
            task_fn=flow.run,
            interval_seconds=config.scan_interval_seconds,
        )
        scheduler.register()
    except ValueError as e:
        logger.error(f"[Startup] 작업 등록 실패: {e}")
        return 1

    logger.info("=" * 60)
    logger.info(f"[Scheduler] PID: {os.getpid()}")
    logger.info("[Scheduler] Press Ctrl+C to stop")
    logger.info("=" * 60)

    try:
        if args.scheduler_only:
            scheduler.run_forever()
        else:
            scheduler.start()
            serve(store, config)
    except KeyboardInterrupt:
        logger.info("[Scheduler] 중단됨")
    finally:
        scheduler.stop(timeout=5)
    return 0


if __name__ == "__main__":
    sys.exit(main())
