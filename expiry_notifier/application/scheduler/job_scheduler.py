"""
ExpiryJobScheduler -- 고정 주기 작업 실행기

schedule 라이브러리로 주기 작업을 등록하고, 백그라운드 스레드에서
run_pending()을 돌린다. 이전 실행이 끝나지 않았으면 이번 실행은 건너뛴다
(single-flight).
"""

import threading
from typing import Any, Callable, Optional

import schedule

from expiry_notifier.settings.constants import SCHEDULER_POLL_SECONDS
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)


class ExpiryJobScheduler:
    """주기 작업 실행기

    Usage:
        scheduler = ExpiryJobScheduler(task_fn=flow.run, interval_seconds=60)
        scheduler.register()
        scheduler.start()       # 백그라운드 스레드
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        task_fn: Callable[[], Any],
        interval_seconds: int,
        task_name: str = "expiry_scan",
        scheduler: Optional[schedule.Scheduler] = None,
        poll_seconds: float = SCHEDULER_POLL_SECONDS,
    ):
        """
        Args:
            task_fn: 실행할 작업 (인자 없음)
            interval_seconds: 실행 주기 (초)
            task_name: 작업 이름 (로깅용)
            scheduler: schedule.Scheduler (테스트 주입용, 기본: 새 인스턴스)
            poll_seconds: run_pending() 호출 간격
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.task_fn = task_fn
        self.interval_seconds = interval_seconds
        self.task_name = task_name
        self.scheduler = scheduler or schedule.Scheduler()
        self.poll_seconds = poll_seconds
        self._running = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.job: Optional[schedule.Job] = None

    def register(self) -> schedule.Job:
        """주기 작업 등록"""
        self.job = self.scheduler.every(self.interval_seconds).seconds.do(self.run_job)
        logger.info(f"[Schedule] {self.task_name}: every {self.interval_seconds}s")
        return self.job

    def run_job(self) -> bool:
        """작업 1회 실행 (single-flight)

        Returns:
            실행했으면 True, 이전 실행이 진행 중이라 건너뛰었으면 False
        """
        if not self._running.acquire(blocking=False):
            logger.warning(f"[{self.task_name}] 이전 실행이 진행 중이라 건너뜀")
            return False
        try:
            self.task_fn()
        except Exception as e:
            # 다음 주기에 다시 실행
            logger.error(f"[{self.task_name}] 실패: {e}", exc_info=True)
        finally:
            self._running.release()
        return True

    @property
    def is_running(self) -> bool:
        return self._running.locked()

    def run_forever(self) -> None:
        """현재 스레드에서 스케줄 루프 실행 (stop() 호출 시 종료)"""
        logger.info(f"[Scheduler] Next run: {self.scheduler.next_run}")
        while not self._stop_event.is_set():
            self.scheduler.run_pending()
            self._stop_event.wait(self.poll_seconds)
        logger.info("[Scheduler] 종료")

    def start(self) -> threading.Thread:
        """백그라운드 스레드에서 스케줄 루프 시작"""
        if self.job is None:
            self.register()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="expiry-scheduler", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        """스케줄 루프 종료"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
