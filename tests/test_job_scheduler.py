"""ExpiryJobScheduler 테스트"""

import threading
from unittest.mock import MagicMock

import pytest
import schedule

from expiry_notifier.application.scheduler.job_scheduler import ExpiryJobScheduler


class TestRegister:

    def test_register_interval(self):
        sched = schedule.Scheduler()
        runner = ExpiryJobScheduler(task_fn=MagicMock(), interval_seconds=60, scheduler=sched)

        job = runner.register()

        assert job in sched.jobs
        assert job.interval == 60
        assert job.unit == "seconds"

    @pytest.mark.parametrize("interval", [0, -5])
    def test_invalid_interval(self, interval):
        with pytest.raises(ValueError):
            ExpiryJobScheduler(task_fn=MagicMock(), interval_seconds=interval)

    def test_run_all_invokes_task(self):
        sched = schedule.Scheduler()
        task = MagicMock()
        runner = ExpiryJobScheduler(task_fn=task, interval_seconds=60, scheduler=sched)
        runner.register()

        sched.run_all()

        task.assert_called_once_with()


class TestRunJob:

    def test_run_job_executes(self):
        task = MagicMock()
        runner = ExpiryJobScheduler(task_fn=task, interval_seconds=1)
        assert runner.run_job() is True
        task.assert_called_once()
        assert not runner.is_running

    def test_exception_does_not_propagate(self):
        task = MagicMock(side_effect=RuntimeError("boom"))
        runner = ExpiryJobScheduler(task_fn=task, interval_seconds=1)

        assert runner.run_job() is True
        # 다음 실행 가능
        assert runner.run_job() is True
        assert task.call_count == 2

    def test_overlapping_run_is_skipped(self):
        """실행 중에 다음 주기가 오면 건너뜀"""
        entered = threading.Event()
        release = threading.Event()
        calls = []

        def slow_task():
            calls.append(1)
            entered.set()
            release.wait(5)

        runner = ExpiryJobScheduler(task_fn=slow_task, interval_seconds=1)
        worker = threading.Thread(target=runner.run_job)
        worker.start()
        assert entered.wait(5)

        assert runner.is_running
        assert runner.run_job() is False

        release.set()
        worker.join(5)
        assert len(calls) == 1
        assert not runner.is_running


class TestThread:

    def test_start_and_stop(self):
        ran = threading.Event()
        sched = schedule.Scheduler()
        runner = ExpiryJobScheduler(
            task_fn=ran.set, interval_seconds=1, scheduler=sched, poll_seconds=0.05,
        )

        thread = runner.start()
        assert thread.daemon
        assert thread.name == "expiry-scheduler"
        assert runner.job is not None

        assert ran.wait(5)
        runner.stop(timeout=5)
        assert not thread.is_alive()
