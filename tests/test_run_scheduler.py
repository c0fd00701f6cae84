"""run_scheduler 진입점 테스트 (락 파일, --now 1회 실행)"""

import os
from datetime import timedelta

import pytest

import run_scheduler
from expiry_notifier.domain.exceptions import StorageError
from expiry_notifier.domain.models import utc_now

from .conftest import RecordingNotifier


class TestLockFile:

    def test_acquire_and_release(self, tmp_path):
        lock = tmp_path / "scheduler.lock"
        assert run_scheduler.acquire_lock(lock) is True
        assert lock.read_text() == str(os.getpid())

        run_scheduler.release_lock(lock)
        assert not lock.exists()

    def test_refuses_when_owner_alive(self, tmp_path):
        lock = tmp_path / "scheduler.lock"
        lock.write_text(str(os.getpid()))
        assert run_scheduler.acquire_lock(lock) is False
        assert lock.exists()

    def test_stale_lock_is_replaced(self, tmp_path, monkeypatch):
        lock = tmp_path / "scheduler.lock"
        lock.write_text("999999")
        monkeypatch.setattr(run_scheduler, "_is_pid_running", lambda pid: False)

        assert run_scheduler.acquire_lock(lock) is True
        assert lock.read_text() == str(os.getpid())

    def test_garbage_lock_is_replaced(self, tmp_path):
        lock = tmp_path / "scheduler.lock"
        lock.write_text("not-a-pid")
        assert run_scheduler.acquire_lock(lock) is True

    def test_release_missing_lock(self, tmp_path):
        run_scheduler.release_lock(tmp_path / "none.lock")


class TestMainNow:

    @pytest.fixture(autouse=True)
    def _no_log_cleanup(self, monkeypatch):
        monkeypatch.setattr(run_scheduler, "cleanup_old_logs", lambda **kwargs: None)

    def test_now_runs_single_scan(self, monkeypatch, app_config, store):
        user = store.create_user("A", "a@x.com")
        store.create_product("Milk", utc_now() + timedelta(days=1), user.id)
        notifier = RecordingNotifier()
        monkeypatch.setattr(run_scheduler, "load_config", lambda: app_config)
        monkeypatch.setattr(run_scheduler, "EmailNotifier", lambda smtp: notifier)

        assert run_scheduler.main(["--now"]) == 0
        assert [m["to"] for m in notifier.sent] == ["a@x.com"]

    def test_invalid_config_exits_nonzero(self, monkeypatch):
        def broken():
            raise ValueError("EXPIRY_HTTP_PORT must be an integer")

        monkeypatch.setattr(run_scheduler, "load_config", broken)
        assert run_scheduler.main(["--now"]) == 1

    def test_storage_failure_exits_nonzero(self, monkeypatch, app_config):
        class BrokenStore:
            def __init__(self, db_path):
                pass

            def init(self):
                raise StorageError("cannot open")

        monkeypatch.setattr(run_scheduler, "load_config", lambda: app_config)
        monkeypatch.setattr(run_scheduler, "Store", BrokenStore)
        assert run_scheduler.main(["--now"]) == 1

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            run_scheduler.main(["--now", "--serve-only"])
