"""
공유 테스트 픽스처

- tmp_path 격리 SQLite Store
- 발송 기록용 가짜 메일러
- Flask 테스트 클라이언트
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expiry_notifier.domain.exceptions import TransportError
from expiry_notifier.infrastructure.database.store import Store
from expiry_notifier.settings.app_config import load_config
from expiry_notifier.web.app import create_app


# 테스트 기준 시각
FIXED_NOW = datetime(2025, 10, 8, 9, 0, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    """send() 호출을 기록하는 가짜 메일러. fail_for 주소는 TransportError."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to_address, subject, body):
        if to_address in self.fail_for:
            raise TransportError(f"connection refused for {to_address}")
        self.sent.append({"to": to_address, "subject": subject, "body": body})


@pytest.fixture
def store(tmp_path):
    """스키마가 초기화된 테스트용 Store"""
    s = Store(tmp_path / "test_products.db")
    s.init()
    return s


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app_config(tmp_path):
    """환경변수 없이 만든 기본 설정"""
    return load_config(env={"EXPIRY_DB_PATH": str(tmp_path / "test_products.db")})


@pytest.fixture
def flask_app(store, app_config):
    """Flask 테스트 앱 (테스트용 Store 주입)"""
    app = create_app(store=store, config=app_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
