"""설정 로드 테스트"""

from pathlib import Path

import pytest

from expiry_notifier.settings.app_config import DATA_DIR, load_config
from expiry_notifier.settings.constants import (
    DEFAULT_HTTP_PORT,
    DEFAULT_SCAN_INTERVAL_SECONDS,
    DEFAULT_SMTP_HOST,
    DEFAULT_THRESHOLD_DAYS,
)


class TestLoadConfig:

    def test_defaults(self):
        config = load_config(env={})
        assert config.db_path == DATA_DIR / "products.db"
        assert config.http_port == DEFAULT_HTTP_PORT
        assert config.scan_interval_seconds == DEFAULT_SCAN_INTERVAL_SECONDS
        assert config.threshold_days == DEFAULT_THRESHOLD_DAYS == 3
        assert config.notify_once_per_day is False
        assert config.smtp.host == DEFAULT_SMTP_HOST
        assert config.smtp.use_tls is True
        assert not config.smtp.is_configured

    def test_overrides(self, tmp_path):
        config = load_config(env={
            "EXPIRY_DB_PATH": str(tmp_path / "x.db"),
            "EXPIRY_HTTP_PORT": "9000",
            "EXPIRY_SCAN_INTERVAL_SECONDS": "300",
            "EXPIRY_THRESHOLD_DAYS": "5",
            "NOTIFY_ONCE_PER_DAY": "true",
            "SMTP_HOST": "mail.local",
            "SMTP_PORT": "25",
            "SMTP_USER": "bot@local",
            "SMTP_PASSWORD": "pw",
            "SMTP_USE_TLS": "no",
        })
        assert config.db_path == Path(tmp_path / "x.db")
        assert config.http_port == 9000
        assert config.scan_interval_seconds == 300
        assert config.threshold_days == 5
        assert config.notify_once_per_day is True
        assert config.smtp.port == 25
        assert config.smtp.use_tls is False
        assert config.smtp.is_configured

    def test_from_email_defaults_to_user(self):
        config = load_config(env={"SMTP_USER": "bot@local"})
        assert config.smtp.from_email == "bot@local"

        config = load_config(env={"SMTP_USER": "bot@local", "SMTP_FROM_EMAIL": "noreply@local"})
        assert config.smtp.from_email == "noreply@local"

    def test_invalid_number(self):
        with pytest.raises(ValueError, match="EXPIRY_HTTP_PORT"):
            load_config(env={"EXPIRY_HTTP_PORT": "eighty"})

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_interval(self, value):
        with pytest.raises(ValueError):
            load_config(env={"EXPIRY_SCAN_INTERVAL_SECONDS": value})
