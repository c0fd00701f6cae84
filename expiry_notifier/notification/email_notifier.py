"""
이메일 알림 모듈
- SMTP(STARTTLS) 평문 메일 발송
- 재시도 없음. 실패는 TransportError로 호출자에게 전달
"""

import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr

from expiry_notifier.domain.exceptions import TransportError
from expiry_notifier.settings.app_config import SmtpConfig
from expiry_notifier.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FROM_NAME = "유통기한 알림"


class EmailNotifier:
    """SMTP 이메일 전송기"""

    def __init__(self, config: SmtpConfig, from_name: str = DEFAULT_FROM_NAME) -> None:
        """
        Args:
            config: SMTP 설정 (호스트, 포트, 계정, 비밀번호)
            from_name: 발신자 표시 이름
        """
        self.config = config
        self.from_name = from_name

        if not self.is_configured():
            logger.warning("[Mail] SMTP 설정이 없습니다. SMTP_USER/SMTP_PASSWORD를 확인하세요.")

    def is_configured(self) -> bool:
        return self.config.is_configured

    def _build_message(self, to_address: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.config.from_email or self.config.user))
        msg["To"] = to_address
        return msg

    def send(self, to_address: str, subject: str, body: str) -> None:
        """
        메일 1통 발송

        Args:
            to_address: 수신 주소
            subject: 제목
            body: 평문 본문

        Raises:
            TransportError: 설정 누락, 연결/인증/발송 실패
        """
        if not self.is_configured():
            raise TransportError("SMTP is not configured", details={"to": to_address})

        msg = self._build_message(to_address, subject, body)
        try:
            with smtplib.SMTP(
                self.config.host, self.config.port, timeout=self.config.timeout
            ) as server:
                if self.config.use_tls:
                    server.starttls()
                server.login(self.config.user, self.config.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"메일 발송 실패: {e}", details={"to": to_address}) from e

        logger.info(f"[Mail] 발송 완료: {to_address}")
