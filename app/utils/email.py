"""이메일 발송 유틸리티 — SMTP (aiosmtplib).

SMTP 설정은 config.py의 SMTP_* 환경 변수로 관리.
SMTP_HOST가 비어 있으면 발송을 건너뛰고 경고만 남긴다.
"""

import logging
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from app.config import settings
from app.utils.exceptions import ServiceUnavailableError

logger: logging.Logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    """발송 결과 — 수락/거부된 수신자 목록과 서버 응답."""

    accepted: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
    response: str = ""


def is_configured() -> bool:
    return bool(settings.SMTP_HOST and settings.SMTP_FROM_EMAIL)


async def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
) -> EmailResult:
    """이메일 발송.

    Args:
        to: 수신자 이메일 주소
        subject: 제목
        html: HTML 본문
        text: 플레인텍스트 본문

    Returns:
        EmailResult: 수락/거부 목록

    Raises:
        ServiceUnavailableError: SMTP 서버 오류
    """
    if not is_configured():
        logger.warning("SMTP is not configured; skipped email to %s (%s)", to, subject)
        return EmailResult(rejected=[to], response="smtp not configured")

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to

    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    try:
        errors, response = await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER or None,
            password=settings.SMTP_PASSWORD or None,
            start_tls=True,
        )
    except aiosmtplib.SMTPException as exc:
        logger.exception("SMTP send failed: to=%s subject=%s", to, subject)
        raise ServiceUnavailableError("이메일 발송에 실패했습니다.") from exc

    rejected: list[str] = list(errors.keys())
    accepted: list[str] = [to] if to not in errors else []
    return EmailResult(accepted=accepted, rejected=rejected, response=response)
