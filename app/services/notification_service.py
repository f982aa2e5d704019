"""알림 서비스 — 이메일/슬랙 발송.

Notification Service — Outbound email (aiosmtplib) and Slack webhook
(httpx) messages. Removal notices are scheduled as background tasks so
the HTTP response never waits on them.
"""

import logging

from app.config import settings
from app.utils.email import EmailResult, send_email
from app.utils.exceptions import ServiceUnavailableError
from app.utils.slack import send_slack

# 이메일 제목 접두사 — Subject prefix
_SUBJECT_PREFIX: str = "[SAMPLE]"


class NotificationService:
    """알림 서비스.

    Notification service for validation mails and member removal notices.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger: logging.Logger = logger

    async def send_validation_email(self, email: str, username: str, link: str) -> EmailResult:
        """이메일 인증 링크를 발송합니다.

        Args:
            email: 수신자 이메일 (Recipient)
            username: 수신자 이름 (Recipient name)
            link: 인증 링크 (Validation link)

        Returns:
            EmailResult: 수락/거부 목록 (Accepted / rejected recipients)
        """
        html: str = (
            f"Hi {username},<br/>"
            f"We just need to verify your email address before you can access {settings.APP_NAME}<br/><br/>"
            f"Verify your email address {link}<br/><br/>"
            "Thanks!"
        )
        result: EmailResult = await send_email(email, f"{_SUBJECT_PREFIX} Confirm your email address", html)
        self.logger.info("Validation email to %s: accepted=%s rejected=%s", email, result.accepted, result.rejected)
        return result

    async def notify_member_removed(
        self,
        member_id: int,
        member_name: str,
        actor_id: int,
        actor_name: str,
    ) -> None:
        """멤버 삭제 알림을 이메일과 슬랙으로 보냅니다.

        Send the removal notice by email and Slack. Runs after the response
        has been sent; failures are logged and never reach the client.
        """
        text: str = f"{member_name}({member_id}) member removed by {actor_name}({actor_id})"

        if settings.NOTIFY_EMAIL:
            try:
                await send_email(settings.NOTIFY_EMAIL, f"{_SUBJECT_PREFIX} Member removed", text)
            except ServiceUnavailableError:
                self.logger.exception("Member removal email failed: %s", text)

        try:
            await send_slack(f"{_SUBJECT_PREFIX}\nMember removed\n{text}")
        except ServiceUnavailableError:
            self.logger.exception("Member removal Slack message failed: %s", text)


notification_service: NotificationService = NotificationService(logging.getLogger("app.services.notification"))
