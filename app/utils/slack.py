"""슬랙 알림 유틸리티 — 웹훅 POST (httpx).

Slack notification helper. Posts ``{channel, text}`` to an incoming
webhook with a bearer token. SLACK_WEBHOOK_URL가 비어 있으면 생략한다.
"""

import logging

import httpx

from app.config import settings
from app.utils.exceptions import ServiceUnavailableError

logger: logging.Logger = logging.getLogger(__name__)

_TIMEOUT: float = 10.0


async def send_slack(
    text: str,
    webhook: str | None = None,
    channel: str | None = None,
    token: str | None = None,
) -> dict[str, str]:
    """슬랙 채널로 메시지를 보냅니다.

    Args:
        text: 메시지 본문 (Message text)
        webhook: 웹훅 URL, 기본값은 설정값 (Webhook URL, defaults to settings)
        channel: 채널 이름 (Channel name)
        token: 베어러 토큰 (Bearer token)

    Returns:
        dict[str, str]: {"result": 응답 본문} (Webhook response body)

    Raises:
        ServiceUnavailableError: 웹훅 호출 실패 (Webhook call failed)
    """
    webhook = webhook or settings.SLACK_WEBHOOK_URL
    if not webhook:
        logger.warning("Slack webhook is not configured; skipped message")
        return {"result": "skipped"}

    headers: dict[str, str] = {"Content-Type": "application/json"}
    bearer: str = token if token is not None else settings.SLACK_TOKEN
    if bearer:
        headers["Authorization"] = f"Bearer {bearer}"

    payload: dict[str, str] = {"text": text}
    if channel or settings.SLACK_CHANNEL:
        payload["channel"] = channel or settings.SLACK_CHANNEL

    try:
        async with httpx.AsyncClient(timeout=_TIMEOUT) as client:
            response: httpx.Response = await client.post(webhook, json=payload, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.exception("Slack webhook call failed")
        raise ServiceUnavailableError("슬랙 알림 전송에 실패했습니다.") from exc

    return {"result": response.text}
