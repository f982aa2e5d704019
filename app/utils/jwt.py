"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.
Three token classes are issued, each signed with its own secret:

    access:  {"id": 1, "username": "...", "role": "admin", "type": "access"}  — short TTL
    refresh: {"id": 1, "jti": "<hex>", "type": "refresh"}                     — long TTL, stored per member
    email:   {"id": 1, "type": "email"}                                        — email validation link
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from app.config import settings
from app.utils.exceptions import UnauthorizedError

ACCESS: str = "access"
REFRESH: str = "refresh"
EMAIL: str = "email"


def _secret_for(token_type: str) -> str:
    return {
        ACCESS: settings.JWT_ACCESS_SECRET,
        REFRESH: settings.JWT_REFRESH_SECRET,
        EMAIL: settings.JWT_EMAIL_SECRET,
    }[token_type]


def _encode(data: dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    to_encode: dict[str, Any] = data.copy()
    # 만료 시간 설정 — 현재 UTC 시간 + 토큰별 유효 기간
    expire: datetime = datetime.now(timezone.utc) + lifetime
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a short-lived access token.

    Args:
        data: 페이로드 데이터 — {"id", "username", "role"} (Payload data)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    return _encode(data, ACCESS, timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES))


def create_refresh_token(member_id: int) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a long-lived refresh token. The random ``jti`` makes every
    issued token distinct so the stored value identifies one login.

    Args:
        member_id: 멤버 ID (Member id)

    Returns:
        str: 인코딩된 리프레시 토큰 (Encoded refresh token)
    """
    return _encode(
        {"id": member_id, "jti": uuid.uuid4().hex},
        REFRESH,
        timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
    )


def create_email_token(member_id: int) -> str:
    """이메일 인증용 토큰을 생성합니다.

    Generate an email validation token embedding only the member id.
    """
    return _encode({"id": member_id}, EMAIL, timedelta(minutes=settings.JWT_EMAIL_EXPIRE_MINUTES))


def decode_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a token of the given class.
    Raises jwt.ExpiredSignatureError if the token has expired,
    and jwt.InvalidTokenError for any other validation failure,
    including a token of another class.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)
        token_type: 기대하는 토큰 종류 (Expected token class)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 (Decoded payload)

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    payload: dict[str, Any] = jwt.decode(
        token, _secret_for(token_type), algorithms=[settings.JWT_ALGORITHM]
    )
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError("unexpected token type")
    return payload


def jwt_error_message(exc: jwt.PyJWTError) -> str:
    """PyJWT 예외를 사용자 메시지로 변환합니다.

    Map a PyJWT exception to a localized message.
    """
    if isinstance(exc, jwt.ExpiredSignatureError):
        return "jwt 토큰이 만료되었습니다."
    if isinstance(exc, jwt.InvalidSignatureError):
        return "jwt 토큰의 서명이 유효하지 않습니다."
    if isinstance(exc, jwt.DecodeError):
        return "jwt 토큰의 형식이 올바르지 않습니다."
    return "유효하지 않은 jwt 토큰입니다."


def verify_token(token: str, token_type: str = ACCESS) -> dict[str, Any]:
    """토큰을 검증하고 실패 시 401 예외로 변환합니다.

    Same as decode_token but converts every PyJWT failure into
    an UnauthorizedError carrying the localized message.
    """
    try:
        return decode_token(token, token_type)
    except jwt.PyJWTError as exc:
        raise UnauthorizedError(jwt_error_message(exc)) from exc
