"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns.
Messages are user-facing and localized; stack traces stay in server logs.

Usage:
    from app.utils.exceptions import BadRequestError, DuplicateError
    raise BadRequestError("멤버가 존재하지 않습니다.")
    raise DuplicateError("이미 사용 중인 아이디입니다.")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 경로나 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "리소스를 찾을 수 없습니다.") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 고유 제약을 위반하는 생성/수정 시 사용.

    409 Conflict exception.
    Raised when a login id, email or authority triple already exists.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "이미 존재하는 데이터입니다.") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 역할 권한 부족 시 사용.

    403 Forbidden exception.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "잘못 된 권한입니다.") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when a token is missing, malformed, expired or does not match,
    or when the password comparison fails.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "액세스 토큰이 존재하지 않습니다.") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 또는 존재하지 않는 엔티티.

    400 Bad Request exception.
    Used for business validation failures and for every missing
    member / branch / menu lookup.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "잘못된 요청입니다.") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ServiceUnavailableError(HTTPException):
    """503 Service Unavailable 예외 — 외부 의존성 또는 DB 작업 실패 시 사용.

    503 Service Unavailable exception.
    Raised when storage, email, Slack or a required persistence step fails.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "일시적으로 서비스를 이용할 수 없습니다.") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
