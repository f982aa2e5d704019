"""멤버 비밀번호 해싱 및 검증 유틸리티.

Member password hashing and verification helpers built on bcrypt.
Only the hash is ever persisted on the member row. bcrypt rejects
inputs longer than 72 bytes, so the schema caps passwords there and
verification treats a longer attempt as a mismatch.
"""

import bcrypt

# bcrypt 입력 최대 길이 (Maximum bcrypt input length in bytes)
MAX_PASSWORD_BYTES: int = 72


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Args:
        password: 평문 비밀번호 (Plain text password, at most 72 UTF-8 bytes)

    Returns:
        str: 솔트가 포함된 bcrypt 해시 (Salted bcrypt hash)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호가 저장된 해시와 일치하는지 확인합니다 (상수 시간 비교).

    Constant-time check of a login attempt against the stored hash.
    An attempt over 72 bytes can never match a stored hash.
    """
    encoded: bytes = plain_password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
