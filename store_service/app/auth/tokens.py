"""액세스 토큰 발급/검증 (HS256 JWT).

토큰에는 user_code(sub) 만 담는다. 권한과 잔액은 매 요청마다 저장소에서 다시 읽는다.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from ..exceptions import UnauthenticatedError


TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def issue_access_token(
    user_code: str,
    *,
    secret: str,
    ttl_seconds: int,
    now: datetime | None = None,
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_code,
        "typ": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: str, *, secret: str) -> str:
    """토큰을 검증하고 user_code 를 반환한다. 실패하면 UnauthenticatedError."""

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthenticatedError("access token expired, please log in again") from exc
    except jwt.PyJWTError as exc:
        raise UnauthenticatedError("invalid access token") from exc

    if payload.get("typ") != TOKEN_TYPE or not payload.get("sub"):
        raise UnauthenticatedError("invalid access token")
    return str(payload["sub"])
