"""접근 제어 게이트 (FastAPI 의존성).

- Authorization: Bearer <token> 을 검증하고 sub(user_code) 로 유저를 매 요청 다시 조회한다.
- 토큰 누락/무효 또는 존재하지 않는 유저는 401, 권한 부족은 403.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from common.models.user import User, UserRole

from ..config import AppConfig, get_app_config
from ..exceptions import UnauthenticatedError, UnauthorizedError
from ..repositories.interfaces import UserRepositoryInterface
from ..services.users_service import get_user_repository
from .tokens import decode_access_token


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    config: AppConfig = Depends(get_app_config),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError()

    user_code = decode_access_token(
        credentials.credentials, secret=config.auth.token_secret
    )
    user = user_repo.find_by_user_code(user_code)
    if user is None:
        raise UnauthenticatedError("user for access token no longer exists")
    return user


def require_role(required: UserRole) -> Callable[..., User]:
    """required 이상의 역할을 요구하는 의존성을 만든다."""

    def _dependency(user: User = Depends(get_current_user)) -> User:
        if not user.role.at_least(required):
            raise UnauthorizedError()
        return user

    _dependency.__name__ = f"require_{required.value.lower()}"
    return _dependency


require_staff = require_role(UserRole.STAFF)
require_admin = require_role(UserRole.ADMIN)
