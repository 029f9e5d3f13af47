from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..models.login_session import LoginSession
from ..repositories.login_session_repository import LoginSessionRepository
from ..repositories.interfaces import LoginSessionRepositoryInterface


class LoginSessionsService:
    """로그인 세션 데이터 생성/교환을 담당하는 서비스."""

    def __init__(self, repo: LoginSessionRepositoryInterface) -> None:
        self._repo = repo

    def create(self, user_code: str, access_token: str, ttl_seconds: int) -> LoginSession:
        now = datetime.now(timezone.utc)
        session = LoginSession(
            session_id=secrets.token_urlsafe(32),
            user_code=user_code,
            access_token=access_token,
            expires_at=now + timedelta(seconds=ttl_seconds),
            created_at=now,
            updated_at=now,
        )
        return self._repo.create(session)

    def exchange(self, session_id: str) -> LoginSession | None:
        """세션을 삭제하면서 꺼낸다. 없거나 만료됐으면 None."""
        return self._repo.delete_by_session_id(session_id)


def get_login_session_repository(
    db: Database = Depends(get_database),
) -> LoginSessionRepositoryInterface:
    return LoginSessionRepository(db)


def get_login_sessions_service(
    repo: LoginSessionRepositoryInterface = Depends(get_login_session_repository),
) -> LoginSessionsService:
    return LoginSessionsService(repo)
