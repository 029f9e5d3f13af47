from __future__ import annotations

from common.mongo.types import (
    BaseDocument,
    MongoDateTime,
    build_document_data_from_domain,
)
from ...models.login_session import LoginSession


class LoginSessionDocument(BaseDocument):
    """MongoDB login_sessions 컬렉션 도큐먼트 모델."""

    session_id: str
    user_code: str
    access_token: str
    expires_at: MongoDateTime

    @classmethod
    def from_domain(cls, session: LoginSession) -> "LoginSessionDocument":
        data = build_document_data_from_domain(session)
        return cls.model_validate(data)

    def to_domain(self) -> LoginSession:
        return LoginSession(
            session_id=self.session_id,
            user_code=self.user_code,
            access_token=self.access_token,
            expires_at=self.expires_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
