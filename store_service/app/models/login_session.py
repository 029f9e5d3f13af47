from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator, model_validator


class LoginSession(BaseModel):
    """OAuth 콜백과 프론트엔드 사이에서 액세스 토큰을 한 번만 넘겨주기 위한 세션.

    - session_id 만 리다이렉트 URL 로 노출되고, 토큰은 교환 API 로 한 번만 꺼낼 수 있다.
    - 토큰에는 user_code 만 담기며, 잔액/권한 같은 유저 상태는 담지 않는다.
    - TTL 인덱스로 자동 삭제되지만 교환 시에도 만료를 다시 확인한다.
    """

    session_id: str
    user_code: str
    access_token: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("session_id", "user_code", "access_token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _validate_expiry(self) -> "LoginSession":
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be greater than created_at")
        return self
