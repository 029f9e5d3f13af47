from __future__ import annotations

from pydantic import BaseModel


class LoginSessionExchangeResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LogoutResponse(BaseModel):
    message: str
