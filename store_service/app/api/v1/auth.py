from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse

from ..schemas.login_sessions import LoginSessionExchangeResponse, LogoutResponse
from ...services.auth_service import AuthService, get_auth_service
from ...services.login_sessions_service import (
    LoginSessionsService,
    get_login_sessions_service,
)


router = APIRouter()


@router.get("/discord/callback", summary="Discord OAuth 콜백")
def discord_callback(
    code: str | None = None,
    referral_code: str | None = None,
    service: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    redirect_url = service.complete_discord_login(code, referral_code)
    return RedirectResponse(url=redirect_url, status_code=302)


@router.post(
    "/login-sessions/{session_id}",
    response_model=LoginSessionExchangeResponse,
    summary="로그인 세션을 액세스 토큰으로 교환 (1회용)",
)
def exchange_login_session(
    session_id: str,
    service: LoginSessionsService = Depends(get_login_sessions_service),
) -> LoginSessionExchangeResponse:
    session = service.exchange(session_id)
    if session is None:
        # 세션이 없거나 만료된 경우
        raise HTTPException(
            status_code=400,
            detail={
                "code": "login_session_invalid",
                "message": "login session not found or expired",
            },
        )
    return LoginSessionExchangeResponse(access_token=session.access_token)


@router.post("/logout", response_model=LogoutResponse, summary="로그아웃")
def logout() -> LogoutResponse:
    # 서버에 세션 상태가 없으므로 클라이언트가 토큰을 버리면 된다.
    return LogoutResponse(message="logged out successfully")
