"""Discord OAuth 로그인 흐름.

콜백 처리 결과는 항상 프론트엔드 리다이렉트 URL 이다. 성공하면 일회용 로그인
세션 id 를, 실패하면 에러 코드를 쿼리로 전달한다.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import Depends

from common.models.user import UserUpsertInput

from ..auth.discord import (
    DISCORD_PROVIDER,
    DiscordOAuthClient,
    DiscordOAuthError,
)
from ..auth.tokens import issue_access_token
from ..config import AppConfig, AuthConfig, get_app_config
from ..notifications import NotifierInterface, WebhookChannel, get_notifier
from ..notifications import messages
from .login_sessions_service import LoginSessionsService, get_login_sessions_service
from .users_service import UsersService, get_users_service


logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        config: AuthConfig,
        oauth_client: DiscordOAuthClient,
        users_service: UsersService,
        login_sessions_service: LoginSessionsService,
        notifier: NotifierInterface,
    ) -> None:
        self._config = config
        self._oauth_client = oauth_client
        self._users_service = users_service
        self._login_sessions = login_sessions_service
        self._notifier = notifier

    def complete_discord_login(
        self, code: str | None, referral_code: str | None = None
    ) -> str:
        """OAuth 콜백을 처리하고 리다이렉트할 프론트엔드 URL 을 반환한다."""

        if not code:
            logger.warning("discord callback without authorization code")
            return self._login_error_url("discord_auth_denied")

        try:
            discord_profile = self._oauth_client.fetch_profile_for_code(code)
        except DiscordOAuthError as exc:
            logger.warning("discord oauth failed: %s", exc.message)
            return self._login_error_url(exc.code)

        profile, created = self._users_service.upsert_user(
            UserUpsertInput(
                provider=DISCORD_PROVIDER,
                provider_sub=discord_profile.id,
                email=discord_profile.email,
                name=discord_profile.username,
                profile_image=discord_profile.avatar_url,
                referral_code=referral_code,
            )
        )

        if created:
            self._notifier.notify(
                WebhookChannel.NEW_REGISTRATION,
                messages.new_user_webhook(profile),
            )

        token = issue_access_token(
            profile.user_code,
            secret=self._config.token_secret,
            ttl_seconds=self._config.token_ttl_seconds,
        )
        session = self._login_sessions.create(
            user_code=profile.user_code,
            access_token=token,
            ttl_seconds=self._config.login_session_ttl_seconds,
        )

        logger.info(
            "discord login completed (new_user=%s)",
            created,
            extra={"user_code": profile.user_code},
        )
        return f"{self._config.frontend_url}/dashboard?{urlencode({'session': session.session_id})}"

    def _login_error_url(self, error_code: str) -> str:
        return f"{self._config.frontend_url}/login?{urlencode({'error': error_code})}"


def get_discord_oauth_client(
    config: AppConfig = Depends(get_app_config),
) -> DiscordOAuthClient:
    return DiscordOAuthClient(config.auth)


def get_auth_service(
    config: AppConfig = Depends(get_app_config),
    oauth_client: DiscordOAuthClient = Depends(get_discord_oauth_client),
    users_service: UsersService = Depends(get_users_service),
    login_sessions_service: LoginSessionsService = Depends(
        get_login_sessions_service
    ),
    notifier: NotifierInterface = Depends(get_notifier),
) -> AuthService:
    return AuthService(
        config=config.auth,
        oauth_client=oauth_client,
        users_service=users_service,
        login_sessions_service=login_sessions_service,
        notifier=notifier,
    )
