"""Discord OAuth2 클라이언트.

인가 코드를 액세스 토큰으로 교환하고 users/@me 프로필을 조회한다.
외부 호출은 모두 타임아웃이 있으며 재시도하지 않는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..config import AuthConfig


logger = logging.getLogger(__name__)


DISCORD_API_BASE_URL = "https://discord.com/api"
DISCORD_TOKEN_PATH = "/oauth2/token"
DISCORD_ME_PATH = "/users/@me"
DISCORD_CDN_AVATAR_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar}.png"
DISCORD_SCOPES = "identify email"
DISCORD_PROVIDER = "discord"


class DiscordOAuthError(Exception):
    """OAuth 흐름 실패. code 는 프론트엔드 로그인 페이지에 전달하는 에러 코드다."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


@dataclass(slots=True)
class DiscordProfile:
    id: str
    username: str
    email: str
    avatar_url: str | None


class DiscordOAuthClient:
    def __init__(
        self,
        config: AuthConfig,
        client: httpx.Client | None = None,
        base_url: str = DISCORD_API_BASE_URL,
    ) -> None:
        self._config = config
        self._client = client
        self._base_url = base_url.rstrip("/")

    def _build_client(self) -> httpx.Client:
        return httpx.Client(timeout=self._config.oauth_timeout_seconds)

    def fetch_profile_for_code(self, code: str) -> DiscordProfile:
        if not (
            self._config.discord_client_id
            and self._config.discord_client_secret
            and self._config.discord_redirect_uri
        ):
            raise DiscordOAuthError("oauth_not_configured", "discord oauth is not configured")

        client = self._client or self._build_client()
        try:
            access_token = self._exchange_code(client, code)
            return self._fetch_me(client, access_token)
        finally:
            if self._client is None:
                client.close()

    def _exchange_code(self, client: httpx.Client, code: str) -> str:
        try:
            resp = client.post(
                f"{self._base_url}{DISCORD_TOKEN_PATH}",
                data={
                    "client_id": self._config.discord_client_id,
                    "client_secret": self._config.discord_client_secret,
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self._config.discord_redirect_uri,
                    "scope": DISCORD_SCOPES,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            raise DiscordOAuthError("token_exchange_failed", str(exc)) from exc

        if resp.status_code != 200:
            logger.error(
                "discord token exchange failed: status=%s body=%s",
                resp.status_code,
                resp.text[:500],
            )
            raise DiscordOAuthError(
                "token_exchange_failed", f"status code {resp.status_code}"
            )

        access_token = resp.json().get("access_token")
        if not access_token:
            raise DiscordOAuthError("token_exchange_failed", "missing access_token")
        return access_token

    def _fetch_me(self, client: httpx.Client, access_token: str) -> DiscordProfile:
        try:
            resp = client.get(
                f"{self._base_url}{DISCORD_ME_PATH}",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as exc:
            raise DiscordOAuthError("profile_fetch_failed", str(exc)) from exc

        if resp.status_code != 200:
            logger.error(
                "discord profile fetch failed: status=%s body=%s",
                resp.status_code,
                resp.text[:500],
            )
            raise DiscordOAuthError(
                "profile_fetch_failed", f"status code {resp.status_code}"
            )

        data = resp.json()
        user_id = str(data.get("id") or "")
        if not user_id:
            raise DiscordOAuthError("profile_fetch_failed", "missing user id")

        avatar = data.get("avatar")
        return DiscordProfile(
            id=user_id,
            username=data.get("global_name") or data.get("username") or user_id,
            email=data.get("email") or "",
            avatar_url=DISCORD_CDN_AVATAR_URL.format(user_id=user_id, avatar=avatar)
            if avatar
            else None,
        )
