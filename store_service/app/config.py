from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


REFERRAL_CREDIT_PERCENTAGE = "REFERRAL_CREDIT_PERCENTAGE"
DEFAULT_STARTING_CREDITS = "DEFAULT_STARTING_CREDITS"
STRICT_ORDER_TRANSITIONS = "STRICT_ORDER_TRANSITIONS"

AUTH_TOKEN_SECRET = "AUTH_TOKEN_SECRET"
AUTH_TOKEN_TTL_SECONDS = "AUTH_TOKEN_TTL_SECONDS"
LOGIN_SESSION_TTL_SECONDS = "LOGIN_SESSION_TTL_SECONDS"
DISCORD_CLIENT_ID = "DISCORD_CLIENT_ID"
DISCORD_CLIENT_SECRET = "DISCORD_CLIENT_SECRET"
DISCORD_REDIRECT_URI = "DISCORD_REDIRECT_URI"
FRONTEND_URL = "FRONTEND_URL"
OAUTH_TIMEOUT_SECONDS = "OAUTH_TIMEOUT_SECONDS"

ORDER_CONFIRMATION_WEBHOOK_URL = "ORDER_CONFIRMATION_WEBHOOK_URL"
ORDER_STATUS_CHANGE_WEBHOOK_URL = "ORDER_STATUS_CHANGE_WEBHOOK_URL"
REDEEM_REQUEST_WEBHOOK_URL = "REDEEM_REQUEST_WEBHOOK_URL"
NEW_REG_WEBHOOK_URL = "NEW_REG_WEBHOOK_URL"
BOT_API_URL = "BOT_API_URL"
API_SECRET = "API_SECRET"
NOTIFY_TIMEOUT_SECONDS = "NOTIFY_TIMEOUT_SECONDS"
NOTIFY_MAX_WORKERS = "NOTIFY_MAX_WORKERS"


@dataclass(slots=True)
class LedgerConfig:
    """크레딧 원장/추천 보상 설정."""

    referral_credit_percentage: float = 0.0
    default_starting_credits: float = 0.0


@dataclass(slots=True)
class OrderConfig:
    """주문 상태 전이 설정.

    strict_transitions=False 이면 열거된 상태 사이의 모든 전이를 허용한다.
    """

    strict_transitions: bool = True


@dataclass(slots=True)
class AuthConfig:
    """액세스 토큰 및 Discord OAuth 설정."""

    token_secret: str
    token_ttl_seconds: int = 86400
    login_session_ttl_seconds: int = 60
    discord_client_id: str | None = None
    discord_client_secret: str | None = None
    discord_redirect_uri: str | None = None
    frontend_url: str = "http://localhost:3000"
    oauth_timeout_seconds: float = 10.0


@dataclass(slots=True)
class NotificationConfig:
    """웹훅/봇 DM 알림 설정. 비어 있는 URL 채널은 건너뛴다."""

    order_confirmation_webhook_url: str | None = None
    order_status_change_webhook_url: str | None = None
    redeem_request_webhook_url: str | None = None
    new_registration_webhook_url: str | None = None
    bot_api_url: str | None = None
    bot_api_secret: str | None = None
    timeout_seconds: float = 5.0
    max_workers: int = 4


@dataclass(slots=True)
class AppConfig:
    """store-service 전체 설정."""

    ledger: LedgerConfig
    orders: OrderConfig
    auth: AuthConfig
    notifications: NotificationConfig


def _read_float(key: str, default: float, *, minimum: float | None = 0.0) -> float:
    raw = os.getenv(key)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be a number if set, got: {raw!r}") from exc
    if minimum is not None and value < minimum:
        raise RuntimeError(f"{key} must be >= {minimum}, got: {raw!r}")
    return value


def _read_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be an integer if set, got: {raw!r}") from exc
    if value <= 0:
        raise RuntimeError(f"{key} must be a positive integer, got: {raw!r}")
    return value


def _read_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if not raw:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{key} must be a boolean if set, got: {raw!r}")


def load_ledger_config() -> LedgerConfig:
    return LedgerConfig(
        referral_credit_percentage=_read_float(REFERRAL_CREDIT_PERCENTAGE, 0.0),
        default_starting_credits=_read_float(DEFAULT_STARTING_CREDITS, 0.0),
    )


def load_order_config() -> OrderConfig:
    return OrderConfig(strict_transitions=_read_bool(STRICT_ORDER_TRANSITIONS, True))


def load_auth_config() -> AuthConfig:
    """토큰 서명 키는 필수값이다. 나머지 OAuth 설정은 콜백 호출 시점에 확인한다."""

    secret = os.getenv(AUTH_TOKEN_SECRET)
    if not secret:
        raise RuntimeError(
            f"{AUTH_TOKEN_SECRET} environment variable is required for store-service",
        )

    return AuthConfig(
        token_secret=secret,
        token_ttl_seconds=_read_int(AUTH_TOKEN_TTL_SECONDS, 86400),
        login_session_ttl_seconds=_read_int(LOGIN_SESSION_TTL_SECONDS, 60),
        discord_client_id=os.getenv(DISCORD_CLIENT_ID) or None,
        discord_client_secret=os.getenv(DISCORD_CLIENT_SECRET) or None,
        discord_redirect_uri=os.getenv(DISCORD_REDIRECT_URI) or None,
        frontend_url=(os.getenv(FRONTEND_URL) or "http://localhost:3000").rstrip("/"),
        oauth_timeout_seconds=_read_float(OAUTH_TIMEOUT_SECONDS, 10.0),
    )


def load_notification_config() -> NotificationConfig:
    return NotificationConfig(
        order_confirmation_webhook_url=os.getenv(ORDER_CONFIRMATION_WEBHOOK_URL) or None,
        order_status_change_webhook_url=os.getenv(ORDER_STATUS_CHANGE_WEBHOOK_URL)
        or None,
        redeem_request_webhook_url=os.getenv(REDEEM_REQUEST_WEBHOOK_URL) or None,
        new_registration_webhook_url=os.getenv(NEW_REG_WEBHOOK_URL) or None,
        bot_api_url=os.getenv(BOT_API_URL) or None,
        bot_api_secret=os.getenv(API_SECRET) or None,
        timeout_seconds=_read_float(NOTIFY_TIMEOUT_SECONDS, 5.0),
        max_workers=_read_int(NOTIFY_MAX_WORKERS, 4),
    )


def load_config() -> AppConfig:
    return AppConfig(
        ledger=load_ledger_config(),
        orders=load_order_config(),
        auth=load_auth_config(),
        notifications=load_notification_config(),
    )


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """프로세스 전역 설정. FastAPI DI 에서도 그대로 사용한다."""

    return load_config()
