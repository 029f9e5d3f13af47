from __future__ import annotations

import pytest

from store_service.app import config


ENV_KEYS = [
    config.REFERRAL_CREDIT_PERCENTAGE,
    config.DEFAULT_STARTING_CREDITS,
    config.STRICT_ORDER_TRANSITIONS,
    config.AUTH_TOKEN_SECRET,
    config.AUTH_TOKEN_TTL_SECONDS,
    config.FRONTEND_URL,
    config.ORDER_CONFIRMATION_WEBHOOK_URL,
    config.BOT_API_URL,
    config.API_SECRET,
    config.NOTIFY_MAX_WORKERS,
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv(config.AUTH_TOKEN_SECRET, "secret")


def test_defaults() -> None:
    app_config = config.load_config()

    assert app_config.ledger.referral_credit_percentage == 0
    assert app_config.ledger.default_starting_credits == 0
    assert app_config.orders.strict_transitions is True
    assert app_config.auth.token_secret == "secret"
    assert app_config.auth.frontend_url == "http://localhost:3000"
    assert app_config.notifications.order_confirmation_webhook_url is None
    assert app_config.notifications.max_workers == 4


def test_values_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(config.REFERRAL_CREDIT_PERCENTAGE, "7.5")
    monkeypatch.setenv(config.DEFAULT_STARTING_CREDITS, "20")
    monkeypatch.setenv(config.STRICT_ORDER_TRANSITIONS, "false")
    monkeypatch.setenv(config.FRONTEND_URL, "https://shop.test/")
    monkeypatch.setenv(config.BOT_API_URL, "https://bot.test/send-dm")
    monkeypatch.setenv(config.API_SECRET, "bot-secret")

    app_config = config.load_config()

    assert app_config.ledger.referral_credit_percentage == 7.5
    assert app_config.ledger.default_starting_credits == 20
    assert app_config.orders.strict_transitions is False
    assert app_config.auth.frontend_url == "https://shop.test"
    assert app_config.notifications.bot_api_url == "https://bot.test/send-dm"
    assert app_config.notifications.bot_api_secret == "bot-secret"


def test_missing_token_secret_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(config.AUTH_TOKEN_SECRET)

    with pytest.raises(RuntimeError):
        config.load_config()


@pytest.mark.parametrize(
    ("key", "value"),
    [
        (config.REFERRAL_CREDIT_PERCENTAGE, "ten"),
        (config.REFERRAL_CREDIT_PERCENTAGE, "-1"),
        (config.STRICT_ORDER_TRANSITIONS, "maybe"),
        (config.AUTH_TOKEN_TTL_SECONDS, "0"),
        (config.NOTIFY_MAX_WORKERS, "many"),
    ],
)
def test_invalid_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str
) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(RuntimeError):
        config.load_config()
