"""웹훅/봇 DM 알림 디스패처.

알림은 요청 처리와 분리된 백그라운드 스레드 풀에서 전송한다.
전송 실패는 로그로만 남기고 호출자에게 전파하지 않으며, 재시도하지 않는다.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import StrEnum
from typing import Any, Protocol

import httpx

from ..config import NotificationConfig, get_app_config


logger = logging.getLogger(__name__)


# 설정 예시 값(YOUR_WEBHOOK_URL 등)이 그대로 남아 있는 경우 전송하지 않는다.
PLACEHOLDER_MARKER = "YOUR_"
BOT_API_SECRET_HEADER = "x-api-secret"


class WebhookChannel(StrEnum):
    ORDER_CONFIRMATION = "order_confirmation"
    ORDER_STATUS_CHANGE = "order_status_change"
    REDEEM_REQUEST = "redeem_request"
    NEW_REGISTRATION = "new_registration"


class NotifierInterface(Protocol):
    """서비스 레이어가 의존하는 알림 계약. 호출은 즉시 반환해야 한다."""

    def notify(
        self, channel: WebhookChannel, payload: dict[str, Any]
    ) -> None:  # pragma: no cover - Protocol
        ...

    def send_dm(
        self,
        recipient_id: str,
        message: str,
        embeds: list[dict[str, Any]] | None = None,
    ) -> None:  # pragma: no cover - Protocol
        ...


def _is_configured(url: str | None) -> bool:
    return bool(url) and PLACEHOLDER_MARKER not in str(url)


class NotificationDispatcher(NotifierInterface):
    """httpx 로 웹훅과 봇 API 를 호출하는 fire-and-forget 디스패처."""

    def __init__(
        self,
        config: NotificationConfig,
        client: httpx.Client | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._config = config
        self._client = client or httpx.Client(timeout=config.timeout_seconds)
        self._executor = executor or ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="notify",
        )

    def _channel_url(self, channel: WebhookChannel) -> str | None:
        return {
            WebhookChannel.ORDER_CONFIRMATION: self._config.order_confirmation_webhook_url,
            WebhookChannel.ORDER_STATUS_CHANGE: self._config.order_status_change_webhook_url,
            WebhookChannel.REDEEM_REQUEST: self._config.redeem_request_webhook_url,
            WebhookChannel.NEW_REGISTRATION: self._config.new_registration_webhook_url,
        }[channel]

    def notify(self, channel: WebhookChannel, payload: dict[str, Any]) -> None:
        url = self._channel_url(channel)
        if not _is_configured(url):
            logger.warning(
                "webhook url not configured, skipping notification",
                extra={"channel": channel.value},
            )
            return
        self._submit(self._post, channel.value, url, payload, None)

    def send_dm(
        self,
        recipient_id: str,
        message: str,
        embeds: list[dict[str, Any]] | None = None,
    ) -> None:
        if not _is_configured(self._config.bot_api_url):
            logger.warning(
                "bot api url not configured, skipping dm",
                extra={"channel": "dm"},
            )
            return
        if not self._config.bot_api_secret:
            logger.warning(
                "bot api secret not configured, skipping dm",
                extra={"channel": "dm"},
            )
            return
        if not recipient_id:
            logger.warning("dm recipient is empty, skipping dm", extra={"channel": "dm"})
            return

        body = {
            "discordUserId": recipient_id,
            "messageContent": message,
            "embeds": embeds or [],
        }
        headers = {BOT_API_SECRET_HEADER: self._config.bot_api_secret}
        self._submit(self._post, "dm", self._config.bot_api_url, body, headers)

    def _submit(self, fn, *args) -> None:
        try:
            self._executor.submit(fn, *args)
        except RuntimeError as exc:
            # 종료 중인 executor 에는 더 이상 작업을 넣을 수 없다.
            logger.warning("notification dropped: %s", exc)

    def _post(
        self,
        channel: str,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None,
    ) -> None:
        try:
            resp = self._client.post(
                url,
                json=payload,
                headers=headers,
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.error(
                "notification request failed: %s", exc, extra={"channel": channel}
            )
            return
        except Exception:  # noqa: BLE001
            logger.exception("unexpected notification error", extra={"channel": channel})
            return

        if resp.status_code >= 400:
            logger.error(
                "notification rejected: status=%s body=%s",
                resp.status_code,
                resp.text[:500],
                extra={"channel": channel},
            )
            return

        logger.info("notification sent", extra={"channel": channel})

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        self._client.close()


_notifier: NotificationDispatcher | None = None
_lock = threading.Lock()


def get_notifier() -> NotifierInterface:
    """프로세스 전역 디스패처. FastAPI DI 팩토리로도 사용한다."""

    global _notifier

    if _notifier is not None:
        return _notifier

    with _lock:
        if _notifier is None:
            _notifier = NotificationDispatcher(get_app_config().notifications)
        return _notifier


def shutdown_notifier() -> None:
    global _notifier

    with _lock:
        if _notifier is not None:
            _notifier.shutdown(wait=True)
        _notifier = None
