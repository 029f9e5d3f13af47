from __future__ import annotations

import json
from concurrent.futures import Executor, Future
from datetime import datetime, timezone

import httpx

from store_service.app.config import NotificationConfig
from store_service.app.models.order import Order, OrderItem, OrderStatus
from store_service.app.notifications import (
    NotificationDispatcher,
    WebhookChannel,
    messages,
)

from .fakes import build_user


class ImmediateExecutor(Executor):
    """제출 즉시 호출 스레드에서 실행하는 executor."""

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn, /, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future


def _dispatcher(
    handler, **config_overrides
) -> tuple[NotificationDispatcher, ImmediateExecutor]:
    data = {
        "order_confirmation_webhook_url": "https://hooks.test/orders",
        "new_registration_webhook_url": "https://discord.com/api/webhooks/YOUR_WEBHOOK",
        "bot_api_url": "https://bot.test/send-dm",
        "bot_api_secret": "bot-secret",
    }
    data.update(config_overrides)
    executor = ImmediateExecutor()
    dispatcher = NotificationDispatcher(
        NotificationConfig(**data),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        executor=executor,
    )
    return dispatcher, executor


def _order() -> Order:
    now = datetime.now(timezone.utc)
    return Order(
        id="64b000000000000000000001",
        user_code="discord:user-001",
        order_number="ORD-1-1",
        items=[OrderItem(product_id="p1", name="Server Boost", price=10, quantity=2)],
        total_amount=20,
        status=OrderStatus.DELIVERED,
        created_at=now,
        updated_at=now,
    )


def test_notify_posts_payload_to_channel_url() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(204)

    dispatcher, _ = _dispatcher(handler)

    dispatcher.notify(WebhookChannel.ORDER_CONFIRMATION, {"content": "hello"})

    assert len(requests) == 1
    assert str(requests[0].url) == "https://hooks.test/orders"
    assert json.loads(requests[0].content) == {"content": "hello"}


def test_unset_or_placeholder_urls_are_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    dispatcher, executor = _dispatcher(handler)

    dispatcher.notify(WebhookChannel.REDEEM_REQUEST, {"content": "unset"})
    dispatcher.notify(WebhookChannel.NEW_REGISTRATION, {"content": "placeholder"})

    assert executor.submitted == 0


def test_send_dm_posts_bot_api_body_with_secret_header() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    dispatcher, _ = _dispatcher(handler)
    message, embeds = messages.order_status_dm(_order())

    dispatcher.send_dm("1001", message, embeds)

    assert requests[0].headers["x-api-secret"] == "bot-secret"
    body = json.loads(requests[0].content)
    assert body["discordUserId"] == "1001"
    assert body["messageContent"] == message
    assert body["embeds"][0]["title"] == "Order #ORD-1-1 Status: Delivered"


def test_send_dm_without_secret_is_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    dispatcher, executor = _dispatcher(handler, bot_api_secret=None)

    dispatcher.send_dm("1001", "hi")

    assert executor.submitted == 0


def test_transport_errors_and_rejections_are_swallowed() -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def rejecting(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    for handler in (failing, rejecting):
        dispatcher, executor = _dispatcher(handler)
        dispatcher.notify(WebhookChannel.ORDER_CONFIRMATION, {"content": "x"})
        dispatcher.send_dm("1001", "x")
        assert executor.submitted == 2


def test_order_confirmation_webhook_lists_items_and_referral() -> None:
    buyer = build_user(name="alice")
    order = _order().model_copy(
        update={"referral_code_used": "REFER002", "referred_by": "discord:ref"}
    )

    payload = messages.order_confirmation_webhook(order, buyer)

    embed = payload["embeds"][0]
    fields = {f["name"]: f["value"] for f in embed["fields"]}
    assert embed["title"] == "New Order Placed! #ORD-1-1"
    assert fields["Total Amount"] == "$20.00"
    assert fields["Items"] == "- Server Boost (x2)"
    assert fields["Referral Code Used"] == "REFER002"
    assert fields["Customer Discord ID"] == buyer.provider_sub
