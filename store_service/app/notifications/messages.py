"""Discord 웹훅/DM 페이로드 빌더.

도메인 객체만 받아 dict 를 만들며, 전송은 dispatcher 가 담당한다.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from common.models.user import User, UserProfile

from ..models.order import Order, OrderStatus
from ..models.redemption import Redemption, RedemptionStatus


COLOR_GREEN = 3066993
COLOR_RED = 15158332
COLOR_YELLOW = 16776960
COLOR_BLUE = 6022839
COLOR_BLURPLE = 10079487


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _money(value: float) -> str:
    return f"${value:.2f}"


def _credits(value: float) -> str:
    return f"{value:g} Credits"


def _items_text(order: Order, bullet: str = "") -> str:
    return "\n".join(f"{bullet}{item.name} (x{item.quantity})" for item in order.items)


def _status_color(status: OrderStatus) -> int:
    if status == OrderStatus.DELIVERED:
        return COLOR_GREEN
    if status == OrderStatus.CANCELLED:
        return COLOR_RED
    return COLOR_YELLOW


def _field(name: str, value: str, inline: bool = True) -> dict[str, Any]:
    return {"name": name, "value": value, "inline": inline}


# ── orders ────────────────────────────────────────────────────────


def order_confirmation_webhook(order: Order, buyer: User) -> dict[str, Any]:
    return {
        "username": "Order Bot",
        "embeds": [
            {
                "title": f"New Order Placed! #{order.order_number}",
                "description": f"A new order has been received from **{buyer.name}**!",
                "color": COLOR_BLUE,
                "fields": [
                    _field("Order ID", str(order.id)),
                    _field("Customer Discord ID", buyer.provider_sub),
                    _field("Total Amount", _money(order.total_amount)),
                    _field("Status", order.status.value),
                    _field("Items", _items_text(order, bullet="- "), inline=False),
                    _field("Referral Code Used", order.referral_code_used or "None"),
                    _field("Referred By", order.referred_by or "None"),
                ],
                "timestamp": _now_iso(),
            }
        ],
    }


def order_confirmation_dm(order: Order) -> tuple[str, list[dict[str, Any]]]:
    message = (
        f"Your order #{order.order_number} has been successfully placed! "
        f"Total: {_money(order.total_amount)}. Current status: {order.status.value}. "
        "Thank you for your purchase!"
    )
    embeds = [
        {
            "title": f"Order #{order.order_number} Confirmed!",
            "description": "**Thank you for your purchase!**",
            "color": COLOR_GREEN,
            "fields": [
                _field("Order Total", _money(order.total_amount)),
                _field("Status", order.status.value),
                _field("Items", _items_text(order), inline=False),
            ],
            "timestamp": _now_iso(),
        }
    ]
    return message, embeds


def order_status_webhook(
    order: Order,
    owner: User | None,
    previous_status: OrderStatus,
    actor: User,
) -> dict[str, Any]:
    customer = owner.name if owner is not None else "Unknown User"
    return {
        "username": "Order Status Bot",
        "embeds": [
            {
                "title": f"Order #{order.order_number} Status Update!",
                "description": f"Order for **{customer}** has changed status.",
                "color": _status_color(order.status),
                "fields": [
                    _field("Order ID", str(order.id)),
                    _field("Customer", customer),
                    _field("Previous Status", previous_status.value),
                    _field("New Status", order.status.value),
                    _field("Remarks", order.admin_remarks or "None", inline=False),
                    _field("Processed By", actor.name),
                ],
                "timestamp": _now_iso(),
            }
        ],
    }


def order_status_dm(order: Order) -> tuple[str, list[dict[str, Any]]]:
    message = (
        f"Your order #{order.order_number} has been updated! "
        f"New status: {order.status.value}. Total: {_money(order.total_amount)}."
    )
    if order.admin_remarks:
        message += f" Remarks: {order.admin_remarks}"
    embeds = [
        {
            "title": f"Order #{order.order_number} Status: {order.status.value}",
            "description": "Your order has been updated by the store staff!",
            "color": _status_color(order.status),
            "fields": [
                _field("Order Total", _money(order.total_amount)),
                _field("New Status", order.status.value),
                _field("Remarks", order.admin_remarks or "None", inline=False),
            ],
            "timestamp": _now_iso(),
        }
    ]
    return message, embeds


# ── redemptions ───────────────────────────────────────────────────


def redemption_request_webhook(redemption: Redemption, user: User) -> dict[str, Any]:
    short_id = str(redemption.id)[:8]
    return {
        "username": "Redemption Bot",
        "embeds": [
            {
                "title": f"New Redemption Request! #{short_id}",
                "description": f"**{user.name}** has requested a reward!",
                "color": COLOR_BLURPLE,
                "fields": [
                    _field("User", user.name),
                    _field("Discord ID", user.provider_sub),
                    _field("Reward", redemption.reward_name),
                    _field("Cost", _credits(redemption.credit_cost)),
                    _field("Status", redemption.status.value),
                ],
                "timestamp": _now_iso(),
            }
        ],
    }


def redemption_request_dm(redemption: Redemption) -> tuple[str, list[dict[str, Any]]]:
    message = (
        f'Your redemption request for "{redemption.reward_name}" '
        f"({_credits(redemption.credit_cost)}) has been submitted! "
        f"Status: {redemption.status.value}. Please await admin approval."
    )
    embeds = [
        {
            "title": "Redemption Request Submitted!",
            "description": f"We've received your request for **{redemption.reward_name}**!",
            "color": COLOR_BLURPLE,
            "fields": [
                _field("Reward", redemption.reward_name),
                _field("Cost", _credits(redemption.credit_cost)),
                _field("Status", redemption.status.value),
            ],
            "timestamp": _now_iso(),
        }
    ]
    return message, embeds


def redemption_processed_dm(redemption: Redemption) -> tuple[str, list[dict[str, Any]]]:
    approved = redemption.status == RedemptionStatus.APPROVED
    if approved:
        message = (
            f'Your redemption request for "{redemption.reward_name}" has been approved!'
        )
    else:
        message = (
            f'Your redemption request for "{redemption.reward_name}" was rejected. '
            f"{_credits(redemption.credit_cost)} have been refunded to your balance."
        )
    if redemption.admin_remarks:
        message += f" Remarks: {redemption.admin_remarks}"
    embeds = [
        {
            "title": f"Redemption {redemption.status.value}",
            "description": f"**{redemption.reward_name}**",
            "color": COLOR_GREEN if approved else COLOR_RED,
            "fields": [
                _field("Cost", _credits(redemption.credit_cost)),
                _field("Status", redemption.status.value),
                _field("Remarks", redemption.admin_remarks or "None", inline=False),
            ],
            "timestamp": _now_iso(),
        }
    ]
    return message, embeds


# ── users ─────────────────────────────────────────────────────────


def new_user_webhook(user: UserProfile) -> dict[str, Any]:
    return {
        "username": "New User Bot",
        "embeds": [
            {
                "title": "New User Registered!",
                "description": f"**{user.name}** has joined the platform!",
                "color": COLOR_GREEN,
                "fields": [
                    _field("Discord ID", user.provider_sub),
                    _field("Email", user.email),
                    _field("Referred By", user.referred_by or "None"),
                    _field("Initial Credits", f"{user.credits:g}"),
                    _field("Role", user.role.value),
                ],
                "timestamp": _now_iso(),
            }
        ],
    }
