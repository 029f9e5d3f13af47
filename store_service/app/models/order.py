"""주문 도메인 모델.

주문 항목은 구매 시점의 상품 정보(이름, 단가, 이미지)를 스냅샷으로 보관하며,
이후 상품이 수정되어도 주문 내역과 총액은 바뀌지 않는다.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from common.types.money import Amount


class OrderStatus(StrEnum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# 허용되는 상태 전이. 같은 상태로의 갱신(비고 수정)은 별도로 허용한다.
# Delivered -> Cancelled 는 반품, Cancelled -> Pending/Processing/Delivered 는 주문 복구 용도다.
ORDER_STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(
        {OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.DELIVERED}
    ),
}


def can_transition(
    old_status: OrderStatus, new_status: OrderStatus, *, strict: bool = True
) -> bool:
    """old_status -> new_status 전이가 허용되는지 여부.

    strict=False 이면 열거된 상태 사이의 모든 전이를 허용한다.
    """

    if old_status == new_status or not strict:
        return True
    return new_status in ORDER_STATUS_TRANSITIONS[old_status]


class OrderItem(BaseModel):
    """구매 시점의 상품 스냅샷."""

    product_id: str
    name: str
    price: Amount  # 할인가가 있으면 할인가
    quantity: int = Field(ge=1)
    image: str | None = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Order(BaseModel):
    id: str | None = None
    user_code: str
    order_number: str
    items: list[OrderItem]
    total_amount: Amount
    status: OrderStatus = OrderStatus.PENDING
    delivery_address: str = "Digital delivery"
    referral_code_used: str | None = None
    referred_by: str | None = None  # 추천인 user_code (본인 추천은 저장하지 않는다)
    referral_credited: bool = False  # 추천 크레딧 지급 완료 여부 (최초 배송완료 1회)
    admin_remarks: str | None = None
    is_hidden_from_staff: bool = False
    created_at: datetime
    updated_at: datetime


class OrderItemInput(BaseModel):
    """주문 요청 항목. 수량 검증은 서비스에서 InvalidQuantity 로 처리한다."""

    product_id: str
    quantity: int
