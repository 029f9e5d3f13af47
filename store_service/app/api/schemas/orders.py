from __future__ import annotations

from pydantic import BaseModel, Field

from common.types.datetime import UtcDateTime

from ...models.order import Order, OrderItemInput


class PlaceOrderRequest(BaseModel):
    # 빈 목록은 empty_order(400) 로 응답하기 위해 스키마에서는 막지 않는다.
    items: list[OrderItemInput] = Field(default_factory=list)
    referral_code: str | None = None


class PlaceOrderResponse(BaseModel):
    message: str
    order_id: str
    order_number: str


class UpdateOrderStatusRequest(BaseModel):
    status: str
    # None 이면 기존 비고 유지, "" 이면 비고 삭제
    admin_remarks: str | None = None


class SetOrderVisibilityRequest(BaseModel):
    is_hidden_from_staff: bool


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    image: str | None


class OrderResponse(BaseModel):
    id: str | None
    user_code: str
    order_number: str
    items: list[OrderItemResponse]
    total_amount: float
    status: str
    delivery_address: str
    referral_code_used: str | None
    referred_by: str | None
    admin_remarks: str | None
    is_hidden_from_staff: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_code=order.user_code,
            order_number=order.order_number,
            items=[OrderItemResponse(**item.model_dump()) for item in order.items],
            total_amount=order.total_amount,
            status=order.status.value,
            delivery_address=order.delivery_address,
            referral_code_used=order.referral_code_used,
            referred_by=order.referred_by,
            admin_remarks=order.admin_remarks,
            is_hidden_from_staff=order.is_hidden_from_staff,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
