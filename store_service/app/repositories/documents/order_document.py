from __future__ import annotations

from pydantic import BaseModel

from common.mongo.types import (
    BaseDocument,
    build_document_data_from_domain,
    from_object_id,
)

from ...models.order import Order, OrderItem


class OrderItemDocument(BaseModel):
    """주문 항목 서브 도큐먼트 (구매 시점 스냅샷)."""

    product_id: str
    name: str
    price: float
    quantity: int
    image: str | None = None


class OrderDocument(BaseDocument):
    """MongoDB orders 컬렉션 도큐먼트 모델."""

    user_code: str
    order_number: str
    items: list[OrderItemDocument]
    total_amount: float
    status: str
    delivery_address: str = "Digital delivery"
    referral_code_used: str | None = None
    referred_by: str | None = None
    referral_credited: bool = False
    admin_remarks: str | None = None
    is_hidden_from_staff: bool = False

    @classmethod
    def from_domain(cls, order: Order) -> "OrderDocument":
        data = build_document_data_from_domain(order)
        return cls.model_validate(data)

    def to_domain(self) -> Order:
        return Order(
            id=from_object_id(self.id),
            user_code=self.user_code,
            order_number=self.order_number,
            items=[OrderItem(**item.model_dump()) for item in self.items],
            total_amount=self.total_amount,
            status=self.status,
            delivery_address=self.delivery_address,
            referral_code_used=self.referral_code_used,
            referred_by=self.referred_by,
            referral_credited=self.referral_credited,
            admin_remarks=self.admin_remarks,
            is_hidden_from_staff=self.is_hidden_from_staff,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
