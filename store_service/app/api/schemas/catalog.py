from __future__ import annotations

from pydantic import BaseModel

from common.types.datetime import UtcDateTime

from ...models.announcement import Announcement
from ...models.product import Product
from ...models.reward import Reward


class ProductResponse(BaseModel):
    id: str | None
    name: str
    description: str
    long_description: str | None
    price: float
    discount_price: float | None
    effective_price: float
    image: str
    category: str
    tags: list[str]
    is_featured: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            long_description=product.long_description,
            price=product.price,
            discount_price=product.discount_price,
            effective_price=product.effective_price,
            image=product.image,
            category=product.category.value,
            tags=product.tags,
            is_featured=product.is_featured,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class RewardResponse(BaseModel):
    id: str | None
    name: str
    description: str
    image: str
    credit_cost: float
    category: str
    is_available: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, reward: Reward) -> "RewardResponse":
        return cls(
            id=reward.id,
            name=reward.name,
            description=reward.description,
            image=reward.image,
            credit_cost=reward.credit_cost,
            category=reward.category.value,
            is_available=reward.is_available,
            created_at=reward.created_at,
            updated_at=reward.updated_at,
        )


class AnnouncementResponse(BaseModel):
    id: str | None
    title: str
    content: str
    severity: str
    is_active: bool
    created_by: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, announcement: Announcement) -> "AnnouncementResponse":
        return cls(
            id=announcement.id,
            title=announcement.title,
            content=announcement.content,
            severity=announcement.severity.value,
            is_active=announcement.is_active,
            created_by=announcement.created_by,
            created_at=announcement.created_at,
            updated_at=announcement.updated_at,
        )


class MessageResponse(BaseModel):
    message: str
