from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from common.types.money import NonNegativeAmount


class ProductCategory(StrEnum):
    SUBSCRIPTIONS = "Subscriptions"
    BOOSTS = "Boosts"
    BOTS = "Bots"
    ASSETS = "Assets"
    SERVICES = "Services"
    ROLES = "Roles"


class Product(BaseModel):
    """카탈로그 상품 도메인 모델."""

    id: str | None = None
    name: str
    description: str
    long_description: str | None = None
    price: NonNegativeAmount
    discount_price: NonNegativeAmount | None = None
    image: str
    category: ProductCategory
    tags: list[str] = Field(default_factory=list)
    is_featured: bool = False
    created_at: datetime
    updated_at: datetime

    @property
    def effective_price(self) -> float:
        """구매 시 적용되는 단가. 할인가가 설정되어 있으면 할인가를 사용한다."""
        if self.discount_price is not None:
            return self.discount_price
        return self.price


class ProductCreateInput(BaseModel):
    """관리자 상품 등록 입력."""

    name: str = Field(min_length=1)
    description: str
    long_description: str | None = None
    price: NonNegativeAmount
    discount_price: NonNegativeAmount | None = None
    image: str
    category: ProductCategory
    tags: list[str] = Field(default_factory=list)
    is_featured: bool = False


class ProductUpdateInput(BaseModel):
    """관리자 상품 수정 입력. 전달된 필드만 반영한다."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    long_description: str | None = None
    price: NonNegativeAmount | None = None
    discount_price: NonNegativeAmount | None = None
    image: str | None = None
    category: ProductCategory | None = None
    tags: list[str] | None = None
    is_featured: bool | None = None
