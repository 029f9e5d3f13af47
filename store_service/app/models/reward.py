from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from common.types.money import NonNegativeAmount


DEFAULT_REWARD_IMAGE = "https://via.placeholder.com/150"


class RewardCategory(StrEnum):
    SUBSCRIPTIONS = "Subscriptions"
    ASSETS = "Assets"
    BOOSTS = "Boosts"
    ROLES = "Roles"
    OTHER = "Other"


class Reward(BaseModel):
    """크레딧으로 교환 가능한 리워드 도메인 모델."""

    id: str | None = None
    name: str
    description: str
    image: str = DEFAULT_REWARD_IMAGE
    credit_cost: NonNegativeAmount
    category: RewardCategory = RewardCategory.OTHER
    is_available: bool = True
    created_at: datetime
    updated_at: datetime


class RewardCreateInput(BaseModel):
    name: str = Field(min_length=1)
    description: str
    image: str = DEFAULT_REWARD_IMAGE
    credit_cost: NonNegativeAmount
    category: RewardCategory = RewardCategory.OTHER
    is_available: bool = True


class RewardUpdateInput(BaseModel):
    """전달된 필드만 반영한다. credit_cost 변경은 이미 생성된 교환 요청에 영향이 없다."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    image: str | None = None
    credit_cost: NonNegativeAmount | None = None
    category: RewardCategory | None = None
    is_available: bool | None = None
