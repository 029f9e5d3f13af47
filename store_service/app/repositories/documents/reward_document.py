from __future__ import annotations

from common.mongo.types import (
    BaseDocument,
    build_document_data_from_domain,
    from_object_id,
)

from ...models.reward import DEFAULT_REWARD_IMAGE, Reward


class RewardDocument(BaseDocument):
    """MongoDB rewards 컬렉션 도큐먼트 모델."""

    name: str
    description: str
    image: str = DEFAULT_REWARD_IMAGE
    credit_cost: float
    category: str
    is_available: bool = True

    @classmethod
    def from_domain(cls, reward: Reward) -> "RewardDocument":
        data = build_document_data_from_domain(reward)
        return cls.model_validate(data)

    def to_domain(self) -> Reward:
        return Reward(
            id=from_object_id(self.id),
            name=self.name,
            description=self.description,
            image=self.image,
            credit_cost=self.credit_cost,
            category=self.category,
            is_available=self.is_available,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
