from __future__ import annotations

from common.mongo.types import (
    BaseDocument,
    MongoDateTime,
    build_document_data_from_domain,
    from_object_id,
)

from ...models.redemption import Redemption


class RedemptionDocument(BaseDocument):
    """MongoDB redemptions 컬렉션 도큐먼트 모델."""

    user_code: str
    reward_id: str
    reward_name: str
    credit_cost: float
    status: str
    admin_remarks: str | None = None
    processed_by: str | None = None
    redeemed_at: MongoDateTime
    processed_at: MongoDateTime | None = None

    @classmethod
    def from_domain(cls, redemption: Redemption) -> "RedemptionDocument":
        data = build_document_data_from_domain(redemption)
        return cls.model_validate(data)

    def to_domain(self) -> Redemption:
        return Redemption(
            id=from_object_id(self.id),
            user_code=self.user_code,
            reward_id=self.reward_id,
            reward_name=self.reward_name,
            credit_cost=self.credit_cost,
            status=self.status,
            admin_remarks=self.admin_remarks,
            processed_by=self.processed_by,
            redeemed_at=self.redeemed_at,
            processed_at=self.processed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
