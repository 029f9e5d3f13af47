from __future__ import annotations

from pydantic import BaseModel

from common.types.datetime import OptionalUtcDateTime, UtcDateTime

from ...models.redemption import Redemption


class RedeemResponse(BaseModel):
    message: str
    new_credits: float
    redemption_id: str


class ProcessRedemptionRequest(BaseModel):
    status: str
    admin_remarks: str | None = None


class RedemptionResponse(BaseModel):
    id: str | None
    user_code: str
    reward_id: str
    reward_name: str
    credit_cost: float
    status: str
    admin_remarks: str | None
    processed_by: str | None
    redeemed_at: UtcDateTime
    processed_at: OptionalUtcDateTime = None

    @classmethod
    def from_domain(cls, redemption: Redemption) -> "RedemptionResponse":
        return cls(
            id=redemption.id,
            user_code=redemption.user_code,
            reward_id=redemption.reward_id,
            reward_name=redemption.reward_name,
            credit_cost=redemption.credit_cost,
            status=redemption.status.value,
            admin_remarks=redemption.admin_remarks,
            processed_by=redemption.processed_by,
            redeemed_at=redemption.redeemed_at,
            processed_at=redemption.processed_at,
        )
