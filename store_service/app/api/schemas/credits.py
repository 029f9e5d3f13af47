from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from common.types.datetime import UtcDateTime
from common.types.money import Amount

from ...models.credit import CreditTransaction


class AdjustCreditsRequest(BaseModel):
    """관리자 수동 크레딧 조정 요청. 음수면 차감."""

    amount: Amount
    note: str | None = None


class AdjustCreditsResponse(BaseModel):
    user_code: str
    new_balance: float


class CreditTransactionResponse(BaseModel):
    id: str | None
    type: str
    amount: float
    reason: str
    balance_after: float
    metadata: dict[str, Any] | None = None
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, tx: CreditTransaction) -> "CreditTransactionResponse":
        return cls(
            id=tx.id,
            type=tx.type.value,
            amount=tx.amount,
            reason=tx.reason.value,
            balance_after=tx.balance_after,
            metadata=tx.metadata,
            created_at=tx.created_at,
        )
