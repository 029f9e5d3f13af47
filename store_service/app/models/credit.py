"""크레딧 원장 도메인 모델.

잔액 자체는 users.credits 단일 필드에 있고, 모든 변경은 원장 연산을 거친다.
CreditTransaction 은 커밋된 변경마다 남기는 감사 로그다.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from common.types.money import Amount


class CreditTransactionType(StrEnum):
    CREDIT = "credit"
    DEBIT = "debit"


class CreditReason(StrEnum):
    REDEMPTION = "redemption"
    REDEMPTION_REFUND = "redemption_refund"
    REFERRAL = "referral"
    ADMIN_ADJUSTMENT = "admin_adjustment"


class CreditTransaction(BaseModel):
    """크레딧 트랜잭션 로그 도메인 모델."""

    id: str | None = None
    user_code: str
    type: CreditTransactionType
    amount: Amount  # 부호 있는 변화량 (차감은 음수)
    reason: CreditReason
    balance_after: Amount
    metadata: dict | None = None
    created_at: datetime
    updated_at: datetime
