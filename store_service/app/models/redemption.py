"""리워드 교환 요청 도메인 모델.

Pending -> Approved | Rejected 로만 전이하며, 처리된 요청은 다시 바뀌지 않는다.
교환 시점의 리워드 이름/비용을 스냅샷으로 보관하므로 거절 시 환불액은 항상 이 값이다.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from common.types.money import Amount


class RedemptionStatus(StrEnum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# 관리자가 내릴 수 있는 결정
REDEMPTION_DECISIONS: frozenset[RedemptionStatus] = frozenset(
    {RedemptionStatus.APPROVED, RedemptionStatus.REJECTED}
)


class Redemption(BaseModel):
    id: str | None = None
    user_code: str
    reward_id: str
    reward_name: str  # 스냅샷
    credit_cost: Amount  # 스냅샷
    status: RedemptionStatus = RedemptionStatus.PENDING
    admin_remarks: str | None = None
    processed_by: str | None = None
    redeemed_at: datetime
    processed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
