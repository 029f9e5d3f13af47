"""크레딧 원장 서비스.

모든 잔액 변경은 apply_credit_delta 를 거친다. 잔액 자체의 원자성은 저장소의
조건부 갱신이 보장하고, 여기서는 실패 원인 구분과 트랜잭션 로깅을 담당한다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.mongo.client import get_database
from common.types.money import round_amount

from ..exceptions import InsufficientCreditsError, UserNotFoundError
from ..models.credit import CreditReason, CreditTransaction, CreditTransactionType
from ..repositories.credit_repository import CreditTransactionRepository
from ..repositories.interfaces import (
    CreditTransactionRepositoryInterface,
    UserRepositoryInterface,
)
from .users_service import get_user_repository


logger = logging.getLogger(__name__)


class CreditLedgerService:
    """크레딧 잔액 변경 비즈니스 로직."""

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        transaction_repo: CreditTransactionRepositoryInterface,
    ) -> None:
        self._user_repo = user_repo
        self._transaction_repo = transaction_repo

    def apply_credit_delta(
        self,
        user_code: str,
        delta: float,
        reason: CreditReason,
        metadata: dict[str, Any] | None = None,
    ) -> float:
        """잔액에 delta 를 반영하고 새 잔액을 반환한다.

        - 유저가 없으면 UserNotFoundError
        - 차감 결과가 0 미만이면 InsufficientCreditsError (잔액은 바뀌지 않는다)
        """

        delta = round_amount(delta)
        updated = self._user_repo.apply_credit_delta(user_code, delta)
        if updated is None:
            if self._user_repo.find_by_user_code(user_code) is None:
                raise UserNotFoundError()
            raise InsufficientCreditsError()

        now = datetime.now(timezone.utc)
        try:
            self._transaction_repo.create(
                CreditTransaction(
                    user_code=user_code,
                    type=CreditTransactionType.CREDIT
                    if delta >= 0
                    else CreditTransactionType.DEBIT,
                    amount=delta,
                    reason=reason,
                    balance_after=updated.credits,
                    metadata=metadata,
                    created_at=now,
                    updated_at=now,
                )
            )
        except PyMongoError:
            # 잔액은 이미 반영됐다. 이력 기록 실패로 호출자의 흐름을 되돌리지 않는다.
            logger.exception(
                "failed to record credit transaction: delta=%s reason=%s",
                delta,
                reason.value,
                extra={"user_code": user_code},
            )

        logger.info(
            "credit delta applied: delta=%s reason=%s balance=%s",
            delta,
            reason.value,
            updated.credits,
            extra={"user_code": user_code},
        )
        return updated.credits

    def adjust_credits(
        self,
        user_code: str,
        delta: float,
        admin_code: str,
        note: str | None = None,
    ) -> float:
        """관리자 수동 조정. 차감도 동일한 잔액 규칙을 따른다."""

        return self.apply_credit_delta(
            user_code,
            delta,
            CreditReason.ADMIN_ADJUSTMENT,
            metadata={"adjusted_by": admin_code, "note": note},
        )

    def get_history(
        self, user_code: str, page: int = 1, page_size: int = 20
    ) -> tuple[list[CreditTransaction], int]:
        """크레딧 변경 이력 조회."""
        if self._user_repo.find_by_user_code(user_code) is None:
            raise UserNotFoundError()
        return self._transaction_repo.list_by_user(user_code, page, page_size)


def get_credit_transaction_repository(
    db: Database = Depends(get_database),
) -> CreditTransactionRepositoryInterface:
    return CreditTransactionRepository(db)


def get_credit_ledger_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    transaction_repo: CreditTransactionRepositoryInterface = Depends(
        get_credit_transaction_repository
    ),
) -> CreditLedgerService:
    """FastAPI DI용 CreditLedgerService 팩토리."""

    return CreditLedgerService(user_repo=user_repo, transaction_repo=transaction_repo)
