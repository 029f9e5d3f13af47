"""리워드 교환(redemption) 워크플로.

교환 요청 시 크레딧을 먼저 차감하고 Pending 요청을 만든다. 관리자가 거절하면
요청에 스냅샷된 비용을 그대로 환불한다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database
from pymongo.errors import PyMongoError

from common.models.user import User
from common.mongo.client import get_database

from ..exceptions import (
    AlreadyProcessedError,
    InsufficientCreditsError,
    InvalidStatusError,
    RedemptionNotFoundError,
    RewardUnavailableError,
    UserNotFoundError,
)
from ..models.credit import CreditReason
from ..models.redemption import REDEMPTION_DECISIONS, Redemption, RedemptionStatus
from ..notifications import NotifierInterface, WebhookChannel, get_notifier
from ..notifications import messages
from ..repositories.interfaces import (
    RedemptionRepositoryInterface,
    RewardRepositoryInterface,
    UserRepositoryInterface,
)
from ..repositories.redemption_repository import RedemptionRepository
from .credit_service import CreditLedgerService, get_credit_ledger_service
from .rewards_service import get_reward_repository
from .users_service import get_user_repository


logger = logging.getLogger(__name__)


class RedemptionService:
    def __init__(
        self,
        reward_repo: RewardRepositoryInterface,
        redemption_repo: RedemptionRepositoryInterface,
        user_repo: UserRepositoryInterface,
        ledger: CreditLedgerService,
        notifier: NotifierInterface,
    ) -> None:
        self._reward_repo = reward_repo
        self._redemption_repo = redemption_repo
        self._user_repo = user_repo
        self._ledger = ledger
        self._notifier = notifier

    def submit_redemption(
        self, user_code: str, reward_id: str
    ) -> tuple[float, Redemption]:
        """리워드 교환 요청. (차감 후 잔액, 생성된 요청) 을 반환한다."""

        reward = self._reward_repo.find_by_id(reward_id)
        if reward is None or not reward.is_available:
            raise RewardUnavailableError()

        user = self._user_repo.find_by_user_code(user_code)
        if user is None:
            raise UserNotFoundError()
        if user.credits < reward.credit_cost:
            raise InsufficientCreditsError(
                f"insufficient credits to redeem {reward.name!r}"
            )

        # 위 검사는 빠른 실패용이다. 동시 요청은 원장의 조건부 차감이 막는다.
        new_balance = self._ledger.apply_credit_delta(
            user_code,
            -reward.credit_cost,
            CreditReason.REDEMPTION,
            metadata={"reward_id": reward.id, "reward_name": reward.name},
        )

        now = datetime.now(timezone.utc)
        try:
            redemption = self._redemption_repo.insert(
                Redemption(
                    user_code=user_code,
                    reward_id=str(reward.id),
                    reward_name=reward.name,
                    credit_cost=reward.credit_cost,
                    status=RedemptionStatus.PENDING,
                    redeemed_at=now,
                    created_at=now,
                    updated_at=now,
                )
            )
        except PyMongoError:
            # 요청 기록에 실패하면 차감분을 되돌린다.
            logger.error(
                "failed to record redemption, refunding debit",
                extra={"user_code": user_code},
            )
            self._ledger.apply_credit_delta(
                user_code,
                reward.credit_cost,
                CreditReason.REDEMPTION_REFUND,
                metadata={"reward_id": reward.id, "failed_submission": True},
            )
            raise

        logger.info(
            "redemption submitted for %s (%s credits)",
            reward.name,
            reward.credit_cost,
            extra={"user_code": user_code, "redemption_id": redemption.id},
        )

        self._notifier.notify(
            WebhookChannel.REDEEM_REQUEST,
            messages.redemption_request_webhook(redemption, user),
        )
        message, embeds = messages.redemption_request_dm(redemption)
        self._notifier.send_dm(user.provider_sub, message, embeds)

        return new_balance, redemption

    def process_redemption(
        self,
        redemption_id: str,
        decision: str,
        admin: User,
        remarks: str | None = None,
    ) -> Redemption:
        """관리자 승인/거절. 거절 시 스냅샷된 비용을 환불한다."""

        redemption = self._redemption_repo.find_by_id(redemption_id)
        if redemption is None:
            raise RedemptionNotFoundError()

        try:
            status = RedemptionStatus(decision)
        except ValueError as exc:
            raise InvalidStatusError(f"invalid redemption status: {decision!r}") from exc
        if status not in REDEMPTION_DECISIONS:
            raise InvalidStatusError(f"invalid redemption status: {decision!r}")

        if redemption.status != RedemptionStatus.PENDING:
            raise AlreadyProcessedError()

        updated = self._redemption_repo.complete_pending(
            redemption_id,
            status=status,
            admin_remarks=remarks,
            processed_by=admin.user_code,
            processed_at=datetime.now(timezone.utc),
        )
        if updated is None:
            # 조회 이후 다른 관리자가 먼저 처리했다.
            raise AlreadyProcessedError()

        if status == RedemptionStatus.REJECTED:
            self._ledger.apply_credit_delta(
                updated.user_code,
                updated.credit_cost,
                CreditReason.REDEMPTION_REFUND,
                metadata={"redemption_id": updated.id},
            )

        logger.info(
            "redemption %s by %s",
            status.value.lower(),
            admin.user_code,
            extra={"user_code": updated.user_code, "redemption_id": updated.id},
        )

        owner = self._user_repo.find_by_user_code(updated.user_code)
        if owner is not None:
            message, embeds = messages.redemption_processed_dm(updated)
            self._notifier.send_dm(owner.provider_sub, message, embeds)

        return updated

    def list_user_redemptions(self, user_code: str) -> list[Redemption]:
        return self._redemption_repo.list_by_user(user_code)

    def list_all_redemptions(self) -> list[Redemption]:
        return self._redemption_repo.list_all()


def get_redemption_repository(
    db: Database = Depends(get_database),
) -> RedemptionRepositoryInterface:
    return RedemptionRepository(db)


def get_redemption_service(
    reward_repo: RewardRepositoryInterface = Depends(get_reward_repository),
    redemption_repo: RedemptionRepositoryInterface = Depends(
        get_redemption_repository
    ),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    ledger: CreditLedgerService = Depends(get_credit_ledger_service),
    notifier: NotifierInterface = Depends(get_notifier),
) -> RedemptionService:
    """FastAPI DI용 RedemptionService 팩토리."""

    return RedemptionService(
        reward_repo=reward_repo,
        redemption_repo=redemption_repo,
        user_repo=user_repo,
        ledger=ledger,
        notifier=notifier,
    )
