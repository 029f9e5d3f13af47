"""주문 처리 워크플로.

- 주문 생성 시 상품 정보를 스냅샷으로 저장하고 총액을 고정한다.
- 상태 변경은 전이 표를 따른다.
- 추천 코드로 들어온 주문이 처음 Delivered 가 될 때 추천인에게 한 번만 크레딧을 지급한다.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from common.models.user import User, UserRole
from common.mongo.client import get_database
from common.types.money import round_amount

from ..config import AppConfig, LedgerConfig, OrderConfig, get_app_config
from ..exceptions import (
    EmptyOrderError,
    InvalidQuantityError,
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    ProductNotFoundError,
    StoreServiceError,
    UserNotFoundError,
)
from ..models.credit import CreditReason
from ..models.order import (
    Order,
    OrderItem,
    OrderItemInput,
    OrderStatus,
    can_transition,
)
from ..notifications import NotifierInterface, WebhookChannel, get_notifier
from ..notifications import messages
from ..repositories.interfaces import (
    OrderRepositoryInterface,
    ProductRepositoryInterface,
    UserRepositoryInterface,
)
from ..repositories.order_repository import OrderRepository
from .credit_service import CreditLedgerService, get_credit_ledger_service
from .products_service import get_product_repository
from .users_service import get_user_repository


logger = logging.getLogger(__name__)


MAX_ORDER_NUMBER_ATTEMPTS = 3


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999)}"


class OrderService:
    def __init__(
        self,
        order_repo: OrderRepositoryInterface,
        product_repo: ProductRepositoryInterface,
        user_repo: UserRepositoryInterface,
        ledger: CreditLedgerService,
        notifier: NotifierInterface,
        ledger_config: LedgerConfig,
        order_config: OrderConfig,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._user_repo = user_repo
        self._ledger = ledger
        self._notifier = notifier
        self._ledger_config = ledger_config
        self._order_config = order_config

    # ── 주문 생성 ──────────────────────────────────────────────────

    def place_order(
        self,
        user_code: str,
        items: list[OrderItemInput],
        referral_code: str | None = None,
    ) -> Order:
        if not items:
            raise EmptyOrderError()

        buyer = self._user_repo.find_by_user_code(user_code)
        if buyer is None:
            raise UserNotFoundError()

        order_items: list[OrderItem] = []
        for item in items:
            product = self._product_repo.find_by_id(item.product_id)
            if product is None:
                raise ProductNotFoundError(
                    f"product with id {item.product_id} not found"
                )
            if item.quantity <= 0:
                raise InvalidQuantityError(
                    f"quantity for {product.name} must be positive"
                )
            order_items.append(
                OrderItem(
                    product_id=str(product.id),
                    name=product.name,
                    price=product.effective_price,
                    quantity=item.quantity,
                    image=product.image,
                )
            )

        total_amount = round_amount(sum(item.line_total for item in order_items))
        referred_by = self._resolve_order_referrer(buyer, referral_code)

        order: Order | None = None
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            now = datetime.now(timezone.utc)
            candidate = Order(
                user_code=user_code,
                order_number=generate_order_number(),
                items=order_items,
                total_amount=total_amount,
                status=OrderStatus.PENDING,
                referral_code_used=referral_code if referred_by else None,
                referred_by=referred_by,
                created_at=now,
                updated_at=now,
            )
            try:
                order = self._order_repo.insert(candidate)
                break
            except DuplicateKeyError:
                logger.warning("order number collision: %s", candidate.order_number)
        if order is None:
            raise RuntimeError("failed to allocate a unique order number")

        logger.info(
            "order placed: total=%s items=%s",
            order.total_amount,
            len(order.items),
            extra={"user_code": user_code, "order_number": order.order_number},
        )

        self._notifier.notify(
            WebhookChannel.ORDER_CONFIRMATION,
            messages.order_confirmation_webhook(order, buyer),
        )
        message, embeds = messages.order_confirmation_dm(order)
        self._notifier.send_dm(buyer.provider_sub, message, embeds)

        return order

    def _resolve_order_referrer(
        self, buyer: User, referral_code: str | None
    ) -> str | None:
        """추천 코드를 추천인 user_code 로 바꾼다. 잘못된 코드와 본인 추천은 무시한다."""

        if not referral_code:
            return None

        referrer = self._user_repo.find_by_referral_code(referral_code.strip().upper())
        if referrer is None:
            logger.info(
                "unknown referral code ignored: %s",
                referral_code,
                extra={"user_code": buyer.user_code},
            )
            return None
        if referrer.user_code == buyer.user_code:
            logger.info(
                "self-referral ignored: %s",
                referral_code,
                extra={"user_code": buyer.user_code},
            )
            return None
        return referrer.user_code

    # ── 상태 변경 ──────────────────────────────────────────────────

    def set_order_status(
        self,
        order_id: str,
        new_status: str,
        remarks: str | None,
        acting_user: User,
    ) -> Order:
        """주문 상태를 바꾼다. remarks=None 은 비고 유지, "" 는 비고 삭제."""

        try:
            status = OrderStatus(new_status)
        except ValueError as exc:
            raise InvalidStatusError(f"invalid order status: {new_status!r}") from exc

        order = self._order_repo.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError()

        previous_status = order.status
        if not can_transition(
            previous_status, status, strict=self._order_config.strict_transitions
        ):
            raise InvalidTransitionError(
                f"cannot change order status from {previous_status.value} to {status.value}"
            )

        updated = self._order_repo.update_status(
            order_id,
            status=status,
            admin_remarks=remarks or None,
            set_remarks=remarks is not None,
        )
        if updated is None:
            raise OrderNotFoundError()

        logger.info(
            "order status %s -> %s by %s",
            previous_status.value,
            status.value,
            acting_user.user_code,
            extra={"order_number": updated.order_number},
        )

        if previous_status != OrderStatus.DELIVERED and status == OrderStatus.DELIVERED:
            if self._credit_referrer(updated):
                updated = updated.model_copy(update={"referral_credited": True})

        owner = self._user_repo.find_by_user_code(updated.user_code)
        self._notifier.notify(
            WebhookChannel.ORDER_STATUS_CHANGE,
            messages.order_status_webhook(updated, owner, previous_status, acting_user),
        )
        if owner is not None:
            message, embeds = messages.order_status_dm(updated)
            self._notifier.send_dm(owner.provider_sub, message, embeds)

        return updated

    def _credit_referrer(self, order: Order) -> bool:
        """첫 배송 완료 시 추천인 보상을 정산한다. referral_credited 를 세웠으면 True.

        - 지급액이 0 이하여도 첫 배송 완료 시점에 정산된 것으로 기록한다.
        - 실패는 로그만 남기고 상태 변경을 막지 않는다.
        """

        if not order.referred_by or order.referral_credited:
            return False

        referrer = self._user_repo.find_by_user_code(order.referred_by)
        if referrer is None:
            logger.warning(
                "referrer %s not found, referral credit skipped",
                order.referred_by,
                extra={"order_number": order.order_number},
            )
            return False

        # 플래그를 먼저 선점해 Delivered -> Cancelled -> Delivered 나 동시 요청에서도 한 번만 지급한다.
        if not self._order_repo.claim_referral_credit(str(order.id)):
            return False

        amount = round_amount(
            order.total_amount * self._ledger_config.referral_credit_percentage / 100
        )
        if amount <= 0:
            logger.info(
                "referral settled without credit (amount=%s)",
                amount,
                extra={"order_number": order.order_number, "user_code": referrer.user_code},
            )
            return True

        try:
            self._ledger.apply_credit_delta(
                referrer.user_code,
                amount,
                CreditReason.REFERRAL,
                metadata={"order_id": order.id, "order_number": order.order_number},
            )
        except (StoreServiceError, PyMongoError):
            logger.exception(
                "referral credit failed",
                extra={"order_number": order.order_number, "user_code": referrer.user_code},
            )
            self._order_repo.release_referral_credit(str(order.id))
            return False

        logger.info(
            "referral credit %s granted",
            amount,
            extra={"order_number": order.order_number, "user_code": referrer.user_code},
        )
        return True

    def set_order_visibility(self, order_id: str, hidden: bool) -> Order:
        updated = self._order_repo.set_hidden(order_id, hidden)
        if updated is None:
            raise OrderNotFoundError()
        return updated

    # ── 조회 ──────────────────────────────────────────────────────

    def list_user_orders(self, user_code: str) -> list[Order]:
        return self._order_repo.list_by_user(user_code)

    def get_user_order(self, user_code: str, order_id: str) -> Order:
        order = self._order_repo.find_by_id_for_user(order_id, user_code)
        if order is None:
            raise OrderNotFoundError()
        return order

    def list_all_orders(self, viewer_role: UserRole) -> list[Order]:
        # Staff 에게는 관리자가 숨긴 주문을 보여주지 않는다.
        return self._order_repo.list_all(
            include_hidden=viewer_role.at_least(UserRole.ADMIN)
        )


def get_order_repository(
    db: Database = Depends(get_database),
) -> OrderRepositoryInterface:
    return OrderRepository(db)


def get_order_service(
    order_repo: OrderRepositoryInterface = Depends(get_order_repository),
    product_repo: ProductRepositoryInterface = Depends(get_product_repository),
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    ledger: CreditLedgerService = Depends(get_credit_ledger_service),
    notifier: NotifierInterface = Depends(get_notifier),
    config: AppConfig = Depends(get_app_config),
) -> OrderService:
    """FastAPI DI용 OrderService 팩토리."""

    return OrderService(
        order_repo=order_repo,
        product_repo=product_repo,
        user_repo=user_repo,
        ledger=ledger,
        notifier=notifier,
        ledger_config=config.ledger,
        order_config=config.orders,
    )
