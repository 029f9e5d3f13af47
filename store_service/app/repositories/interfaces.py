from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from common.models.user import User, UserRole
from ..models.announcement import Announcement
from ..models.credit import CreditTransaction
from ..models.login_session import LoginSession
from ..models.order import Order, OrderStatus
from ..models.product import Product
from ..models.redemption import Redemption, RedemptionStatus
from ..models.reward import Reward


class UserRepositoryInterface(Protocol):
    """UserRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    잔액(credits)은 apply_credit_delta 로만 변경한다.
    """

    def find_by_provider_and_sub(
        self, provider: str, provider_sub: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def find_by_user_code(
        self, user_code: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def find_by_referral_code(
        self, referral_code: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def referral_code_exists(
        self, referral_code: str
    ) -> bool:  # pragma: no cover - Protocol
        ...

    def insert(self, user: User) -> User:  # pragma: no cover - Protocol
        ...

    def update_login_profile(
        self,
        user_code: str,
        email: str,
        name: str,
        profile_image: str | None,
    ) -> User | None:  # pragma: no cover - Protocol
        """OAuth 재로그인 시 프로필과 last_login_at 을 갱신한다."""
        ...

    def update_role(
        self, user_code: str, role: UserRole
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def apply_credit_delta(
        self, user_code: str, delta: float
    ) -> User | None:  # pragma: no cover - Protocol
        """잔액에 delta 를 원자적으로 더한다.

        결과 잔액이 0 미만이 되거나 유저가 없으면 아무것도 바꾸지 않고 None 을 반환한다.
        """
        ...

    def list(
        self, page: int, page_size: int
    ) -> tuple[list[User], int]:  # pragma: no cover - Protocol
        ...


class CreditTransactionRepositoryInterface(Protocol):
    """크레딧 변경 감사 로그 저장소."""

    def create(
        self, tx: CreditTransaction
    ) -> CreditTransaction:  # pragma: no cover - Protocol
        ...

    def list_by_user(
        self, user_code: str, page: int, page_size: int
    ) -> tuple[list[CreditTransaction], int]:  # pragma: no cover - Protocol
        ...


class ProductRepositoryInterface(Protocol):
    def find_by_id(self, product_id: str) -> Product | None:  # pragma: no cover
        ...

    def list(
        self, featured_only: bool = False
    ) -> list[Product]:  # pragma: no cover - Protocol
        ...

    def insert(self, product: Product) -> Product:  # pragma: no cover - Protocol
        """이름이 중복되면 DuplicateNameError 를 발생시킨다."""
        ...

    def update(
        self, product_id: str, fields: dict[str, Any]
    ) -> Product | None:  # pragma: no cover - Protocol
        ...

    def delete(self, product_id: str) -> bool:  # pragma: no cover - Protocol
        ...


class RewardRepositoryInterface(Protocol):
    def find_by_id(self, reward_id: str) -> Reward | None:  # pragma: no cover
        ...

    def list(
        self, available_only: bool = False
    ) -> list[Reward]:  # pragma: no cover - Protocol
        ...

    def insert(self, reward: Reward) -> Reward:  # pragma: no cover - Protocol
        ...

    def update(
        self, reward_id: str, fields: dict[str, Any]
    ) -> Reward | None:  # pragma: no cover - Protocol
        ...

    def delete(self, reward_id: str) -> bool:  # pragma: no cover - Protocol
        ...


class OrderRepositoryInterface(Protocol):
    """orders 저장소 계약.

    - 상태/비고/노출 여부 변경은 부분 업데이트로만 수행한다.
    - referral_credited 플래그는 조건부 업데이트로 한 번만 세운다.
    """

    def insert(self, order: Order) -> Order:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, order_id: str) -> Order | None:  # pragma: no cover
        ...

    def find_by_id_for_user(
        self, order_id: str, user_code: str
    ) -> Order | None:  # pragma: no cover - Protocol
        ...

    def list_by_user(self, user_code: str) -> list[Order]:  # pragma: no cover
        ...

    def list_all(
        self, include_hidden: bool
    ) -> list[Order]:  # pragma: no cover - Protocol
        ...

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_remarks: str | None,
        set_remarks: bool,
    ) -> Order | None:  # pragma: no cover - Protocol
        ...

    def set_hidden(
        self, order_id: str, hidden: bool
    ) -> Order | None:  # pragma: no cover - Protocol
        ...

    def claim_referral_credit(
        self, order_id: str
    ) -> bool:  # pragma: no cover - Protocol
        """referral_credited 가 False 인 경우에만 True 로 바꾸고 True 를 반환한다."""
        ...

    def release_referral_credit(
        self, order_id: str
    ) -> None:  # pragma: no cover - Protocol
        ...


class RedemptionRepositoryInterface(Protocol):
    def insert(
        self, redemption: Redemption
    ) -> Redemption:  # pragma: no cover - Protocol
        ...

    def find_by_id(
        self, redemption_id: str
    ) -> Redemption | None:  # pragma: no cover - Protocol
        ...

    def list_by_user(
        self, user_code: str
    ) -> list[Redemption]:  # pragma: no cover - Protocol
        ...

    def list_all(self) -> list[Redemption]:  # pragma: no cover - Protocol
        ...

    def complete_pending(
        self,
        redemption_id: str,
        status: RedemptionStatus,
        admin_remarks: str | None,
        processed_by: str,
        processed_at: datetime,
    ) -> Redemption | None:  # pragma: no cover - Protocol
        """Pending 상태일 때만 결정을 기록한다. 이미 처리됐으면 None."""
        ...


class AnnouncementRepositoryInterface(Protocol):
    def insert(
        self, announcement: Announcement
    ) -> Announcement:  # pragma: no cover - Protocol
        ...

    def find_by_id(
        self, announcement_id: str
    ) -> Announcement | None:  # pragma: no cover - Protocol
        ...

    def list(
        self, active_only: bool = False
    ) -> list[Announcement]:  # pragma: no cover - Protocol
        ...

    def update(
        self, announcement_id: str, fields: dict[str, Any]
    ) -> Announcement | None:  # pragma: no cover - Protocol
        ...

    def delete(self, announcement_id: str) -> bool:  # pragma: no cover - Protocol
        ...


class LoginSessionRepositoryInterface(Protocol):
    """LoginSessionRepository가 따라야 할 최소한의 계약.

    - 세션은 한 번만 사용 가능하며, session_id 로 삭제/조회한다.
    """

    def create(
        self, session: LoginSession
    ) -> LoginSession:  # pragma: no cover - Protocol
        ...

    def delete_by_session_id(
        self, session_id: str
    ) -> LoginSession | None:  # pragma: no cover - Protocol
        ...
