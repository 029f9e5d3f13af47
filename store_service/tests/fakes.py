"""테스트용 인메모리 저장소/알림 구현.

Mongo 구현과 같은 계약(조건부 갱신 포함)을 락으로 흉내 낸다.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from common.models.user import User, UserRole
from common.types.money import round_amount
from store_service.app.exceptions import DuplicateNameError
from store_service.app.models.announcement import Announcement
from store_service.app.models.credit import CreditTransaction
from store_service.app.models.login_session import LoginSession
from store_service.app.models.order import Order, OrderStatus
from store_service.app.models.product import Product, ProductCategory
from store_service.app.models.redemption import Redemption, RedemptionStatus
from store_service.app.models.reward import Reward


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(ObjectId())


def build_user(
    *,
    user_code: str = "discord:user-001",
    provider_sub: str = "1001",
    name: str = "buyer",
    role: UserRole = UserRole.CLIENT,
    credits: float = 0,
    referral_code: str = "BUYER001",
    referred_by: str | None = None,
) -> User:
    now = _now()
    return User(
        user_code=user_code,
        provider="discord",
        provider_sub=provider_sub,
        email=f"{name}@example.com",
        name=name,
        role=role,
        credits=credits,
        referral_code=referral_code,
        referred_by=referred_by,
        created_at=now,
        updated_at=now,
    )


def build_product(
    *,
    name: str = "Nitro Boost",
    price: float = 10.0,
    discount_price: float | None = None,
    product_id: str | None = None,
) -> Product:
    now = _now()
    return Product(
        id=product_id or _new_id(),
        name=name,
        description=f"{name} description",
        price=price,
        discount_price=discount_price,
        image=f"https://cdn.example.com/{name}.png",
        category=ProductCategory.BOOSTS,
        created_at=now,
        updated_at=now,
    )


def build_reward(
    *,
    name: str = "Custom Role",
    credit_cost: float = 50.0,
    is_available: bool = True,
    reward_id: str | None = None,
) -> Reward:
    now = _now()
    return Reward(
        id=reward_id or _new_id(),
        name=name,
        description=f"{name} description",
        credit_cost=credit_cost,
        is_available=is_available,
        created_at=now,
        updated_at=now,
    )


class FakeUserRepository:
    def __init__(self, users: list[User] | None = None) -> None:
        self._lock = threading.Lock()
        self.users: dict[str, User] = {u.user_code: u for u in users or []}

    def add(self, user: User) -> User:
        self.users[user.user_code] = user
        return user

    def find_by_provider_and_sub(self, provider: str, provider_sub: str) -> User | None:
        for user in self.users.values():
            if user.provider == provider and user.provider_sub == provider_sub:
                return user
        return None

    def find_by_user_code(self, user_code: str) -> User | None:
        return self.users.get(user_code)

    def find_by_referral_code(self, referral_code: str) -> User | None:
        for user in self.users.values():
            if user.referral_code == referral_code:
                return user
        return None

    def referral_code_exists(self, referral_code: str) -> bool:
        return self.find_by_referral_code(referral_code) is not None

    def insert(self, user: User) -> User:
        with self._lock:
            if self.find_by_provider_and_sub(user.provider, user.provider_sub):
                raise DuplicateKeyError("duplicate provider/provider_sub")
            self.users[user.user_code] = user
        return user

    def update_login_profile(
        self,
        user_code: str,
        email: str,
        name: str,
        profile_image: str | None,
    ) -> User | None:
        user = self.users.get(user_code)
        if user is None:
            return None
        now = _now()
        updated = user.model_copy(
            update={
                "email": email,
                "name": name,
                "profile_image": profile_image,
                "last_login_at": now,
                "updated_at": now,
            }
        )
        self.users[user_code] = updated
        return updated

    def update_role(self, user_code: str, role: UserRole) -> User | None:
        user = self.users.get(user_code)
        if user is None:
            return None
        updated = user.model_copy(update={"role": role, "updated_at": _now()})
        self.users[user_code] = updated
        return updated

    def apply_credit_delta(self, user_code: str, delta: float) -> User | None:
        # Mongo 구현의 조건부 $inc 와 같이 확인과 반영을 하나의 임계 구역에서 처리한다.
        with self._lock:
            user = self.users.get(user_code)
            if user is None:
                return None
            new_balance = round_amount(user.credits + delta)
            if new_balance < 0:
                return None
            updated = user.model_copy(
                update={"credits": new_balance, "updated_at": _now()}
            )
            self.users[user_code] = updated
            return updated

    def list(self, page: int, page_size: int) -> tuple[list[User], int]:
        users = list(self.users.values())
        start = (page - 1) * page_size
        return users[start : start + page_size], len(users)


class FakeCreditTransactionRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.created: list[CreditTransaction] = []

    def create(self, tx: CreditTransaction) -> CreditTransaction:
        stored = tx.model_copy(update={"id": _new_id()})
        with self._lock:
            self.created.append(stored)
        return stored

    def list_by_user(
        self, user_code: str, page: int, page_size: int
    ) -> tuple[list[CreditTransaction], int]:
        items = [tx for tx in reversed(self.created) if tx.user_code == user_code]
        start = (page - 1) * page_size
        return items[start : start + page_size], len(items)


class FailingCreditTransactionRepository(FakeCreditTransactionRepository):
    """이력 기록이 항상 실패하는 저장소."""

    def create(self, tx: CreditTransaction) -> CreditTransaction:
        raise PyMongoError("write failed")


class FakeProductRepository:
    def __init__(self, products: list[Product] | None = None) -> None:
        self.products: dict[str, Product] = {str(p.id): p for p in products or []}

    def find_by_id(self, product_id: str) -> Product | None:
        return self.products.get(product_id)

    def list(self, featured_only: bool = False) -> list[Product]:
        return [p for p in self.products.values() if p.is_featured or not featured_only]

    def insert(self, product: Product) -> Product:
        if any(p.name == product.name for p in self.products.values()):
            raise DuplicateNameError()
        stored = product.model_copy(update={"id": _new_id()})
        self.products[str(stored.id)] = stored
        return stored

    def update(self, product_id: str, fields: dict[str, Any]) -> Product | None:
        product = self.products.get(product_id)
        if product is None:
            return None
        updated = Product.model_validate({**product.model_dump(), **fields})
        self.products[product_id] = updated
        return updated

    def delete(self, product_id: str) -> bool:
        return self.products.pop(product_id, None) is not None


class FakeRewardRepository:
    def __init__(self, rewards: list[Reward] | None = None) -> None:
        self.rewards: dict[str, Reward] = {str(r.id): r for r in rewards or []}

    def find_by_id(self, reward_id: str) -> Reward | None:
        return self.rewards.get(reward_id)

    def list(self, available_only: bool = False) -> list[Reward]:
        return [r for r in self.rewards.values() if r.is_available or not available_only]

    def insert(self, reward: Reward) -> Reward:
        stored = reward.model_copy(update={"id": _new_id()})
        self.rewards[str(stored.id)] = stored
        return stored

    def update(self, reward_id: str, fields: dict[str, Any]) -> Reward | None:
        reward = self.rewards.get(reward_id)
        if reward is None:
            return None
        updated = Reward.model_validate({**reward.model_dump(), **fields})
        self.rewards[reward_id] = updated
        return updated

    def delete(self, reward_id: str) -> bool:
        return self.rewards.pop(reward_id, None) is not None


class FakeOrderRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.orders: dict[str, Order] = {}

    def insert(self, order: Order) -> Order:
        stored = order.model_copy(update={"id": _new_id()})
        self.orders[str(stored.id)] = stored
        return stored

    def find_by_id(self, order_id: str) -> Order | None:
        return self.orders.get(order_id)

    def find_by_id_for_user(self, order_id: str, user_code: str) -> Order | None:
        order = self.orders.get(order_id)
        if order is None or order.user_code != user_code:
            return None
        return order

    def list_by_user(self, user_code: str) -> list[Order]:
        return [o for o in self.orders.values() if o.user_code == user_code]

    def list_all(self, include_hidden: bool) -> list[Order]:
        return [
            o
            for o in self.orders.values()
            if include_hidden or not o.is_hidden_from_staff
        ]

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_remarks: str | None,
        set_remarks: bool,
    ) -> Order | None:
        order = self.orders.get(order_id)
        if order is None:
            return None
        update: dict[str, Any] = {"status": status, "updated_at": _now()}
        if set_remarks:
            update["admin_remarks"] = admin_remarks
        updated = order.model_copy(update=update)
        self.orders[order_id] = updated
        return updated

    def set_hidden(self, order_id: str, hidden: bool) -> Order | None:
        order = self.orders.get(order_id)
        if order is None:
            return None
        updated = order.model_copy(update={"is_hidden_from_staff": hidden})
        self.orders[order_id] = updated
        return updated

    def claim_referral_credit(self, order_id: str) -> bool:
        with self._lock:
            order = self.orders.get(order_id)
            if order is None or order.referral_credited:
                return False
            self.orders[order_id] = order.model_copy(update={"referral_credited": True})
            return True

    def release_referral_credit(self, order_id: str) -> None:
        order = self.orders[order_id]
        self.orders[order_id] = order.model_copy(update={"referral_credited": False})


class FakeRedemptionRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.redemptions: dict[str, Redemption] = {}

    def insert(self, redemption: Redemption) -> Redemption:
        stored = redemption.model_copy(update={"id": _new_id()})
        self.redemptions[str(stored.id)] = stored
        return stored

    def find_by_id(self, redemption_id: str) -> Redemption | None:
        return self.redemptions.get(redemption_id)

    def list_by_user(self, user_code: str) -> list[Redemption]:
        return [r for r in self.redemptions.values() if r.user_code == user_code]

    def list_all(self) -> list[Redemption]:
        return list(self.redemptions.values())

    def complete_pending(
        self,
        redemption_id: str,
        status: RedemptionStatus,
        admin_remarks: str | None,
        processed_by: str,
        processed_at: datetime,
    ) -> Redemption | None:
        with self._lock:
            redemption = self.redemptions.get(redemption_id)
            if redemption is None or redemption.status != RedemptionStatus.PENDING:
                return None
            updated = redemption.model_copy(
                update={
                    "status": status,
                    "admin_remarks": admin_remarks,
                    "processed_by": processed_by,
                    "processed_at": processed_at,
                    "updated_at": processed_at,
                }
            )
            self.redemptions[redemption_id] = updated
            return updated


class FakeAnnouncementRepository:
    def __init__(self) -> None:
        self.announcements: dict[str, Announcement] = {}

    def insert(self, announcement: Announcement) -> Announcement:
        stored = announcement.model_copy(update={"id": _new_id()})
        self.announcements[str(stored.id)] = stored
        return stored

    def find_by_id(self, announcement_id: str) -> Announcement | None:
        return self.announcements.get(announcement_id)

    def list(self, active_only: bool = False) -> list[Announcement]:
        items = [a for a in self.announcements.values() if a.is_active or not active_only]
        return sorted(items, key=lambda a: a.created_at, reverse=True)

    def update(
        self, announcement_id: str, fields: dict[str, Any]
    ) -> Announcement | None:
        announcement = self.announcements.get(announcement_id)
        if announcement is None:
            return None
        updated = Announcement.model_validate({**announcement.model_dump(), **fields})
        self.announcements[announcement_id] = updated
        return updated

    def delete(self, announcement_id: str) -> bool:
        return self.announcements.pop(announcement_id, None) is not None


class FakeLoginSessionRepository:
    def __init__(self) -> None:
        self.sessions: dict[str, LoginSession] = {}

    def create(self, session: LoginSession) -> LoginSession:
        self.sessions[session.session_id] = session
        return session

    def delete_by_session_id(self, session_id: str) -> LoginSession | None:
        session = self.sessions.pop(session_id, None)
        if session is None or session.expires_at <= _now():
            return None
        return session


class FakeNotifier:
    def __init__(self) -> None:
        self.notifications: list[tuple[str, dict[str, Any]]] = []
        self.dms: list[tuple[str, str, list[dict[str, Any]] | None]] = []

    def notify(self, channel, payload: dict[str, Any]) -> None:
        self.notifications.append((str(channel), payload))

    def send_dm(
        self,
        recipient_id: str,
        message: str,
        embeds: list[dict[str, Any]] | None = None,
    ) -> None:
        self.dms.append((recipient_id, message, embeds))

    def channels(self) -> list[str]:
        return [channel for channel, _ in self.notifications]
