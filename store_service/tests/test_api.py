from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from common.models.user import UserRole
from store_service.app.auth.tokens import issue_access_token
from store_service.app.config import (
    AppConfig,
    AuthConfig,
    LedgerConfig,
    NotificationConfig,
    OrderConfig,
    get_app_config,
)
from store_service.app.main import app
from store_service.app.notifications import get_notifier
from store_service.app.services.announcements_service import get_announcement_repository
from store_service.app.services.credit_service import get_credit_transaction_repository
from store_service.app.services.login_sessions_service import get_login_session_repository
from store_service.app.services.order_service import get_order_repository
from store_service.app.services.products_service import get_product_repository
from store_service.app.services.redemption_service import get_redemption_repository
from store_service.app.services.rewards_service import get_reward_repository
from store_service.app.services.users_service import get_user_repository

from .fakes import (
    FakeAnnouncementRepository,
    FakeCreditTransactionRepository,
    FakeLoginSessionRepository,
    FakeNotifier,
    FakeOrderRepository,
    FakeProductRepository,
    FakeRedemptionRepository,
    FakeRewardRepository,
    FakeUserRepository,
    build_product,
    build_reward,
    build_user,
)


SECRET = "api-test-secret"
CLIENT = "discord:client"
OTHER = "discord:other"
STAFF = "discord:staff"
ADMIN = "discord:admin"


class UnavailableProductRepository(FakeProductRepository):
    def list(self, featured_only: bool = False):
        raise ServerSelectionTimeoutError("no servers available")


@dataclass
class ApiFixture:
    client: TestClient
    user_repo: FakeUserRepository
    product_repo: FakeProductRepository
    reward_repo: FakeRewardRepository
    order_repo: FakeOrderRepository
    notifier: FakeNotifier


def _config() -> AppConfig:
    return AppConfig(
        ledger=LedgerConfig(referral_credit_percentage=10),
        orders=OrderConfig(),
        auth=AuthConfig(token_secret=SECRET, frontend_url="http://front.test"),
        notifications=NotificationConfig(),
    )


@pytest.fixture
def api() -> Iterator[ApiFixture]:
    user_repo = FakeUserRepository(
        [
            build_user(user_code=CLIENT, provider_sub="1", referral_code="CLIENT01", credits=10),
            build_user(user_code=OTHER, provider_sub="2", referral_code="OTHER002"),
            build_user(
                user_code=STAFF, provider_sub="3", referral_code="STAFF003", role=UserRole.STAFF
            ),
            build_user(
                user_code=ADMIN, provider_sub="4", referral_code="ADMIN004", role=UserRole.ADMIN
            ),
        ]
    )
    product_repo = FakeProductRepository([build_product(price=4.5)])
    reward_repo = FakeRewardRepository([build_reward(credit_cost=50)])
    order_repo = FakeOrderRepository()
    notifier = FakeNotifier()
    transaction_repo = FakeCreditTransactionRepository()
    redemption_repo = FakeRedemptionRepository()
    announcement_repo = FakeAnnouncementRepository()
    session_repo = FakeLoginSessionRepository()

    app.dependency_overrides = {
        get_app_config: _config,
        get_notifier: lambda: notifier,
        get_user_repository: lambda: user_repo,
        get_credit_transaction_repository: lambda: transaction_repo,
        get_product_repository: lambda: product_repo,
        get_reward_repository: lambda: reward_repo,
        get_order_repository: lambda: order_repo,
        get_redemption_repository: lambda: redemption_repo,
        get_announcement_repository: lambda: announcement_repo,
        get_login_session_repository: lambda: session_repo,
    }
    yield ApiFixture(
        client=TestClient(app),
        user_repo=user_repo,
        product_repo=product_repo,
        reward_repo=reward_repo,
        order_repo=order_repo,
        notifier=notifier,
    )
    app.dependency_overrides = {}


def _auth(user_code: str) -> dict[str, str]:
    token = issue_access_token(user_code, secret=SECRET, ttl_seconds=300)
    return {"Authorization": f"Bearer {token}"}


def _product_id(api: ApiFixture) -> str:
    return next(iter(api.product_repo.products))


def test_health(api: ApiFixture) -> None:
    resp = api.client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_missing_or_invalid_token_is_unauthenticated(api: ApiFixture) -> None:
    missing = api.client.get("/api/v1/users/me")
    invalid = api.client.get(
        "/api/v1/users/me", headers={"Authorization": "Bearer garbage"}
    )

    assert missing.status_code == 401
    assert missing.json() == {
        "detail": {"code": "unauthenticated", "message": "not authenticated, please log in"}
    }
    assert invalid.status_code == 401


def test_token_for_deleted_user_is_unauthenticated(api: ApiFixture) -> None:
    headers = _auth(CLIENT)
    del api.user_repo.users[CLIENT]

    resp = api.client.get("/api/v1/users/me", headers=headers)

    assert resp.status_code == 401


def test_me_reads_current_balance_and_role(api: ApiFixture) -> None:
    headers = _auth(CLIENT)
    api.user_repo.apply_credit_delta(CLIENT, 5)

    resp = api.client.get("/api/v1/users/me", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["credits"] == 15
    assert resp.json()["role"] == "Client"


def test_client_gets_forbidden_on_admin_route_regardless_of_payload(
    api: ApiFixture,
) -> None:
    resp = api.client.put(
        f"/api/v1/admin/users/{OTHER}/role",
        json={"unexpected": True},
        headers=_auth(CLIENT),
    )

    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "unauthorized"
    assert api.user_repo.users[OTHER].role == UserRole.CLIENT


def test_role_change_takes_effect_on_next_request(api: ApiFixture) -> None:
    client_headers = _auth(CLIENT)
    assert api.client.get("/api/v1/admin/orders", headers=client_headers).status_code == 403

    resp = api.client.put(
        f"/api/v1/admin/users/{CLIENT}/role", json={"role": "Staff"}, headers=_auth(ADMIN)
    )

    assert resp.status_code == 200
    assert api.client.get("/api/v1/admin/orders", headers=client_headers).status_code == 200


def test_invalid_role_is_a_domain_error(api: ApiFixture) -> None:
    resp = api.client.put(
        f"/api/v1/admin/users/{CLIENT}/role", json={"role": "Owner"}, headers=_auth(ADMIN)
    )

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "invalid_role"


def test_staff_cannot_use_admin_only_routes(api: ApiFixture) -> None:
    headers = _auth(STAFF)

    assert api.client.get("/api/v1/admin/users", headers=headers).status_code == 403
    assert api.client.get("/api/v1/admin/redemptions", headers=headers).status_code == 403
    assert api.client.get("/api/v1/admin/orders", headers=headers).status_code == 200


def test_place_order_and_owner_scoped_lookup(api: ApiFixture) -> None:
    resp = api.client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": _product_id(api), "quantity": 2}]},
        headers=_auth(CLIENT),
    )

    assert resp.status_code == 201
    order_id = resp.json()["order_id"]
    assert resp.json()["order_number"].startswith("ORD-")

    mine = api.client.get(f"/api/v1/orders/{order_id}", headers=_auth(CLIENT))
    assert mine.status_code == 200
    assert mine.json()["total_amount"] == 9.0

    others = api.client.get(f"/api/v1/orders/{order_id}", headers=_auth(OTHER))
    assert others.status_code == 404
    assert others.json()["detail"]["code"] == "order_not_found"


def test_empty_order_is_rejected(api: ApiFixture) -> None:
    resp = api.client.post("/api/v1/orders", json={"items": []}, headers=_auth(CLIENT))

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "empty_order"


def test_staff_status_update_and_admin_visibility(api: ApiFixture) -> None:
    order_id = api.client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": _product_id(api), "quantity": 1}]},
        headers=_auth(CLIENT),
    ).json()["order_id"]

    updated = api.client.put(
        f"/api/v1/admin/orders/{order_id}/status",
        json={"status": "Shipped", "admin_remarks": "on the way"},
        headers=_auth(STAFF),
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "Shipped"
    assert updated.json()["admin_remarks"] == "on the way"

    forbidden = api.client.put(
        f"/api/v1/admin/orders/{order_id}/visibility",
        json={"is_hidden_from_staff": True},
        headers=_auth(STAFF),
    )
    assert forbidden.status_code == 403

    hidden = api.client.put(
        f"/api/v1/admin/orders/{order_id}/visibility",
        json={"is_hidden_from_staff": True},
        headers=_auth(ADMIN),
    )
    assert hidden.status_code == 200
    assert api.client.get("/api/v1/admin/orders", headers=_auth(STAFF)).json() == []
    assert len(api.client.get("/api/v1/admin/orders", headers=_auth(ADMIN)).json()) == 1


def test_redeem_with_insufficient_credits(api: ApiFixture) -> None:
    reward_id = next(iter(api.reward_repo.rewards))

    resp = api.client.post(f"/api/v1/rewards/{reward_id}/redeem", headers=_auth(CLIENT))

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "insufficient_credits"
    assert api.user_repo.users[CLIENT].credits == 10


def test_redeem_and_admin_reject_refunds(api: ApiFixture) -> None:
    reward_id = next(iter(api.reward_repo.rewards))
    grant = api.client.post(
        f"/api/v1/admin/users/{CLIENT}/credits",
        json={"amount": 40, "note": "giveaway"},
        headers=_auth(ADMIN),
    )
    assert grant.json() == {"user_code": CLIENT, "new_balance": 50}

    redeemed = api.client.post(f"/api/v1/rewards/{reward_id}/redeem", headers=_auth(CLIENT))
    assert redeemed.status_code == 200
    assert redeemed.json()["new_credits"] == 0
    redemption_id = redeemed.json()["redemption_id"]

    rejected = api.client.put(
        f"/api/v1/admin/redemptions/{redemption_id}/status",
        json={"status": "Rejected"},
        headers=_auth(ADMIN),
    )
    assert rejected.status_code == 200
    assert api.user_repo.users[CLIENT].credits == 50

    again = api.client.put(
        f"/api/v1/admin/redemptions/{redemption_id}/status",
        json={"status": "Approved"},
        headers=_auth(ADMIN),
    )
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "already_processed"

    history = api.client.get("/api/v1/users/me/credits/history", headers=_auth(CLIENT))
    assert history.json()["total"] == 3


def test_public_catalog_does_not_require_login(api: ApiFixture) -> None:
    products = api.client.get("/api/v1/products")
    missing = api.client.get("/api/v1/products/does-not-exist")

    assert products.status_code == 200
    assert len(products.json()) == 1
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "product_not_found"


def test_storage_failure_maps_to_service_unavailable(api: ApiFixture) -> None:
    app.dependency_overrides[get_product_repository] = lambda: UnavailableProductRepository()

    resp = api.client.get("/api/v1/products")

    assert resp.status_code == 503
    assert resp.json()["detail"]["code"] == "internal_unavailable"


def test_login_session_exchange_rejects_unknown_session(api: ApiFixture) -> None:
    resp = api.client.post("/api/v1/auth/login-sessions/unknown")

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "login_session_invalid"


def test_discord_callback_without_code_redirects_to_login(api: ApiFixture) -> None:
    resp = api.client.get("/api/v1/auth/discord/callback", follow_redirects=False)

    assert resp.status_code == 302
    assert resp.headers["location"] == "http://front.test/login?error=discord_auth_denied"
