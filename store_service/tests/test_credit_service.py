from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import pytest

from store_service.app.exceptions import InsufficientCreditsError, UserNotFoundError
from store_service.app.models.credit import CreditReason, CreditTransactionType
from store_service.app.services.credit_service import CreditLedgerService

from .fakes import (
    FailingCreditTransactionRepository,
    FakeCreditTransactionRepository,
    FakeUserRepository,
    build_user,
)


@dataclass
class LedgerFixture:
    service: CreditLedgerService
    user_repo: FakeUserRepository
    transaction_repo: FakeCreditTransactionRepository


def _build_fixture(
    credits: float = 100,
    transaction_repo: FakeCreditTransactionRepository | None = None,
) -> LedgerFixture:
    user_repo = FakeUserRepository([build_user(credits=credits)])
    transaction_repo = transaction_repo or FakeCreditTransactionRepository()
    service = CreditLedgerService(user_repo=user_repo, transaction_repo=transaction_repo)
    return LedgerFixture(
        service=service,
        user_repo=user_repo,
        transaction_repo=transaction_repo,
    )


def test_apply_credit_delta_updates_balance_and_logs_transaction() -> None:
    fixture = _build_fixture(credits=100)

    balance = fixture.service.apply_credit_delta(
        "discord:user-001", -30.5, CreditReason.REDEMPTION, metadata={"reward_id": "r1"}
    )

    assert balance == 69.5
    assert fixture.user_repo.users["discord:user-001"].credits == 69.5
    assert len(fixture.transaction_repo.created) == 1
    tx = fixture.transaction_repo.created[0]
    assert tx.type == CreditTransactionType.DEBIT
    assert tx.amount == -30.5
    assert tx.balance_after == 69.5
    assert tx.metadata == {"reward_id": "r1"}


def test_apply_credit_delta_rounds_to_two_decimals() -> None:
    fixture = _build_fixture(credits=0)

    balance = fixture.service.apply_credit_delta(
        "discord:user-001", 0.1 + 0.2, CreditReason.REFERRAL
    )

    assert balance == 0.3
    assert fixture.transaction_repo.created[0].type == CreditTransactionType.CREDIT


def test_insufficient_credits_leaves_balance_untouched() -> None:
    fixture = _build_fixture(credits=10)

    with pytest.raises(InsufficientCreditsError):
        fixture.service.apply_credit_delta(
            "discord:user-001", -10.01, CreditReason.REDEMPTION
        )

    assert fixture.user_repo.users["discord:user-001"].credits == 10
    assert fixture.transaction_repo.created == []


def test_debit_to_exactly_zero_is_allowed() -> None:
    fixture = _build_fixture(credits=10)

    balance = fixture.service.apply_credit_delta(
        "discord:user-001", -10, CreditReason.REDEMPTION
    )

    assert balance == 0


def test_failed_transaction_record_keeps_the_balance_change() -> None:
    fixture = _build_fixture(
        credits=100, transaction_repo=FailingCreditTransactionRepository()
    )

    balance = fixture.service.apply_credit_delta(
        "discord:user-001", -40, CreditReason.REDEMPTION
    )

    assert balance == 60
    assert fixture.user_repo.users["discord:user-001"].credits == 60
    assert fixture.transaction_repo.created == []


def test_unknown_user_raises_user_not_found() -> None:
    fixture = _build_fixture()

    with pytest.raises(UserNotFoundError):
        fixture.service.apply_credit_delta("discord:ghost", 5, CreditReason.REFERRAL)

    with pytest.raises(UserNotFoundError):
        fixture.service.apply_credit_delta("discord:ghost", -5, CreditReason.REDEMPTION)


def test_concurrent_debits_never_overdraw() -> None:
    fixture = _build_fixture(credits=100)

    def _debit() -> bool:
        try:
            fixture.service.apply_credit_delta(
                "discord:user-001", -10, CreditReason.REDEMPTION
            )
        except InsufficientCreditsError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: _debit(), range(50)))

    assert results.count(True) == 10
    assert fixture.user_repo.users["discord:user-001"].credits == 0
    assert len(fixture.transaction_repo.created) == 10


def test_adjust_credits_records_admin_metadata() -> None:
    fixture = _build_fixture(credits=5)

    balance = fixture.service.adjust_credits(
        "discord:user-001", 20, admin_code="discord:admin", note="event prize"
    )

    assert balance == 25
    tx = fixture.transaction_repo.created[0]
    assert tx.reason == CreditReason.ADMIN_ADJUSTMENT
    assert tx.metadata == {"adjusted_by": "discord:admin", "note": "event prize"}


def test_get_history_returns_latest_first() -> None:
    fixture = _build_fixture(credits=0)
    fixture.service.apply_credit_delta("discord:user-001", 10, CreditReason.REFERRAL)
    fixture.service.apply_credit_delta("discord:user-001", -4, CreditReason.REDEMPTION)

    items, total = fixture.service.get_history("discord:user-001", page=1, page_size=1)

    assert total == 2
    assert [tx.amount for tx in items] == [-4]


def test_get_history_for_unknown_user_raises() -> None:
    fixture = _build_fixture()

    with pytest.raises(UserNotFoundError):
        fixture.service.get_history("discord:ghost")
