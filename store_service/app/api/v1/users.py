from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from common.models.user import User

from ..schemas.common import PaginatedResponse
from ..schemas.credits import (
    AdjustCreditsRequest,
    AdjustCreditsResponse,
    CreditTransactionResponse,
)
from ..schemas.users import ListUsersResponse, SetRoleRequest, UserProfileResponse
from ...auth.gate import get_current_user, require_admin
from ...services.credit_service import CreditLedgerService, get_credit_ledger_service
from ...services.users_service import UsersService, get_users_service


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/me", response_model=UserProfileResponse, summary="내 프로필 조회")
def get_me(
    user: User = Depends(get_current_user),
    service: UsersService = Depends(get_users_service),
) -> UserProfileResponse:
    # 게이트에서 읽은 값 대신 저장소에서 다시 읽어 최신 잔액을 돌려준다.
    return UserProfileResponse.from_domain(service.get_me(user.user_code))


@router.get(
    "/me/credits/history",
    response_model=PaginatedResponse[CreditTransactionResponse],
    summary="내 크레딧 변경 이력",
)
def get_my_credit_history(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    ledger: CreditLedgerService = Depends(get_credit_ledger_service),
) -> PaginatedResponse[CreditTransactionResponse]:
    items, total = ledger.get_history(user.user_code, page, page_size)
    return PaginatedResponse[CreditTransactionResponse].from_page(
        [CreditTransactionResponse.from_domain(tx) for tx in items],
        total,
        page,
        page_size,
    )


# -------- Admin --------


@admin_router.get("", response_model=ListUsersResponse, summary="유저 목록 조회")
def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    service: UsersService = Depends(get_users_service),
) -> ListUsersResponse:
    users, total = service.list_users(page, page_size)
    return ListUsersResponse(
        total=total,
        items=[UserProfileResponse.from_domain(u) for u in users],
    )


@admin_router.put(
    "/{user_code}/role", response_model=UserProfileResponse, summary="유저 역할 변경"
)
def set_user_role(
    user_code: str,
    body: SetRoleRequest,
    service: UsersService = Depends(get_users_service),
) -> UserProfileResponse:
    return UserProfileResponse.from_domain(service.set_role(user_code, body.role))


@admin_router.post(
    "/{user_code}/credits",
    response_model=AdjustCreditsResponse,
    summary="크레딧 수동 조정",
)
def adjust_user_credits(
    user_code: str,
    body: AdjustCreditsRequest,
    admin: User = Depends(require_admin),
    ledger: CreditLedgerService = Depends(get_credit_ledger_service),
) -> AdjustCreditsResponse:
    new_balance = ledger.adjust_credits(
        user_code, body.amount, admin_code=admin.user_code, note=body.note
    )
    return AdjustCreditsResponse(user_code=user_code, new_balance=new_balance)


@admin_router.get(
    "/{user_code}/credits/history",
    response_model=PaginatedResponse[CreditTransactionResponse],
    summary="유저 크레딧 변경 이력",
)
def get_user_credit_history(
    user_code: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    ledger: CreditLedgerService = Depends(get_credit_ledger_service),
) -> PaginatedResponse[CreditTransactionResponse]:
    items, total = ledger.get_history(user_code, page, page_size)
    return PaginatedResponse[CreditTransactionResponse].from_page(
        [CreditTransactionResponse.from_domain(tx) for tx in items],
        total,
        page,
        page_size,
    )
