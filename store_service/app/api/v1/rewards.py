from __future__ import annotations

from fastapi import APIRouter, Depends

from common.models.user import User

from ..schemas.catalog import MessageResponse, RewardResponse
from ..schemas.redemptions import (
    ProcessRedemptionRequest,
    RedeemResponse,
    RedemptionResponse,
)
from ...auth.gate import get_current_user, require_admin
from ...models.reward import RewardCreateInput, RewardUpdateInput
from ...services.redemption_service import RedemptionService, get_redemption_service
from ...services.rewards_service import RewardsService, get_rewards_service


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])
admin_redemptions_router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[RewardResponse], summary="교환 가능한 리워드 목록")
def list_available_rewards(
    service: RewardsService = Depends(get_rewards_service),
) -> list[RewardResponse]:
    return [RewardResponse.from_domain(r) for r in service.list_available()]


@router.post(
    "/{reward_id}/redeem", response_model=RedeemResponse, summary="리워드 교환 요청"
)
def redeem_reward(
    reward_id: str,
    user: User = Depends(get_current_user),
    service: RedemptionService = Depends(get_redemption_service),
) -> RedeemResponse:
    new_balance, redemption = service.submit_redemption(user.user_code, reward_id)
    return RedeemResponse(
        message=f"redemption for {redemption.reward_name!r} submitted for approval",
        new_credits=new_balance,
        redemption_id=str(redemption.id),
    )


@router.get(
    "/redemptions/me",
    response_model=list[RedemptionResponse],
    summary="내 교환 요청 이력",
)
def list_my_redemptions(
    user: User = Depends(get_current_user),
    service: RedemptionService = Depends(get_redemption_service),
) -> list[RedemptionResponse]:
    return [
        RedemptionResponse.from_domain(r)
        for r in service.list_user_redemptions(user.user_code)
    ]


# -------- Admin: rewards --------


@admin_router.get("", response_model=list[RewardResponse], summary="전체 리워드 목록")
def list_all_rewards(
    service: RewardsService = Depends(get_rewards_service),
) -> list[RewardResponse]:
    return [RewardResponse.from_domain(r) for r in service.list_all()]


@admin_router.get("/{reward_id}", response_model=RewardResponse, summary="리워드 상세")
def get_reward(
    reward_id: str,
    service: RewardsService = Depends(get_rewards_service),
) -> RewardResponse:
    return RewardResponse.from_domain(service.get_reward(reward_id))


@admin_router.post(
    "", response_model=RewardResponse, status_code=201, summary="리워드 등록"
)
def create_reward(
    body: RewardCreateInput,
    service: RewardsService = Depends(get_rewards_service),
) -> RewardResponse:
    return RewardResponse.from_domain(service.create_reward(body))


@admin_router.put("/{reward_id}", response_model=RewardResponse, summary="리워드 수정")
def update_reward(
    reward_id: str,
    body: RewardUpdateInput,
    service: RewardsService = Depends(get_rewards_service),
) -> RewardResponse:
    return RewardResponse.from_domain(service.update_reward(reward_id, body))


@admin_router.delete("/{reward_id}", response_model=MessageResponse, summary="리워드 삭제")
def delete_reward(
    reward_id: str,
    service: RewardsService = Depends(get_rewards_service),
) -> MessageResponse:
    service.delete_reward(reward_id)
    return MessageResponse(message="reward deleted")


# -------- Admin: redemptions --------


@admin_redemptions_router.get(
    "", response_model=list[RedemptionResponse], summary="전체 교환 요청 목록"
)
def list_all_redemptions(
    service: RedemptionService = Depends(get_redemption_service),
) -> list[RedemptionResponse]:
    return [RedemptionResponse.from_domain(r) for r in service.list_all_redemptions()]


@admin_redemptions_router.put(
    "/{redemption_id}/status",
    response_model=RedemptionResponse,
    summary="교환 요청 승인/거절",
)
def process_redemption(
    redemption_id: str,
    body: ProcessRedemptionRequest,
    admin: User = Depends(require_admin),
    service: RedemptionService = Depends(get_redemption_service),
) -> RedemptionResponse:
    redemption = service.process_redemption(
        redemption_id, body.status, admin, body.admin_remarks
    )
    return RedemptionResponse.from_domain(redemption)
