from __future__ import annotations

from fastapi import APIRouter, Depends

from common.models.user import User

from ..schemas.orders import (
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    SetOrderVisibilityRequest,
    UpdateOrderStatusRequest,
)
from ...auth.gate import get_current_user, require_admin, require_staff
from ...services.order_service import OrderService, get_order_service


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_staff)])


@router.post(
    "", response_model=PlaceOrderResponse, status_code=201, summary="주문 생성"
)
def place_order(
    body: PlaceOrderRequest,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> PlaceOrderResponse:
    order = service.place_order(user.user_code, body.items, body.referral_code)
    return PlaceOrderResponse(
        message="order placed successfully",
        order_id=str(order.id),
        order_number=order.order_number,
    )


@router.get("", response_model=list[OrderResponse], summary="내 주문 목록")
def list_my_orders(
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    return [OrderResponse.from_domain(o) for o in service.list_user_orders(user.user_code)]


@router.get("/{order_id}", response_model=OrderResponse, summary="내 주문 상세")
def get_my_order(
    order_id: str,
    user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_domain(service.get_user_order(user.user_code, order_id))


# -------- Staff / Admin --------


@admin_router.get("", response_model=list[OrderResponse], summary="전체 주문 목록")
def list_all_orders(
    user: User = Depends(require_staff),
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    return [OrderResponse.from_domain(o) for o in service.list_all_orders(user.role)]


@admin_router.put(
    "/{order_id}/status", response_model=OrderResponse, summary="주문 상태 변경"
)
def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    user: User = Depends(require_staff),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.set_order_status(order_id, body.status, body.admin_remarks, user)
    return OrderResponse.from_domain(order)


@admin_router.put(
    "/{order_id}/visibility",
    response_model=OrderResponse,
    dependencies=[Depends(require_admin)],
    summary="Staff 노출 여부 변경 (Admin 전용)",
)
def set_order_visibility(
    order_id: str,
    body: SetOrderVisibilityRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_domain(
        service.set_order_visibility(order_id, body.is_hidden_from_staff)
    )
