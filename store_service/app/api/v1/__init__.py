from fastapi import APIRouter

from .announcements import admin_router as admin_announcements_router
from .announcements import router as announcements_router
from .auth import router as auth_router
from .orders import admin_router as admin_orders_router
from .orders import router as orders_router
from .products import admin_router as admin_products_router
from .products import router as products_router
from .rewards import admin_redemptions_router
from .rewards import admin_router as admin_rewards_router
from .rewards import router as rewards_router
from .users import admin_router as admin_users_router
from .users import router as users_router

api_router = APIRouter()
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(products_router, prefix="/products", tags=["products"])
api_router.include_router(orders_router, prefix="/orders", tags=["orders"])
api_router.include_router(rewards_router, prefix="/rewards", tags=["rewards"])
api_router.include_router(
    announcements_router, prefix="/announcements", tags=["announcements"]
)

# 관리자/스태프 전용 라우터는 라우터 단위 의존성으로 권한을 먼저 확인한다.
api_router.include_router(admin_users_router, prefix="/admin/users", tags=["admin"])
api_router.include_router(
    admin_products_router, prefix="/admin/products", tags=["admin"]
)
api_router.include_router(admin_orders_router, prefix="/admin/orders", tags=["admin"])
api_router.include_router(admin_rewards_router, prefix="/admin/rewards", tags=["admin"])
api_router.include_router(
    admin_redemptions_router, prefix="/admin/redemptions", tags=["admin"]
)
api_router.include_router(
    admin_announcements_router, prefix="/admin/announcements", tags=["admin"]
)
