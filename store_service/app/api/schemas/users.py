from __future__ import annotations

from pydantic import BaseModel

from common.models.user import UserProfile
from common.types.datetime import OptionalUtcDateTime, UtcDateTime


class UserProfileResponse(BaseModel):
    user_code: str
    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str | None
    role: str
    credits: float
    referral_code: str
    referred_by: str | None
    last_login_at: OptionalUtcDateTime = None
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, user: UserProfile) -> "UserProfileResponse":
        return cls(
            user_code=user.user_code,
            provider=user.provider,
            provider_sub=user.provider_sub,
            email=user.email,
            name=user.name,
            profile_image=user.profile_image,
            role=user.role.value,
            credits=user.credits,
            referral_code=user.referral_code,
            referred_by=user.referred_by,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ListUsersResponse(BaseModel):
    total: int
    items: list[UserProfileResponse]


class SetRoleRequest(BaseModel):
    # 알 수 없는 역할은 422 가 아니라 invalid_role(400) 로 응답하기 위해 str 로 받는다.
    role: str
