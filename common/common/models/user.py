from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class UserRole(StrEnum):
    """권한 등급. Client < Staff < Admin 순으로 전순서를 갖는다."""

    CLIENT = "Client"
    STAFF = "Staff"
    ADMIN = "Admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    def at_least(self, required: "UserRole") -> bool:
        """이 역할이 required 이상의 권한을 갖는지 여부."""
        return self.rank >= required.rank


_ROLE_RANKS: dict[UserRole, int] = {
    UserRole.CLIENT: 1,
    UserRole.STAFF: 2,
    UserRole.ADMIN: 3,
}


class User(BaseModel):
    """유저 도메인 모델.

    - Mongo users 컬렉션과 1:1로 매핑되는 공용 모델이다.
    - provider/provider_sub 조합(외부 OAuth 식별자)으로 식별하며,
      내부 식별자는 user_code("<provider>:<uuid>")로 관리한다.
    - credits 는 크레딧 원장이 관리하는 잔액으로, 항상 0 이상이다.
    - referral_code 는 최초 생성 시 한 번만 부여되고 이후 변경되지 않는다.
    """

    user_code: str
    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str | None = None
    role: UserRole = UserRole.CLIENT
    credits: float = Field(default=0, ge=0)
    referral_code: str
    referred_by: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserUpsertInput(BaseModel):
    """OAuth 기반 유저 upsert 입력 모델.

    - OAuth 콜백에서 provider/sub/email/name/profile_image 를 전달받아 UsersService 로 전달한다.
    - referral_code 는 최초 가입 시에만 의미가 있다.
    """

    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str | None = None
    referral_code: str | None = None


class UserProfile(BaseModel):
    """유저 프로필 조회 응답 모델.

    - 항상 저장소에서 다시 읽은 값으로 만들어지며, 토큰/세션에 캐시하지 않는다.
    """

    user_code: str
    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str | None
    role: UserRole
    credits: float = Field(default=0)
    referral_code: str
    referred_by: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            user_code=user.user_code,
            provider=user.provider,
            provider_sub=user.provider_sub,
            email=user.email,
            name=user.name,
            profile_image=user.profile_image,
            role=user.role,
            credits=user.credits,
            referral_code=user.referral_code,
            referred_by=user.referred_by,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
