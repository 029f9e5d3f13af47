from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.models.user import User, UserProfile, UserRole, UserUpsertInput
from common.mongo.client import get_database

from ..config import AppConfig, get_app_config
from ..exceptions import InvalidRoleError, UserNotFoundError
from ..repositories.interfaces import UserRepositoryInterface
from ..repositories.user_repository import UserRepository


logger = logging.getLogger(__name__)


REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_REFERRAL_CODE_ATTEMPTS = 10


def generate_referral_code() -> str:
    return "".join(
        secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH)
    )


class UsersService:
    """유저 upsert 및 프로필/권한 관리 비즈니스 로직.

    - Repository(UserRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 잔액은 여기서 직접 바꾸지 않는다. 가입 시 시작 크레딧만 초기값으로 설정한다.
    """

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        starting_credits: float = 0.0,
    ) -> None:
        self._user_repo = user_repo
        self._starting_credits = starting_credits

    def upsert_user(self, input_model: UserUpsertInput) -> tuple[UserProfile, bool]:
        """OAuth 로그인 결과로 유저를 생성하거나 갱신한다.

        반환값의 두 번째 요소는 신규 가입 여부다.
        """

        existing = self._user_repo.find_by_provider_and_sub(
            provider=input_model.provider,
            provider_sub=input_model.provider_sub,
        )

        if existing is not None:
            updated = self._user_repo.update_login_profile(
                user_code=existing.user_code,
                email=input_model.email,
                name=input_model.name,
                profile_image=input_model.profile_image,
            )
            if updated is None:
                raise UserNotFoundError()
            return UserProfile.from_user(updated), False

        referred_by = self._resolve_signup_referrer(input_model.referral_code)

        for _ in range(MAX_REFERRAL_CODE_ATTEMPTS):
            now = datetime.now(timezone.utc)
            user = User(
                user_code=f"{input_model.provider}:{uuid4()}",
                provider=input_model.provider,
                provider_sub=input_model.provider_sub,
                email=input_model.email,
                name=input_model.name,
                profile_image=input_model.profile_image,
                role=UserRole.CLIENT,
                credits=self._starting_credits,
                referral_code=self._new_referral_code(),
                referred_by=referred_by,
                last_login_at=now,
                created_at=now,
                updated_at=now,
            )
            try:
                created = self._user_repo.insert(user)
            except DuplicateKeyError:
                # 동시에 같은 OAuth 계정으로 가입했거나 추천 코드가 겹친 경우
                concurrent = self._user_repo.find_by_provider_and_sub(
                    provider=input_model.provider,
                    provider_sub=input_model.provider_sub,
                )
                if concurrent is not None:
                    return UserProfile.from_user(concurrent), False
                continue

            logger.info(
                "user registered (referred_by=%s)",
                referred_by,
                extra={"user_code": created.user_code},
            )
            return UserProfile.from_user(created), True

        raise RuntimeError("failed to allocate a unique referral code")

    def _new_referral_code(self) -> str:
        for _ in range(MAX_REFERRAL_CODE_ATTEMPTS):
            code = generate_referral_code()
            if not self._user_repo.referral_code_exists(code):
                return code
        raise RuntimeError("failed to allocate a unique referral code")

    def _resolve_signup_referrer(self, referral_code: str | None) -> str | None:
        if not referral_code:
            return None
        referrer = self._user_repo.find_by_referral_code(referral_code.strip().upper())
        if referrer is None:
            logger.info("unknown signup referral code ignored: %s", referral_code)
            return None
        return referrer.user_code

    def get_me(self, user_code: str) -> UserProfile:
        user = self._user_repo.find_by_user_code(user_code)
        if user is None:
            raise UserNotFoundError()
        return UserProfile.from_user(user)

    def list_users(self, page: int, page_size: int) -> tuple[list[UserProfile], int]:
        users, total = self._user_repo.list(page, page_size)
        return [UserProfile.from_user(u) for u in users], total

    def set_role(self, user_code: str, role: str) -> UserProfile:
        try:
            new_role = UserRole(role)
        except ValueError as exc:
            raise InvalidRoleError(f"invalid user role: {role!r}") from exc

        updated = self._user_repo.update_role(user_code, new_role)
        if updated is None:
            raise UserNotFoundError()

        logger.info("user role changed to %s", new_role.value, extra={"user_code": user_code})
        return UserProfile.from_user(updated)


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_users_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    config: AppConfig = Depends(get_app_config),
) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(
        user_repo=user_repo,
        starting_credits=config.ledger.default_starting_credits,
    )
