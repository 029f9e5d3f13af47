from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.database import Database

from common.models.user import User, UserRole
from common.types.money import round_amount

from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        document = UserDocument.model_validate(doc)
        return document.to_domain()

    def find_by_provider_and_sub(self, provider: str, provider_sub: str) -> User | None:
        doc = self._col.find_one({"provider": provider, "provider_sub": provider_sub})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_user_code(self, user_code: str) -> User | None:
        doc = self._col.find_one({"user_code": user_code})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_referral_code(self, referral_code: str) -> User | None:
        doc = self._col.find_one({"referral_code": referral_code})
        if not doc:
            return None
        return self._from_document(doc)

    def referral_code_exists(self, referral_code: str) -> bool:
        return self._col.count_documents({"referral_code": referral_code}, limit=1) > 0

    def insert(self, user: User) -> User:
        now = datetime.now(timezone.utc)
        user.created_at = now
        user.updated_at = now

        document = UserDocument.from_domain(user)
        payload = document.to_mongo_record()
        self._col.insert_one(payload)
        return self._from_document(payload)

    def update_login_profile(
        self,
        user_code: str,
        email: str,
        name: str,
        profile_image: str | None,
    ) -> User | None:
        now = datetime.now(timezone.utc)
        result = self._col.find_one_and_update(
            {"user_code": user_code},
            {
                "$set": {
                    "email": email,
                    "name": name,
                    "profile_image": profile_image,
                    "last_login_at": now,
                    "updated_at": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            return None
        return self._from_document(result)

    def update_role(self, user_code: str, role: UserRole) -> User | None:
        result = self._col.find_one_and_update(
            {"user_code": user_code},
            {"$set": {"role": role.value, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            return None
        return self._from_document(result)

    def apply_credit_delta(self, user_code: str, delta: float) -> User | None:
        """잔액 조건을 건 단일 find_one_and_update 로 잔액을 바꾼다.

        - 필터에 credits >= -delta 를 걸어 결과 잔액이 음수가 되는 갱신은 매칭되지 않는다.
        - 같은 유저에 대한 동시 변경은 도큐먼트 단위 원자성으로 직렬화된다.
        """

        delta = round_amount(delta)
        query: dict = {"user_code": user_code}
        if delta < 0:
            query["credits"] = {"$gte": -delta}

        result = self._col.find_one_and_update(
            query,
            {
                "$inc": {"credits": delta},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            return None

        # 부동소수 누적 오차를 저장 값에서도 정리한다.
        rounded = round_amount(result.get("credits", 0))
        if rounded != result.get("credits"):
            self._col.update_one(
                {"user_code": user_code, "credits": result.get("credits")},
                {"$set": {"credits": rounded}},
            )
            result["credits"] = rounded
        return self._from_document(result)

    def list(self, page: int, page_size: int) -> tuple[list[User], int]:
        if page <= 0:
            page = 1
        if page_size <= 0 or page_size > 100:
            page_size = 20

        skip = (page - 1) * page_size
        total = self._col.count_documents({})
        cursor = self._col.find(
            {},
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )
        return [self._from_document(doc) for doc in cursor], total
