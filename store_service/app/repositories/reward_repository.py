from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.mongo.types import is_object_id, to_object_id

from ..exceptions import DuplicateNameError
from ..models.reward import Reward
from .documents.reward_document import RewardDocument
from .interfaces import RewardRepositoryInterface


class RewardRepository(RewardRepositoryInterface):
    """rewards 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["rewards"]

    @staticmethod
    def _from_document(doc: dict) -> Reward:
        return RewardDocument.model_validate(doc).to_domain()

    def find_by_id(self, reward_id: str) -> Reward | None:
        if not is_object_id(reward_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(reward_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def list(self, available_only: bool = False) -> list[Reward]:
        query: dict = {"is_available": True} if available_only else {}
        cursor = self._col.find(query, sort=[("credit_cost", 1), ("_id", 1)])
        return [self._from_document(doc) for doc in cursor]

    def insert(self, reward: Reward) -> Reward:
        payload = RewardDocument.from_domain(reward).to_mongo_record()
        try:
            result = self._col.insert_one(payload)
        except DuplicateKeyError as exc:
            raise DuplicateNameError(
                f"reward with name {reward.name!r} already exists"
            ) from exc
        return reward.model_copy(update={"id": str(result.inserted_id)})

    def update(self, reward_id: str, fields: dict[str, Any]) -> Reward | None:
        if not is_object_id(reward_id):
            return None
        update_fields = dict(fields)
        update_fields["updated_at"] = datetime.now(timezone.utc)
        try:
            doc = self._col.find_one_and_update(
                {"_id": to_object_id(reward_id)},
                {"$set": update_fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise DuplicateNameError(
                f"reward with name {fields.get('name')!r} already exists"
            ) from exc
        if not doc:
            return None
        return self._from_document(doc)

    def delete(self, reward_id: str) -> bool:
        if not is_object_id(reward_id):
            return False
        result = self._col.delete_one({"_id": to_object_id(reward_id)})
        return result.deleted_count > 0
