from __future__ import annotations

from datetime import datetime

from pymongo import ReturnDocument
from pymongo.database import Database

from common.mongo.types import is_object_id, to_object_id

from ..models.redemption import Redemption, RedemptionStatus
from .documents.redemption_document import RedemptionDocument
from .interfaces import RedemptionRepositoryInterface


class RedemptionRepository(RedemptionRepositoryInterface):
    """redemptions 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["redemptions"]

    @staticmethod
    def _from_document(doc: dict) -> Redemption:
        return RedemptionDocument.model_validate(doc).to_domain()

    def insert(self, redemption: Redemption) -> Redemption:
        payload = RedemptionDocument.from_domain(redemption).to_mongo_record()
        result = self._col.insert_one(payload)
        return redemption.model_copy(update={"id": str(result.inserted_id)})

    def find_by_id(self, redemption_id: str) -> Redemption | None:
        if not is_object_id(redemption_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(redemption_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def list_by_user(self, user_code: str) -> list[Redemption]:
        cursor = self._col.find(
            {"user_code": user_code}, sort=[("redeemed_at", -1), ("_id", -1)]
        )
        return [self._from_document(doc) for doc in cursor]

    def list_all(self) -> list[Redemption]:
        cursor = self._col.find({}, sort=[("redeemed_at", -1), ("_id", -1)])
        return [self._from_document(doc) for doc in cursor]

    def complete_pending(
        self,
        redemption_id: str,
        status: RedemptionStatus,
        admin_remarks: str | None,
        processed_by: str,
        processed_at: datetime,
    ) -> Redemption | None:
        # status == Pending 조건으로 두 관리자가 동시에 처리하더라도 한 번만 반영된다.
        doc = self._col.find_one_and_update(
            {
                "_id": to_object_id(redemption_id),
                "status": RedemptionStatus.PENDING.value,
            },
            {
                "$set": {
                    "status": status.value,
                    "admin_remarks": admin_remarks,
                    "processed_by": processed_by,
                    "processed_at": processed_at,
                    "updated_at": processed_at,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)
