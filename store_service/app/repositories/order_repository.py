from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.database import Database

from common.mongo.types import is_object_id, to_object_id

from ..models.order import Order, OrderStatus
from .documents.order_document import OrderDocument
from .interfaces import OrderRepositoryInterface


class OrderRepository(OrderRepositoryInterface):
    """orders 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["orders"]

    @staticmethod
    def _from_document(doc: dict) -> Order:
        return OrderDocument.model_validate(doc).to_domain()

    def insert(self, order: Order) -> Order:
        payload = OrderDocument.from_domain(order).to_mongo_record()
        result = self._col.insert_one(payload)
        return order.model_copy(update={"id": str(result.inserted_id)})

    def find_by_id(self, order_id: str) -> Order | None:
        if not is_object_id(order_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(order_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_id_for_user(self, order_id: str, user_code: str) -> Order | None:
        # 소유자 조건을 쿼리에 포함해 타인의 주문은 존재 여부조차 드러나지 않게 한다.
        if not is_object_id(order_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(order_id), "user_code": user_code})
        if not doc:
            return None
        return self._from_document(doc)

    def list_by_user(self, user_code: str) -> list[Order]:
        cursor = self._col.find(
            {"user_code": user_code}, sort=[("created_at", -1), ("_id", -1)]
        )
        return [self._from_document(doc) for doc in cursor]

    def list_all(self, include_hidden: bool) -> list[Order]:
        query: dict = {} if include_hidden else {"is_hidden_from_staff": {"$ne": True}}
        cursor = self._col.find(query, sort=[("created_at", -1), ("_id", -1)])
        return [self._from_document(doc) for doc in cursor]

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_remarks: str | None,
        set_remarks: bool,
    ) -> Order | None:
        if not is_object_id(order_id):
            return None
        fields: dict = {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc),
        }
        if set_remarks:
            fields["admin_remarks"] = admin_remarks
        doc = self._col.find_one_and_update(
            {"_id": to_object_id(order_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def set_hidden(self, order_id: str, hidden: bool) -> Order | None:
        if not is_object_id(order_id):
            return None
        doc = self._col.find_one_and_update(
            {"_id": to_object_id(order_id)},
            {
                "$set": {
                    "is_hidden_from_staff": hidden,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def claim_referral_credit(self, order_id: str) -> bool:
        result = self._col.update_one(
            {"_id": to_object_id(order_id), "referral_credited": {"$ne": True}},
            {
                "$set": {
                    "referral_credited": True,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.modified_count == 1

    def release_referral_credit(self, order_id: str) -> None:
        self._col.update_one(
            {"_id": to_object_id(order_id)},
            {"$set": {"referral_credited": False}},
        )
