from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database

from common.mongo.types import is_object_id, to_object_id

from ..models.announcement import Announcement
from .documents.announcement_document import AnnouncementDocument
from .interfaces import AnnouncementRepositoryInterface


class AnnouncementRepository(AnnouncementRepositoryInterface):
    """announcements 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["announcements"]

    @staticmethod
    def _from_document(doc: dict) -> Announcement:
        return AnnouncementDocument.model_validate(doc).to_domain()

    def insert(self, announcement: Announcement) -> Announcement:
        payload = AnnouncementDocument.from_domain(announcement).to_mongo_record()
        result = self._col.insert_one(payload)
        return announcement.model_copy(update={"id": str(result.inserted_id)})

    def find_by_id(self, announcement_id: str) -> Announcement | None:
        if not is_object_id(announcement_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(announcement_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def list(self, active_only: bool = False) -> list[Announcement]:
        query: dict = {"is_active": True} if active_only else {}
        cursor = self._col.find(query, sort=[("created_at", -1), ("_id", -1)])
        return [self._from_document(doc) for doc in cursor]

    def update(
        self, announcement_id: str, fields: dict[str, Any]
    ) -> Announcement | None:
        if not is_object_id(announcement_id):
            return None
        update_fields = dict(fields)
        update_fields["updated_at"] = datetime.now(timezone.utc)
        doc = self._col.find_one_and_update(
            {"_id": to_object_id(announcement_id)},
            {"$set": update_fields},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def delete(self, announcement_id: str) -> bool:
        if not is_object_id(announcement_id):
            return False
        result = self._col.delete_one({"_id": to_object_id(announcement_id)})
        return result.deleted_count > 0
