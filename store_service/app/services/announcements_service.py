from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import AnnouncementNotFoundError
from ..models.announcement import (
    Announcement,
    AnnouncementCreateInput,
    AnnouncementUpdateInput,
)
from ..repositories.announcement_repository import AnnouncementRepository
from ..repositories.interfaces import AnnouncementRepositoryInterface


class AnnouncementsService:
    def __init__(self, repo: AnnouncementRepositoryInterface) -> None:
        self._repo = repo

    def list_active(self) -> list[Announcement]:
        return self._repo.list(active_only=True)

    def list_all(self) -> list[Announcement]:
        return self._repo.list()

    def create(self, input_model: AnnouncementCreateInput, author_code: str) -> Announcement:
        now = datetime.now(timezone.utc)
        announcement = Announcement(
            **input_model.model_dump(),
            created_by=author_code,
            created_at=now,
            updated_at=now,
        )
        return self._repo.insert(announcement)

    def update(
        self, announcement_id: str, changes: AnnouncementUpdateInput
    ) -> Announcement:
        fields = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True, mode="json").items()
            if value is not None
        }
        if not fields:
            existing = self._repo.find_by_id(announcement_id)
            if existing is None:
                raise AnnouncementNotFoundError()
            return existing

        updated = self._repo.update(announcement_id, fields)
        if updated is None:
            raise AnnouncementNotFoundError()
        return updated

    def delete(self, announcement_id: str) -> None:
        if not self._repo.delete(announcement_id):
            raise AnnouncementNotFoundError()


def get_announcement_repository(
    db: Database = Depends(get_database),
) -> AnnouncementRepositoryInterface:
    return AnnouncementRepository(db)


def get_announcements_service(
    repo: AnnouncementRepositoryInterface = Depends(get_announcement_repository),
) -> AnnouncementsService:
    return AnnouncementsService(repo)
