from __future__ import annotations

from common.mongo.types import (
    BaseDocument,
    build_document_data_from_domain,
    from_object_id,
)

from ...models.announcement import Announcement


class AnnouncementDocument(BaseDocument):
    """MongoDB announcements 컬렉션 도큐먼트 모델."""

    title: str
    content: str
    severity: str
    is_active: bool = True
    created_by: str

    @classmethod
    def from_domain(cls, announcement: Announcement) -> "AnnouncementDocument":
        data = build_document_data_from_domain(announcement)
        return cls.model_validate(data)

    def to_domain(self) -> Announcement:
        return Announcement(
            id=from_object_id(self.id),
            title=self.title,
            content=self.content,
            severity=self.severity,
            is_active=self.is_active,
            created_by=self.created_by,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
