from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class AnnouncementSeverity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Announcement(BaseModel):
    """관리자가 작성하는 공지 도메인 모델."""

    id: str | None = None
    title: str
    content: str
    severity: AnnouncementSeverity = AnnouncementSeverity.INFO
    is_active: bool = True
    created_by: str  # 작성자 user_code
    created_at: datetime
    updated_at: datetime


class AnnouncementCreateInput(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    severity: AnnouncementSeverity = AnnouncementSeverity.INFO
    is_active: bool = True


class AnnouncementUpdateInput(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    severity: AnnouncementSeverity | None = None
    is_active: bool | None = None
