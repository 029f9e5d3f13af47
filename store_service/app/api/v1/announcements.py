from __future__ import annotations

from fastapi import APIRouter, Depends

from common.models.user import User

from ..schemas.catalog import AnnouncementResponse, MessageResponse
from ...auth.gate import require_admin
from ...models.announcement import AnnouncementCreateInput, AnnouncementUpdateInput
from ...services.announcements_service import (
    AnnouncementsService,
    get_announcements_service,
)


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[AnnouncementResponse], summary="활성 공지 목록")
def list_active_announcements(
    service: AnnouncementsService = Depends(get_announcements_service),
) -> list[AnnouncementResponse]:
    return [AnnouncementResponse.from_domain(a) for a in service.list_active()]


@admin_router.get("", response_model=list[AnnouncementResponse], summary="전체 공지 목록")
def list_all_announcements(
    service: AnnouncementsService = Depends(get_announcements_service),
) -> list[AnnouncementResponse]:
    return [AnnouncementResponse.from_domain(a) for a in service.list_all()]


@admin_router.post(
    "", response_model=AnnouncementResponse, status_code=201, summary="공지 등록"
)
def create_announcement(
    body: AnnouncementCreateInput,
    admin: User = Depends(require_admin),
    service: AnnouncementsService = Depends(get_announcements_service),
) -> AnnouncementResponse:
    return AnnouncementResponse.from_domain(service.create(body, admin.user_code))


@admin_router.put(
    "/{announcement_id}", response_model=AnnouncementResponse, summary="공지 수정"
)
def update_announcement(
    announcement_id: str,
    body: AnnouncementUpdateInput,
    service: AnnouncementsService = Depends(get_announcements_service),
) -> AnnouncementResponse:
    return AnnouncementResponse.from_domain(service.update(announcement_id, body))


@admin_router.delete(
    "/{announcement_id}", response_model=MessageResponse, summary="공지 삭제"
)
def delete_announcement(
    announcement_id: str,
    service: AnnouncementsService = Depends(get_announcements_service),
) -> MessageResponse:
    service.delete(announcement_id)
    return MessageResponse(message="announcement deleted")
