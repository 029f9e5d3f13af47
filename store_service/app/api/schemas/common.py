"""공통 스키마 정의."""

from __future__ import annotations

from typing import Generic, Sequence, TypeVar

from pydantic import BaseModel


T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """page/page_size 기반 목록 응답. 크레딧 이력 조회에서 사용한다."""

    items: list[T]
    total: int
    page: int
    page_size: int
    has_next: bool = False

    @classmethod
    def from_page(
        cls, items: Sequence[T], total: int, page: int, page_size: int
    ) -> "PaginatedResponse[T]":
        return cls(
            items=list(items),
            total=total,
            page=page,
            page_size=page_size,
            has_next=page * page_size < total,
        )
