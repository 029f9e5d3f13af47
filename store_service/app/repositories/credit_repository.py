"""크레딧 트랜잭션 레포지토리.

잔액은 users.credits 에 있으며, 이 컬렉션은 커밋된 변경의 감사 로그만 보관한다.
"""

from __future__ import annotations

from pymongo.database import Database

from .documents.credit_document import CreditTransactionDocument
from .interfaces import CreditTransactionRepositoryInterface
from ..models.credit import CreditTransaction


class CreditTransactionRepository(CreditTransactionRepositoryInterface):
    """credit_transactions 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["credit_transactions"]

    def create(self, tx: CreditTransaction) -> CreditTransaction:
        """트랜잭션 로그 생성."""
        doc = CreditTransactionDocument.from_domain(tx)
        payload = doc.to_mongo_record()
        result = self._col.insert_one(payload)
        return tx.model_copy(update={"id": str(result.inserted_id)})

    def list_by_user(
        self, user_code: str, page: int, page_size: int
    ) -> tuple[list[CreditTransaction], int]:
        """사용자의 크레딧 트랜잭션 이력 조회 (최신순)."""
        if page <= 0:
            page = 1
        if page_size <= 0 or page_size > 100:
            page_size = 20

        skip = (page - 1) * page_size

        total = self._col.count_documents({"user_code": user_code})
        cursor = self._col.find(
            {"user_code": user_code},
            sort=[("created_at", -1), ("_id", -1)],
            skip=skip,
            limit=page_size,
        )

        items: list[CreditTransaction] = []
        for raw in cursor:
            items.append(CreditTransactionDocument.model_validate(raw).to_domain())

        return items, total
