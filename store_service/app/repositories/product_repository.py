from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.mongo.types import is_object_id, to_object_id

from ..exceptions import DuplicateNameError
from ..models.product import Product
from .documents.product_document import ProductDocument
from .interfaces import ProductRepositoryInterface


class ProductRepository(ProductRepositoryInterface):
    """products 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["products"]

    @staticmethod
    def _from_document(doc: dict) -> Product:
        return ProductDocument.model_validate(doc).to_domain()

    def find_by_id(self, product_id: str) -> Product | None:
        if not is_object_id(product_id):
            return None
        doc = self._col.find_one({"_id": to_object_id(product_id)})
        if not doc:
            return None
        return self._from_document(doc)

    def list(self, featured_only: bool = False) -> list[Product]:
        query: dict = {"is_featured": True} if featured_only else {}
        cursor = self._col.find(query, sort=[("created_at", -1), ("_id", -1)])
        return [self._from_document(doc) for doc in cursor]

    def insert(self, product: Product) -> Product:
        payload = ProductDocument.from_domain(product).to_mongo_record()
        try:
            result = self._col.insert_one(payload)
        except DuplicateKeyError as exc:
            raise DuplicateNameError(
                f"product with name {product.name!r} already exists"
            ) from exc
        return product.model_copy(update={"id": str(result.inserted_id)})

    def update(self, product_id: str, fields: dict[str, Any]) -> Product | None:
        if not is_object_id(product_id):
            return None
        update_fields = dict(fields)
        update_fields["updated_at"] = datetime.now(timezone.utc)
        try:
            doc = self._col.find_one_and_update(
                {"_id": to_object_id(product_id)},
                {"$set": update_fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise DuplicateNameError(
                f"product with name {fields.get('name')!r} already exists"
            ) from exc
        if not doc:
            return None
        return self._from_document(doc)

    def delete(self, product_id: str) -> bool:
        if not is_object_id(product_id):
            return False
        result = self._col.delete_one({"_id": to_object_id(product_id)})
        return result.deleted_count > 0
