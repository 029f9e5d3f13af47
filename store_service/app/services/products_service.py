from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import ProductNotFoundError
from ..models.product import Product, ProductCreateInput, ProductUpdateInput
from ..repositories.interfaces import ProductRepositoryInterface
from ..repositories.product_repository import ProductRepository


logger = logging.getLogger(__name__)


# null 을 명시적으로 보내면 값을 지우는 필드. 나머지 필드의 null 은 무시한다.
NULLABLE_PRODUCT_FIELDS = frozenset({"discount_price", "long_description"})


class ProductsService:
    """상품 카탈로그 조회/관리.

    상품을 수정해도 이미 생성된 주문의 항목 스냅샷과 총액은 바뀌지 않는다.
    """

    def __init__(self, repo: ProductRepositoryInterface) -> None:
        self._repo = repo

    def list_products(self) -> list[Product]:
        return self._repo.list()

    def list_featured(self) -> list[Product]:
        return self._repo.list(featured_only=True)

    def get_product(self, product_id: str) -> Product:
        product = self._repo.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError()
        return product

    def create_product(self, input_model: ProductCreateInput) -> Product:
        now = datetime.now(timezone.utc)
        product = Product(**input_model.model_dump(), created_at=now, updated_at=now)
        created = self._repo.insert(product)
        logger.info("product created: %s (%s)", created.name, created.id)
        return created

    def update_product(self, product_id: str, changes: ProductUpdateInput) -> Product:
        fields = {
            key: value
            for key, value in changes.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key in NULLABLE_PRODUCT_FIELDS
        }
        if not fields:
            return self.get_product(product_id)

        updated = self._repo.update(product_id, fields)
        if updated is None:
            raise ProductNotFoundError()
        logger.info("product updated: %s", product_id)
        return updated

    def delete_product(self, product_id: str) -> None:
        if not self._repo.delete(product_id):
            raise ProductNotFoundError()
        logger.info("product deleted: %s", product_id)


def get_product_repository(
    db: Database = Depends(get_database),
) -> ProductRepositoryInterface:
    return ProductRepository(db)


def get_products_service(
    repo: ProductRepositoryInterface = Depends(get_product_repository),
) -> ProductsService:
    return ProductsService(repo)
