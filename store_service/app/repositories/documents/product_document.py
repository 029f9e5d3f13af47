from __future__ import annotations

from common.mongo.types import (
    BaseDocument,
    build_document_data_from_domain,
    from_object_id,
)

from ...models.product import Product


class ProductDocument(BaseDocument):
    """MongoDB products 컬렉션 도큐먼트 모델."""

    name: str
    description: str
    long_description: str | None = None
    price: float
    discount_price: float | None = None
    image: str
    category: str
    tags: list[str] = []
    is_featured: bool = False

    @classmethod
    def from_domain(cls, product: Product) -> "ProductDocument":
        data = build_document_data_from_domain(product)
        return cls.model_validate(data)

    def to_domain(self) -> Product:
        return Product(
            id=from_object_id(self.id),
            name=self.name,
            description=self.description,
            long_description=self.long_description,
            price=self.price,
            discount_price=self.discount_price,
            image=self.image,
            category=self.category,
            tags=list(self.tags),
            is_featured=self.is_featured,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
