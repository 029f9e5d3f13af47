from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas.catalog import MessageResponse, ProductResponse
from ...auth.gate import require_admin
from ...models.product import ProductCreateInput, ProductUpdateInput
from ...services.products_service import ProductsService, get_products_service


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=list[ProductResponse], summary="상품 목록")
def list_products(
    service: ProductsService = Depends(get_products_service),
) -> list[ProductResponse]:
    return [ProductResponse.from_domain(p) for p in service.list_products()]


@router.get("/featured", response_model=list[ProductResponse], summary="추천 상품 목록")
def list_featured_products(
    service: ProductsService = Depends(get_products_service),
) -> list[ProductResponse]:
    return [ProductResponse.from_domain(p) for p in service.list_featured()]


@router.get("/{product_id}", response_model=ProductResponse, summary="상품 상세")
def get_product(
    product_id: str,
    service: ProductsService = Depends(get_products_service),
) -> ProductResponse:
    return ProductResponse.from_domain(service.get_product(product_id))


# -------- Admin --------


@admin_router.post(
    "", response_model=ProductResponse, status_code=201, summary="상품 등록"
)
def create_product(
    body: ProductCreateInput,
    service: ProductsService = Depends(get_products_service),
) -> ProductResponse:
    return ProductResponse.from_domain(service.create_product(body))


@admin_router.put("/{product_id}", response_model=ProductResponse, summary="상품 수정")
def update_product(
    product_id: str,
    body: ProductUpdateInput,
    service: ProductsService = Depends(get_products_service),
) -> ProductResponse:
    return ProductResponse.from_domain(service.update_product(product_id, body))


@admin_router.delete(
    "/{product_id}", response_model=MessageResponse, summary="상품 삭제"
)
def delete_product(
    product_id: str,
    service: ProductsService = Depends(get_products_service),
) -> MessageResponse:
    service.delete_product(product_id)
    return MessageResponse(message="product deleted")
