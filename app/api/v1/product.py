"""
# @Time    : 2025/11/02 18:30
# @Author  : Pedro
# @File    : product.py
# @Software: PyCharm
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.handler.dependencies import get_product_service, get_review_service, list_cache_headers
from app.api.v1.schema.product import ProductCreateSchema, ProductSchema, ReviewCreateSchema, ReviewSchema
from app.api.v1.services.product_service import ProductService
from app.api.v1.services.review_service import ReviewService
from app.core.enums import RoleEnum
from app.core.response import ApiResponse
from app.core.security import CallerContext, login_required, roles_required

rp = APIRouter(prefix="/products", tags=["Products"])


@rp.get("", name="商品列表")
async def product_list(
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        caller: CallerContext = Depends(login_required),
        service: ProductService = Depends(get_product_service),
        headers: dict = Depends(list_cache_headers),
):
    items, pagination = await service.list_products(page, limit)
    return ApiResponse.page(
        items=items,
        pagination=pagination,
        message="Products retrieved successfully",
        key="products",
        schema=ProductSchema,
        headers=headers,
    )


@rp.post("", name="创建商品")
async def product_create(
        body: ProductCreateSchema,
        caller: CallerContext = Depends(roles_required(RoleEnum.ADMIN.value, RoleEnum.MODERATOR.value)),
        service: ProductService = Depends(get_product_service),
):
    """仅 admin / moderator"""
    product = await service.create_product(body.model_dump())
    return ApiResponse.success(product, "Product created successfully", status_code=201, schema=ProductSchema)


@rp.get("/{product_id}", name="商品详情")
async def product_detail(
        product_id: int,
        caller: CallerContext = Depends(login_required),
        service: ProductService = Depends(get_product_service),
):
    product = await service.get_product(product_id)
    return ApiResponse.success(product, "Product retrieved successfully", schema=ProductSchema)


# ======================================================
# ⭐ 商品评论
# ======================================================
@rp.get("/{product_id}/reviews", name="商品评论列表")
async def review_list(
        product_id: int,
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        caller: CallerContext = Depends(login_required),
        service: ReviewService = Depends(get_review_service),
        headers: dict = Depends(list_cache_headers),
):
    result = await service.list_reviews(product_id, page, limit)
    return ApiResponse.page(
        items=result.items,
        pagination=result.pagination,
        message="Reviews retrieved successfully",
        key="reviews",
        schema=ReviewSchema,
        extra={"average": result.average},
        headers=headers,
    )


@rp.post("/{product_id}/reviews", name="添加商品评论")
async def review_create(
        product_id: int,
        body: ReviewCreateSchema,
        caller: CallerContext = Depends(login_required),
        service: ReviewService = Depends(get_review_service),
):
    review = await service.create_review(product_id, caller, body.rating, body.review_text)
    return ApiResponse.success(review, "Review created successfully", status_code=201, schema=ReviewSchema)
