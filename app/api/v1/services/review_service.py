# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/19 23:42
# @Author  : Pedro
# @File    : review_service.py
# @Software: PyCharm
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from app.api.v1.model.product import Product
from app.api.v1.model.review import Review
from app.api.v1.model.user import User
from app.core.config import PaginationConfig
from app.core.db import transaction
from app.core.exception import ValidationError, operation_boundary
from app.core.pagination import Pagination
from app.core.security import CallerContext

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class ReviewPage:
    items: List[Review]
    pagination: Dict[str, int]
    average: float


class ReviewService:
    """
    ⭐ 商品评论服务
    -----------------------------------------
    ✅ 用户对商品添加评论（评分 1-5）
    ✅ 商品评论分页 + 平均分
    """

    def __init__(
            self,
            session_factory: async_sessionmaker[AsyncSession],
            *,
            pagination: Optional[PaginationConfig] = None,
    ):
        self.session_factory = session_factory
        self.pagination = pagination or PaginationConfig()

    @operation_boundary("Error creating review")
    async def create_review(
            self,
            product_id: int,
            caller: CallerContext,
            rating: Any,
            review_text: Optional[str] = None,
    ) -> Review:
        if not isinstance(rating, int) or isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(f"rating must be an integer between {MIN_RATING} and {MAX_RATING}")

        async with transaction(self.session_factory) as session:
            await Product.get_or_404(session, product_id, "Product not found", productId=product_id)
            await User.get_or_404(session, caller.id, "User not found", userId=caller.id)

            review = Review(
                rating=rating,
                review_text=review_text.strip() if review_text else None,
                usuario_id=caller.id,
                producto_id=product_id,
            )
            session.add(review)
            await session.flush()
            review = (
                await session.execute(
                    select(Review)
                    .options(joinedload(Review.user))
                    .where(Review.id == review.id)
                    .execution_options(populate_existing=True)
                )
            ).scalar_one()

        logger.info(f"⭐ review {review.id} added to product {product_id} by user {caller.id}")
        return review

    @operation_boundary("Error retrieving reviews")
    async def list_reviews(self, product_id: int, page: Any = None, limit: Any = None) -> ReviewPage:
        paging = Pagination.from_query(
            page,
            limit,
            default_limit=self.pagination.default_limit,
            max_limit=self.pagination.max_limit,
        )
        async with self.session_factory() as session:
            await Product.get_or_404(session, product_id, "Product not found", productId=product_id)

            stats = (
                await session.execute(
                    select(func.count(Review.id), func.avg(Review.rating))
                    .where(Review.producto_id == product_id)
                )
            ).one()
            total, average = stats[0] or 0, stats[1] or 0.0

            stmt = (
                select(Review)
                .options(joinedload(Review.user))
                .where(Review.producto_id == product_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .offset(paging.offset)
                .limit(paging.limit)
            )
            items = list((await session.execute(stmt)).scalars().all())

        return ReviewPage(items=items, pagination=paging.meta(total), average=round(float(average), 1))
