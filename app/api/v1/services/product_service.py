# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/19 22:31
# @Author  : Pedro
# @File    : product_service.py
# @Software: PyCharm
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.v1.model.product import Product
from app.core.config import PaginationConfig
from app.core.db import transaction
from app.core.exception import ValidationError, operation_boundary
from app.core.pagination import Pagination


class ProductService:
    """
    🧩 商品服务层
    ---------------------------------------------
    ✅ 分页列表（新商品在前）
    ✅ 创建商品（名称必填，价格 / 库存非负）
    """

    def __init__(
            self,
            session_factory: async_sessionmaker[AsyncSession],
            *,
            pagination: Optional[PaginationConfig] = None,
    ):
        self.session_factory = session_factory
        self.pagination = pagination or PaginationConfig()

    @operation_boundary("Error retrieving products")
    async def list_products(self, page: Any = None, limit: Any = None) -> Tuple[List[Product], Dict[str, int]]:
        paging = Pagination.from_query(
            page,
            limit,
            default_limit=self.pagination.default_limit,
            max_limit=self.pagination.max_limit,
        )
        async with self.session_factory() as session:
            total = (await session.execute(select(func.count(Product.id)))).scalar() or 0
            stmt = (
                select(Product)
                .order_by(Product.created_at.desc(), Product.id.desc())
                .offset(paging.offset)
                .limit(paging.limit)
            )
            items = list((await session.execute(stmt)).scalars().all())
        return items, paging.meta(total)

    @operation_boundary("Error retrieving product")
    async def get_product(self, product_id: int) -> Product:
        async with self.session_factory() as session:
            return await Product.get_or_404(session, product_id, "Product not found")

    @operation_boundary("Error creating product")
    async def create_product(self, data: Dict[str, Any]) -> Product:
        nombre = (data.get("nombre") or "").strip()
        precio = data.get("precio")
        stock = data.get("stock") or 0

        if not nombre or precio is None:
            raise ValidationError("nombre and precio are required", required=["nombre", "precio"])
        if Decimal(precio) < 0:
            raise ValidationError("precio must be greater than or equal to 0")
        if stock < 0:
            raise ValidationError("stock must be greater than or equal to 0")

        async with transaction(self.session_factory) as session:
            product = Product(
                nombre=nombre,
                descripcion=(data.get("descripcion") or "").strip() or None,
                precio=precio,
                stock=stock,
            )
            session.add(product)
            await session.flush()

        logger.info(f"🛒 product {product.id} created")
        return product
