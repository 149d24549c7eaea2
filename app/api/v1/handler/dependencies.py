# -*- coding: utf-8 -*-
"""
服务依赖注入
--------------------------------
✅ 每个请求从 app.state 取 session_factory / settings 组装服务
✅ 测试中替换 app.state 即可切换数据库
"""
from fastapi import Request

from app.api.v1.services.product_service import ProductService
from app.api.v1.services.review_service import ReviewService
from app.api.v1.services.shipping_address_service import ShippingAddressService
from app.api.v1.services.user_service import UserService
from app.core.config import Settings


def get_settings_state(request: Request) -> Settings:
    return request.app.state.settings


def get_shipping_address_service(request: Request) -> ShippingAddressService:
    settings = get_settings_state(request)
    return ShippingAddressService(
        request.app.state.session_factory,
        max_per_user=settings.shipping.max_addresses_per_user,
        pagination=settings.pagination,
    )


def get_user_service(request: Request) -> UserService:
    return UserService(request.app.state.session_factory)


def get_product_service(request: Request) -> ProductService:
    return ProductService(
        request.app.state.session_factory,
        pagination=get_settings_state(request).pagination,
    )


def get_review_service(request: Request) -> ReviewService:
    return ReviewService(
        request.app.state.session_factory,
        pagination=get_settings_state(request).pagination,
    )


def list_cache_headers(request: Request) -> dict:
    """列表接口的私有缓存头"""
    return {"Cache-Control": get_settings_state(request).pagination.cache_control}
