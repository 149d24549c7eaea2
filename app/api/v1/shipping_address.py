# -*- coding: utf-8 -*-
"""
Tienda 收货地址模块
---------------------------------------------
✅ 创建 / 查询（按用户、全量过滤、按ID）/ 更新 / 删除
✅ 设置默认地址、批量删除、地址校验
✅ 列表接口带 Cache-Control 私有缓存头
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.handler.dependencies import get_shipping_address_service, list_cache_headers
from app.api.v1.schema.shipping_address import (
    AddressValidateSchema,
    BulkDeleteSchema,
    SetDefaultSchema,
    ShippingAddressCreateSchema,
    ShippingAddressDetailSchema,
    ShippingAddressSchema,
    ShippingAddressUpdateSchema,
)
from app.api.v1.services.shipping_address_service import ShippingAddressService
from app.core.response import ApiResponse
from app.core.security import CallerContext, login_required

rp = APIRouter(prefix="/shipping-addresses", tags=["收货地址"])


# ======================================================
# 🆕 创建地址
# ======================================================
@rp.post("", summary="创建收货地址")
async def create_address(
        body: ShippingAddressCreateSchema,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    address = await service.create(body.model_dump())
    return ApiResponse.success(
        address,
        "Shipping address created successfully",
        status_code=201,
        schema=ShippingAddressSchema,
    )


# ======================================================
# 📋 全部地址（可按城市 / 州省 / 国家过滤）
# ======================================================
@rp.get("", summary="收货地址列表")
async def list_addresses(
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        ciudad: Optional[str] = Query(None),
        estado_provincia: Optional[str] = Query(None),
        pais: Optional[str] = Query(None),
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
        headers: dict = Depends(list_cache_headers),
):
    result = await service.list_all(
        ciudad=ciudad,
        estado_provincia=estado_provincia,
        pais=pais,
        page=page,
        limit=limit,
    )
    return ApiResponse.page(
        items=result.items,
        pagination=result.pagination,
        message="Shipping addresses retrieved successfully",
        key="addresses",
        schema=ShippingAddressDetailSchema,
        extra={"filters": result.filters},
        headers=headers,
    )


# ======================================================
# 🗑️ 批量删除（仅本人地址）
# ======================================================
@rp.post("/bulk-delete", summary="批量删除收货地址")
async def bulk_delete_addresses(
        body: BulkDeleteSchema,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    result = await service.bulk_delete(body.addressIds, caller)
    return ApiResponse.success(result, "Addresses deleted successfully")


# ======================================================
# ✅ 地址校验
# ======================================================
@rp.post("/validate", summary="校验收货地址")
async def validate_address(
        body: AddressValidateSchema,
        caller: CallerContext = Depends(login_required),
):
    is_valid = ShippingAddressService.validate(body.codigo_postal, body.ciudad, body.pais)
    return ApiResponse.success(
        {
            "isValid": is_valid,
            "details": "Address is valid" if is_valid else "Address validation failed",
        },
        "Address validation completed",
    )


# ======================================================
# 👤 按用户分页
# ======================================================
@rp.get("/user/{usuario_id}", summary="用户的收货地址")
async def list_user_addresses(
        usuario_id: int,
        page: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
        headers: dict = Depends(list_cache_headers),
):
    result = await service.list_by_user(usuario_id, page=page, limit=limit)
    return ApiResponse.page(
        items=result.items,
        pagination=result.pagination,
        message="Shipping addresses retrieved successfully",
        key="addresses",
        schema=ShippingAddressSchema,
        extra={"user": {"id": result.user.id, "name": result.user.full_name}},
        headers=headers,
    )


# ======================================================
# 🔍 地址详情 / 更新 / 删除
# ======================================================
@rp.get("/{address_id}", summary="收货地址详情")
async def get_address(
        address_id: int,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    address = await service.get_by_id(address_id)
    return ApiResponse.success(
        address,
        "Shipping address retrieved successfully",
        schema=ShippingAddressSchema,
    )


@rp.put("/{address_id}", summary="更新收货地址")
async def update_address(
        address_id: int,
        body: ShippingAddressUpdateSchema,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    address = await service.update(address_id, caller, body.model_dump(exclude_unset=True))
    return ApiResponse.success(
        address,
        "Shipping address updated successfully",
        schema=ShippingAddressDetailSchema,
    )


@rp.delete("/{address_id}", summary="删除收货地址")
async def delete_address(
        address_id: int,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    result = await service.delete(address_id, caller)
    return ApiResponse.success(result, "Shipping address deleted successfully")


@rp.post("/{address_id}/default", summary="设为默认地址")
async def set_default_address(
        address_id: int,
        body: SetDefaultSchema,
        caller: CallerContext = Depends(login_required),
        service: ShippingAddressService = Depends(get_shipping_address_service),
):
    await service.set_default(address_id, body.usuario_id, caller)
    return ApiResponse.success(message="Default address updated successfully")
