# -*- coding: utf-8 -*-
"""
Tienda 用户模块
---------------------------------------------
✅ /users/profile 当前登录用户资料
✅ 管理员：用户列表 / 查看 / 更新 / 删除
✅ 输出不含密码哈希
"""
from fastapi import APIRouter, Depends

from app.api.v1.handler.dependencies import get_user_service
from app.api.v1.schema.user import UserSchema, UserUpdateSchema
from app.api.v1.services.user_service import UserService
from app.core.response import ApiResponse
from app.core.security import CallerContext, admin_required, login_required

rp = APIRouter(prefix="/users", tags=["用户"])


@rp.get("/profile", summary="当前用户资料")
async def get_own_profile(
        caller: CallerContext = Depends(login_required),
        service: UserService = Depends(get_user_service),
):
    user = await service.get_profile(caller.id)
    return ApiResponse.success(user, "User profile retrieved successfully", schema=UserSchema)


# ======================================================
# 🛡️ 管理员接口
# ======================================================
@rp.get("", summary="全部用户")
async def list_users(
        caller: CallerContext = Depends(admin_required),
        service: UserService = Depends(get_user_service),
):
    users = await service.list_users()
    return ApiResponse.success(users, "Users retrieved successfully", schema=UserSchema)


@rp.get("/profile/{user_id}", summary="查看用户资料")
async def get_user_profile(
        user_id: int,
        caller: CallerContext = Depends(admin_required),
        service: UserService = Depends(get_user_service),
):
    user = await service.get_profile(user_id)
    return ApiResponse.success(user, "User profile retrieved successfully", schema=UserSchema)


@rp.put("/profile/{user_id}", summary="更新用户资料")
async def update_user_profile(
        user_id: int,
        body: UserUpdateSchema,
        caller: CallerContext = Depends(admin_required),
        service: UserService = Depends(get_user_service),
):
    user = await service.update_profile(user_id, body.model_dump())
    return ApiResponse.success(user, "User profile updated successfully", schema=UserSchema)


@rp.delete("/{user_id}", summary="删除用户", status_code=204)
async def delete_user(
        user_id: int,
        caller: CallerContext = Depends(admin_required),
        service: UserService = Depends(get_user_service),
):
    await service.delete_user(user_id)
    return ApiResponse.no_content()
