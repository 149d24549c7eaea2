# -*- coding: utf-8 -*-
"""
收货地址 Schema
--------------------------------
✅ 入参字段全部可选：缺失字段由服务层统一校验（400 + 缺失列表）
✅ 出参按原接口字段名输出（User 关联投影 firstName / lastName_father）
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ======================================================
# 📥 入参
# ======================================================
class ShippingAddressCreateSchema(BaseModel):
    usuario_id: Optional[int] = Field(None, description="所属用户ID")
    direccion: Optional[str] = Field(None, description="街道地址")
    ciudad: Optional[str] = Field(None, description="城市")
    estado_provincia: Optional[str] = Field(None, description="州 / 省")
    codigo_postal: Optional[str] = Field(None, description="邮政编码 12345 或 12345-6789")
    pais: Optional[str] = Field(None, description="国家")


class ShippingAddressUpdateSchema(BaseModel):
    direccion: Optional[str] = None
    ciudad: Optional[str] = None
    estado_provincia: Optional[str] = None
    codigo_postal: Optional[str] = None
    pais: Optional[str] = None


class SetDefaultSchema(BaseModel):
    usuario_id: Optional[int] = Field(None, description="地址所属用户ID")


class BulkDeleteSchema(BaseModel):
    addressIds: Optional[List[int]] = Field(None, description="待删除的地址ID列表")


class AddressValidateSchema(BaseModel):
    codigo_postal: Optional[str] = None
    ciudad: Optional[str] = None
    pais: Optional[str] = None


# ======================================================
# 📤 出参
# ======================================================
class UserBriefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: Optional[str] = Field(None, serialization_alias="firstName")
    last_name_father: Optional[str] = Field(None, serialization_alias="lastName_father")


class UserDetailBriefSchema(UserBriefSchema):
    last_name_mother: Optional[str] = Field(None, serialization_alias="lastName_mother")


class ShippingAddressSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    usuario_id: int
    direccion: str
    ciudad: str
    estado_provincia: str
    codigo_postal: str
    pais: str
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserBriefSchema] = Field(None, serialization_alias="User")


class ShippingAddressDetailSchema(ShippingAddressSchema):
    user: Optional[UserDetailBriefSchema] = Field(None, serialization_alias="User")
