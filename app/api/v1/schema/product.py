# -*- coding: utf-8 -*-
"""
商品 / 评论 Schema
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.api.v1.schema.shipping_address import UserBriefSchema


class ProductCreateSchema(BaseModel):
    nombre: Optional[str] = Field(None, description="商品名称")
    descripcion: Optional[str] = Field(None, description="商品描述")
    precio: Optional[Decimal] = Field(None, description="价格")
    stock: Optional[int] = Field(0, description="库存")


class ProductSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    descripcion: Optional[str] = None
    precio: float
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("precio", mode="before")
    @classmethod
    def decimal_to_float(cls, v):
        return float(v) if isinstance(v, Decimal) else v


class ReviewCreateSchema(BaseModel):
    rating: Optional[int] = Field(None, description="评分 1-5")
    review_text: Optional[str] = Field(None, description="评论内容")


class ReviewSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rating: int
    review_text: Optional[str] = None
    usuario_id: int
    producto_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserBriefSchema] = Field(None, serialization_alias="User")
