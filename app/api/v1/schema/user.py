# -*- coding: utf-8 -*-
"""
用户资料 Schema
"""
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserSchema(BaseModel):
    """用户资料输出（不含凭证）"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: Optional[str] = Field(None, serialization_alias="firstName")
    last_name_father: Optional[str] = Field(None, serialization_alias="lastName_father")
    last_name_mother: Optional[str] = Field(None, serialization_alias="lastName_mother")
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserUpdateSchema(BaseModel):
    first_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("firstName", "nombre", "first_name"),
        description="名字",
    )
    last_name_father: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("lastName_father", "last_name_father"),
    )
    last_name_mother: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("lastName_mother", "last_name_mother"),
    )
    email: Optional[str] = None
    password: Optional[str] = Field(None, description="新密码（仅保存哈希）")
