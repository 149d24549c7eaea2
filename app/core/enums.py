# -*- coding:utf-8 -*-
"""
Tienda 枚举定义
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
✅ 调用方角色（由认证方写入 Token scope）
"""

from enum import Enum


class RoleEnum(str, Enum):
    """
    角色枚举
      - ADMIN：管理员，可操作任意用户的地址与资料
      - MODERATOR：运营，可维护商品
      - USER：普通注册用户
    """

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"

    @classmethod
    def from_name(cls, name: str) -> "RoleEnum":
        """支持通过字符串名称获取枚举"""
        value = name.strip().lower()
        for member in cls:
            if member.value == value:
                return member
        raise ValueError(f"Unknown role: {name}")
