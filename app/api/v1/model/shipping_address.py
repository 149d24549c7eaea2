# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/18 02:20
# @Author  : Pedro
# @File    : shipping_address.py
# @Software: PyCharm
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.core.db import InfoCrud


class ShippingAddress(InfoCrud):
    """
    📍 收货地址 Model
    --------------------
    - 每个用户最多 N 个地址（服务层校验）
    - 默认地址唯一性由 “先清空再设置” 的事务保证，数据库不加约束
    """

    __tablename__ = "shipping_addresses"

    usuario_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    direccion = Column(String(255), nullable=False)
    ciudad = Column(String(100), nullable=False)
    estado_provincia = Column(String(100), nullable=False)
    codigo_postal = Column(String(10), nullable=False)
    pais = Column(String(100), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="addresses", lazy="raise")
