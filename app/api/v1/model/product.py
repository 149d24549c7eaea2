# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/19 11:05
# @Author  : Pedro
# @File    : product.py
# @Software: PyCharm
"""
from sqlalchemy import Column, Integer, Numeric, String, Text

from app.core.db import InfoCrud


class Product(InfoCrud):
    __tablename__ = "products"

    nombre = Column(String(255), nullable=False, index=True)
    descripcion = Column(Text)
    precio = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
