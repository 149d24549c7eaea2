# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/19 11:20
# @Author  : Pedro
# @File    : review.py
# @Software: PyCharm
"""
from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from app.core.db import InfoCrud


class Review(InfoCrud):
    """⭐ 商品评论：属于用户，也属于商品"""

    __tablename__ = "reviews"

    rating = Column(Integer, nullable=False)
    review_text = Column(Text)
    usuario_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", lazy="raise")
