# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/18 02:10
# @Author  : Pedro
# @File    : user.py
# @Software: PyCharm
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.core.db import InfoCrud
from app.core.security import check_password_hash, generate_password_hash


class User(InfoCrud):
    """
    👤 用户 Model
    --------------------
    - 凭证只保存加盐哈希
    - 删除为硬删除，地址 / 评论随外键级联删除
    """

    __tablename__ = "users"

    first_name = Column(String(100), nullable=False)
    last_name_father = Column(String(100))
    last_name_mother = Column(String(100))
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)

    addresses = relationship(
        "ShippingAddress",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def set_password(self, raw: str) -> None:
        self.hashed_password = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        return check_password_hash(raw, self.hashed_password)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name_father) if p)
