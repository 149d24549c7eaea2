# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/18 03:22
# @Author  : Pedro
# @File    : shipping_address_service.py
# @Software: PyCharm
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import joinedload

from app.api.v1.model.shipping_address import ShippingAddress
from app.api.v1.model.user import User
from app.core.config import PaginationConfig
from app.core.db import transaction, utcnow
from app.core.exception import (
    ForbiddenError,
    LimitExceededError,
    NotFoundError,
    ValidationError,
    operation_boundary,
)
from app.core.pagination import Pagination
from app.core.security import CallerContext

POSTAL_CODE_PATTERN = re.compile(r"^[0-9]{5}(-[0-9]{4})?$")

REQUIRED_FIELDS = ("usuario_id", "direccion", "ciudad", "estado_provincia", "codigo_postal", "pais")
TEXT_FIELDS = ("direccion", "ciudad", "estado_provincia", "codigo_postal", "pais")
FILTER_FIELDS = ("ciudad", "estado_provincia", "pais")


def is_valid_postal_code(value: str) -> bool:
    return bool(POSTAL_CODE_PATTERN.fullmatch(value.strip()))


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass
class AddressPage:
    items: List[ShippingAddress]
    pagination: Dict[str, int]
    user: Optional[User] = None
    filters: Dict[str, str] = field(default_factory=dict)


class ShippingAddressService:
    """
    📍 收货地址服务
    -----------------------------------------
    ✅ 创建：必填校验 → 用户存在 → 数量上限 → 邮编格式
    ✅ 查询：按用户 / 全量过滤 / 按ID，分页 + 用户投影
    ✅ 更新 / 删除：归属校验（本人或管理员），事务内执行
    ✅ 默认地址：先清空再设置，同一事务
    ✅ 批量删除：只删除调用方自己的地址
    """

    def __init__(
            self,
            session_factory: async_sessionmaker[AsyncSession],
            *,
            max_per_user: int = 5,
            pagination: Optional[PaginationConfig] = None,
    ):
        self.session_factory = session_factory
        self.max_per_user = max_per_user
        self.pagination = pagination or PaginationConfig()

    def _paginate(self, page: Any, limit: Any) -> Pagination:
        return Pagination.from_query(
            page,
            limit,
            default_limit=self.pagination.default_limit,
            max_limit=self.pagination.max_limit,
        )

    @staticmethod
    async def _load(session: AsyncSession, address_id: int) -> Optional[ShippingAddress]:
        stmt = (
            select(ShippingAddress)
            .options(joinedload(ShippingAddress.user))
            .where(ShippingAddress.id == address_id)
            .execution_options(populate_existing=True)
        )
        return (await session.execute(stmt)).scalar_one_or_none()

    # ------------------------------------------------------------------
    # 🆕 创建
    # ------------------------------------------------------------------
    @operation_boundary("Error creating shipping address")
    async def create(self, data: Dict[str, Any]) -> ShippingAddress:
        missing = [f for f in REQUIRED_FIELDS if _is_blank(data.get(f))]
        if missing:
            raise ValidationError(
                "All fields are required",
                required=list(REQUIRED_FIELDS),
                missing=missing,
            )

        owner_id = data["usuario_id"]
        async with transaction(self.session_factory) as session:
            if await User.get(session, owner_id) is None:
                raise NotFoundError("User not found")

            current = await ShippingAddress.count(session, usuario_id=owner_id)
            if current >= self.max_per_user:
                raise LimitExceededError(
                    f"Maximum number of addresses reached ({self.max_per_user})",
                    currentCount=current,
                )

            if not is_valid_postal_code(data["codigo_postal"]):
                raise ValidationError("Invalid postal code format")

            now = utcnow()
            address = ShippingAddress(
                usuario_id=owner_id,
                created_at=now,
                updated_at=now,
                **{f: data[f].strip() for f in TEXT_FIELDS},
            )
            session.add(address)
            await session.flush()
            created = await self._load(session, address.id)

        logger.info(f"📍 shipping address {created.id} created for user {owner_id}")
        return created

    # ------------------------------------------------------------------
    # 🔍 按用户分页
    # ------------------------------------------------------------------
    @operation_boundary("Error retrieving shipping addresses")
    async def list_by_user(self, owner_id: Optional[int], page: Any = None, limit: Any = None) -> AddressPage:
        if not owner_id:
            raise ValidationError("User ID is required")

        paging = self._paginate(page, limit)
        async with self.session_factory() as session:
            user = await User.get(session, owner_id)
            if user is None:
                raise NotFoundError("User not found", userId=owner_id)

            total = await ShippingAddress.count(session, usuario_id=owner_id)
            if total == 0:
                raise NotFoundError(
                    "No shipping addresses found for this user",
                    userId=owner_id,
                    userName=user.first_name,
                )

            stmt = (
                select(ShippingAddress)
                .options(joinedload(ShippingAddress.user))
                .where(ShippingAddress.usuario_id == owner_id)
                .order_by(ShippingAddress.created_at.desc(), ShippingAddress.id.desc())
                .offset(paging.offset)
                .limit(paging.limit)
            )
            items = list((await session.execute(stmt)).scalars().all())

        return AddressPage(items=items, pagination=paging.meta(total), user=user)

    # ------------------------------------------------------------------
    # 🔍 全量过滤分页
    # ------------------------------------------------------------------
    @operation_boundary("Error retrieving shipping addresses")
    async def list_all(
            self,
            *,
            ciudad: Optional[str] = None,
            estado_provincia: Optional[str] = None,
            pais: Optional[str] = None,
            page: Any = None,
            limit: Any = None,
    ) -> AddressPage:
        raw = dict(zip(FILTER_FIELDS, (ciudad, estado_provincia, pais)))
        echoed = {k: v for k, v in raw.items() if v is not None}
        criteria = [
            getattr(ShippingAddress, k) == v.strip()
            for k, v in raw.items()
            if v
        ]

        paging = self._paginate(page, limit)
        async with self.session_factory() as session:
            total = await ShippingAddress.count(session, *criteria)
            if total == 0:
                raise NotFoundError("No shipping addresses found", filters=echoed)

            stmt = (
                select(ShippingAddress)
                .options(joinedload(ShippingAddress.user))
                .where(*criteria)
                .order_by(ShippingAddress.created_at.desc(), ShippingAddress.id.desc())
                .offset(paging.offset)
                .limit(paging.limit)
            )
            items = list((await session.execute(stmt)).scalars().all())

        return AddressPage(items=items, pagination=paging.meta(total), filters=echoed)

    # ------------------------------------------------------------------
    # 🔍 详情
    # ------------------------------------------------------------------
    @operation_boundary("Error retrieving shipping address")
    async def get_by_id(self, address_id: int) -> ShippingAddress:
        async with self.session_factory() as session:
            address = await self._load(session, address_id)
        if address is None:
            raise NotFoundError("Shipping address not found")
        return address

    # ------------------------------------------------------------------
    # ✏️ 局部更新
    # ------------------------------------------------------------------
    @operation_boundary("Error updating shipping address")
    async def update(self, address_id: int, caller: CallerContext, fields: Dict[str, Any]) -> ShippingAddress:
        async with transaction(self.session_factory) as session:
            address = await ShippingAddress.get(session, address_id)
            if address is None:
                raise NotFoundError("Shipping address not found", addressId=address_id)

            if address.usuario_id != caller.id and not caller.is_admin:
                raise ForbiddenError("Not authorized to update this address")

            postal_code = fields.get("codigo_postal")
            if postal_code and not is_valid_postal_code(postal_code):
                raise ValidationError("Invalid postal code format")

            address.updated_at = utcnow()
            for name in TEXT_FIELDS:
                value = fields.get(name)
                if value:
                    setattr(address, name, value.strip())

            await session.flush()
            updated = await self._load(session, address_id)

        logger.info(f"✏️ shipping address {address_id} updated by user {caller.id}")
        return updated

    # ------------------------------------------------------------------
    # ❌ 删除
    # ------------------------------------------------------------------
    @operation_boundary("Error deleting shipping address")
    async def delete(self, address_id: int, caller: CallerContext) -> Dict[str, Any]:
        async with transaction(self.session_factory) as session:
            address = await ShippingAddress.get(session, address_id)
            if address is None:
                raise NotFoundError("Shipping address not found", addressId=address_id)

            if address.usuario_id != caller.id and not caller.is_admin:
                raise ForbiddenError("Not authorized to delete this address")

            owner_id = address.usuario_id
            await session.execute(
                delete(ShippingAddress)
                .where(ShippingAddress.id == address_id)
                .execution_options(synchronize_session=False)
            )

        logger.info(f"🗑️ shipping address {address_id} deleted by user {caller.id}")
        return {
            "id": address_id,
            "userId": owner_id,
            "deletedBy": {"userId": caller.id, "isAdmin": caller.is_admin},
        }

    # ------------------------------------------------------------------
    # ⭐ 设置默认地址
    # ------------------------------------------------------------------
    @operation_boundary("Error setting default address")
    async def set_default(self, address_id: int, owner_id: Optional[int], caller: CallerContext) -> None:
        if not owner_id:
            raise ValidationError("usuario_id is required")
        if owner_id != caller.id and not caller.is_admin:
            raise ForbiddenError("Not authorized to change default address for this user")

        async with transaction(self.session_factory) as session:
            # 只清空当前默认地址，其它地址保持不变
            await session.execute(
                update(ShippingAddress)
                .where(ShippingAddress.usuario_id == owner_id, ShippingAddress.is_default.is_(True))
                .values(is_default=False)
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(
                update(ShippingAddress)
                .where(ShippingAddress.id == address_id, ShippingAddress.usuario_id == owner_id)
                .values(is_default=True, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            # 目标地址不属于该用户 → 整个事务回滚（清空步骤一并撤销）
            if result.rowcount == 0:
                raise NotFoundError(
                    "Shipping address not found for this user",
                    addressId=address_id,
                    userId=owner_id,
                )

        logger.info(f"⭐ shipping address {address_id} set as default for user {owner_id}")

    # ------------------------------------------------------------------
    # 🗑️ 批量删除
    # ------------------------------------------------------------------
    @operation_boundary("Error deleting addresses")
    async def bulk_delete(self, address_ids: Optional[Iterable[int]], caller: CallerContext) -> Dict[str, int]:
        requested = list(address_ids or [])
        ids = list(dict.fromkeys(requested))
        if not ids:
            raise ValidationError("addressIds must be a non-empty array")

        async with transaction(self.session_factory) as session:
            result = await session.execute(
                delete(ShippingAddress)
                .where(ShippingAddress.id.in_(ids), ShippingAddress.usuario_id == caller.id)
                .execution_options(synchronize_session=False)
            )
            deleted = result.rowcount or 0

        logger.info(f"🗑️ bulk delete by user {caller.id}: requested={len(requested)} deleted={deleted}")
        return {"deletedCount": deleted, "requestedCount": len(requested)}

    # ------------------------------------------------------------------
    # ✅ 地址校验（不落库）
    # ------------------------------------------------------------------
    @staticmethod
    def validate(codigo_postal: Optional[str], ciudad: Optional[str], pais: Optional[str]) -> bool:
        if _is_blank(codigo_postal) or _is_blank(ciudad) or _is_blank(pais):
            return False
        return is_valid_postal_code(codigo_postal)
