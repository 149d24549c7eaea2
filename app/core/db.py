# -*- coding: utf-8 -*-
"""
Tienda-Core 异步 ORM 基类
---------------------------------------------
✅ 异步 CRUD 辅助（均显式传入 session）
✅ transaction() 自动事务上下文
✅ get_or_404 / count / exists
✅ engine / session_factory 由应用启动时创建，挂载在 app.state
"""

from __future__ import annotations

import importlib
import pkgutil
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional, Type, TypeVar

from loguru import logger
from sqlalchemy import Column, DateTime, Integer, event, func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.core.config import DatabaseConfig
from app.core.exception import NotFoundError

# ======================================================
# ⚙️ ORM Base 定义
# ======================================================
Base = declarative_base()
T = TypeVar("T", bound="BaseModel")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    # -----------------------------------------
    # 🔍 通用异步查询
    # -----------------------------------------
    @classmethod
    async def get(cls: Type[T], session: AsyncSession, id: int, *options) -> Optional[T]:
        return await session.get(cls, id, options=list(options) or None)

    @classmethod
    async def get_or_404(cls: Type[T], session: AsyncSession, id: int, msg: Optional[str] = None, **context) -> T:
        instance = await cls.get(session, id)
        if instance is None:
            raise NotFoundError(msg or f"{cls.__name__} not found", **context)
        return instance

    @classmethod
    async def count(cls, session: AsyncSession, *criteria, **filters) -> int:
        stmt = select(func.count(cls.id)).filter_by(**filters)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await session.execute(stmt)
        return int(result.scalar() or 0)

    @classmethod
    async def exists(cls, session: AsyncSession, *criteria, **filters) -> bool:
        return await cls.count(session, *criteria, **filters) > 0


# ======================================================
# 🕒 通用时间戳
# ======================================================
class InfoCrud(BaseModel):
    __abstract__ = True

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )


# ======================================================
# ⚙️ 异步引擎 & Session 工厂
# ======================================================
def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite 默认不启用外键约束，需要每个连接单独开启"""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(config: DatabaseConfig) -> AsyncEngine:
    engine = create_async_engine(config.url, echo=config.echo, future=True)
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


def _auto_import_models(package_name: str) -> None:
    """自动导入模型模块，确保所有表注册到 Base.metadata"""
    package = importlib.import_module(package_name)
    for _, module_name, is_pkg in pkgutil.iter_modules(package.__path__):
        if not is_pkg:
            importlib.import_module(f"{package_name}.{module_name}")


async def init_models(
    engine: AsyncEngine,
    *,
    drop: bool = False,
    model_package: str = "app.api.v1.model",
) -> None:
    """同步表结构（可选先删除）"""
    _auto_import_models(model_package)
    async with engine.begin() as conn:
        if drop:
            logger.warning("⚠️ Dropping all tables ...")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ 数据库表已同步")


# ======================================================
# 🔒 自动事务上下文
# ======================================================
@asynccontextmanager
async def transaction(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """一个 session + 一个事务：正常退出提交，异常回滚"""
    async with session_factory() as session:
        async with session.begin():
            yield session


