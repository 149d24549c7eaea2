# -*- coding: utf-8 -*-
"""
数据库初始化脚本
--------------------------------
python -m app.cli.db.init                      # 建表
python -m app.cli.db.init --force              # 删表重建
python -m app.cli.db.init --seed-email a@b.c --seed-password 123456
"""
import argparse
import asyncio
from typing import Optional

from loguru import logger
from sqlalchemy import select

from app.api.v1.model.user import User
from app.core.config import DatabaseConfig, get_current_settings
from app.core.db import create_engine, create_session_factory, init_models, transaction


async def init_db(
        config: DatabaseConfig,
        force: bool = False,
        seed_email: Optional[str] = None,
        seed_password: Optional[str] = None,
        seed_first_name: str = "Admin",
) -> Optional[int]:
    """建表并（可选）写入一个初始用户，返回该用户 id"""
    engine = create_engine(config)
    try:
        await init_models(engine, drop=force)

        if not seed_email:
            return None

        session_factory = create_session_factory(engine)
        async with transaction(session_factory) as session:
            exists = await session.scalar(select(User.id).where(User.email == seed_email))
            if exists:
                logger.warning(f"❌ 用户 {seed_email} 已存在 (id={exists})，跳过创建")
                return exists

            user = User(first_name=seed_first_name, email=seed_email)
            user.set_password(seed_password or "123456")
            session.add(user)
            await session.flush()
            logger.info(f"✅ 初始用户已创建: {seed_email} (id={user.id})")
            return user.id
    finally:
        await engine.dispose()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create Tienda tables")
    parser.add_argument("--force", action="store_true", help="drop all tables first")
    parser.add_argument("--seed-email")
    parser.add_argument("--seed-password")
    parser.add_argument("--seed-first-name", default="Admin")
    args = parser.parse_args(argv)

    settings = get_current_settings()
    asyncio.run(
        init_db(
            settings.database,
            force=args.force,
            seed_email=args.seed_email,
            seed_password=args.seed_password,
            seed_first_name=args.seed_first_name,
        )
    )


if __name__ == "__main__":
    main()
