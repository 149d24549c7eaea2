# -*- coding: utf-8 -*-
"""
FastAPI 应用初始化入口
--------------------------------------------
✅ lifespan 模式：启动时创建数据库引擎 / Session 工厂，关闭时释放
✅ 模块自动注册 (蓝图)
✅ 日志 / CORS / 异常 / 配置加载
✅ JWT 服务挂载到 app.state
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from app.core.config import Settings, get_current_settings
from app.core.db import create_engine, create_session_factory, init_models
from app.core.security import JWTService


# ======================================================
# 🧱 注册模块与服务
# ======================================================
def register_blueprints(app: FastAPI):
    """注册 API 模块（原 Flask 蓝图）"""
    from app.api import register_blueprint

    register_blueprint(app)
    logger.info("✅ 已注册 API 模块: v1")


def register_cors(app: FastAPI):
    """注册 CORS 中间件"""
    from fastapi.middleware.cors import CORSMiddleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("✅ CORS 中间件已启用")


def register_exception_handlers(app: FastAPI):
    """注册全局异常"""
    from app.core.exception import register_exception_handlers
    register_exception_handlers(app)
    logger.info("✅ 异常处理器已注册")


def register_logger(app: FastAPI, settings: Settings):
    """统一日志系统"""
    from app.core.logger import setup_logger
    setup_logger(app, settings.app)
    logger.info("✅ 日志系统初始化完成")


# ======================================================
# 🧬 lifespan 生命周期管理器
# ======================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """统一管理 startup / shutdown"""
    settings: Settings = app.state.settings

    # ---- startup 阶段 ----
    logger.info("🚀 FastAPI 启动中，正在初始化数据库...")
    engine = create_engine(settings.database)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.database.auto_create:
        await init_models(engine)

    logger.info("✅ 所有模块初始化完成，系统启动成功。")

    yield

    # ---- shutdown 阶段 ----
    logger.info("🧹 FastAPI 正在关闭中，清理资源...")
    await engine.dispose()


# ======================================================
# 🏗️ 应用工厂
# ======================================================
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """构建 FastAPI 实例并注册所有依赖"""
    settings = settings or get_current_settings()
    # ✅ 根据环境动态关闭 Swagger
    docs_url = "/docs" if settings.app.debug else None
    redoc_url = "/redoc" if settings.app.debug else None
    openapi_url = "/openapi.json" if settings.app.debug else None

    app = FastAPI(
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        title=settings.app.name,
        version=settings.app.version,
        description="Tienda API built on FastAPI",
        debug=settings.app.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.jwt_service = JWTService(settings.auth)

    # 注册模块和中间件
    register_cors(app)
    register_logger(app, settings)
    register_blueprints(app)
    register_exception_handlers(app)

    logger.info(f"✅ Tienda FastAPI 初始化完成 | 环境: {settings.app.env}")
    return app
