"""
Tienda-Core 日志
---------------------
✅ 控制台日志（级别取自配置，debug 模式强制 DEBUG）
✅ 文件日志：每天切分，保留 14 天，log_file 为空时关闭
✅ uvicorn 标准 logging 转发到 Loguru
✅ 请求日志：X-Request-ID 绑定到上下文，4xx → WARNING，5xx → ERROR
"""

import logging
import sys
import time
import uuid

from fastapi import FastAPI, Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import AppConfig

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine")


class InterceptHandler(logging.Handler):
    """标准 logging → Loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def init_logger(config: AppConfig) -> None:
    level = "DEBUG" if config.debug else config.log_level.upper()

    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(sys.stdout, level=level, format=LOG_FORMAT, colorize=True, enqueue=True, diagnose=False)
    if config.log_file:
        logger.add(
            config.log_file,
            level=level,
            format=LOG_FORMAT,
            rotation="00:00",
            retention="14 days",
            encoding="utf-8",
            enqueue=True,
            diagnose=False,
        )

    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    logger.info(f"✅ Logger initialized (level={level}, file={config.log_file or 'off'})")


# ==========================
# 🌐 请求日志中间件
# ==========================
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    header = "X-Request-ID"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.header) or uuid.uuid4().hex[:12]
        start = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
            elapsed = (time.perf_counter() - start) * 1000

            status = response.status_code
            level = "ERROR" if status >= 500 else "WARNING" if status >= 400 else "INFO"
            client = request.client.host if request.client else "-"
            logger.log(level, f"{request.method} {request.url.path} → {status} ({elapsed:.1f}ms) client={client}")

        response.headers[self.header] = request_id
        return response


def setup_logger(app: FastAPI, config: AppConfig):
    init_logger(config)
    app.add_middleware(RequestLoggingMiddleware)
    return logger
