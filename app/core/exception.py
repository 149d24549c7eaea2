# -*- coding: utf-8 -*-
"""
Tienda exception system
---------------------------------------------
✅ APIException 统一错误体系（msg + error_code + http_code + 上下文字段）
✅ operation_boundary：服务层边界捕获持久化异常 → InternalError
✅ FastAPI 全局异常处理器
"""
import traceback
import uuid
from functools import wraps
from typing import Any, Dict

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from loguru import logger


class APIException(Exception):
    msg = "sorry, we made a mistake"
    error_code = 999
    http_code = 400

    def __init__(self, msg: str | None = None, error_code: int | None = None, http_code: int | None = None, **extra):
        self.msg = msg or self.msg
        if error_code is not None:
            self.error_code = error_code
        if http_code is not None:
            self.http_code = http_code
        self.extra = extra
        super().__init__(self.msg)

    def to_dict(self) -> Dict[str, Any]:
        from app.core.response import serialize

        return {"error": self.msg, **serialize(self.extra)}


class ValidationError(APIException):
    msg = "Invalid request"
    error_code = 1002
    http_code = 400


class LimitExceededError(ValidationError):
    msg = "Limit exceeded"
    error_code = 1006


class NotFoundError(APIException):
    msg = "Resource not found"
    error_code = 1001
    http_code = 404


class AuthFailed(APIException):
    msg = "Authentication failed"
    error_code = 1003
    http_code = 401


class ForbiddenError(APIException):
    msg = "Forbidden"
    error_code = 1004
    http_code = 403


class InternalError(APIException):
    msg = "Internal server error"
    error_code = 5001
    http_code = 500


# ======================================================
# 🧱 服务层操作边界
# ======================================================
def _identifiers(args, kwargs) -> Dict[str, int]:
    """只保留整数标识（ID 等），请求体 / 字典一律不进日志"""
    ids = {f"arg{i}": v for i, v in enumerate(args, 1) if isinstance(v, int) and not isinstance(v, bool)}
    ids.update({k: v for k, v in kwargs.items() if isinstance(v, int) and not isinstance(v, bool)})
    return ids


def operation_boundary(message: str):
    """
    包装服务方法：
    - APIException 原样抛出（校验 / 权限 / 404）
    - 其它异常记录 操作名 + 整数标识 + 异常信息，转换为 InternalError(message, details=原始信息)
    - 不记录 traceback 局部变量，避免密码等字段落盘
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except APIException:
                raise
            except Exception as e:
                logger.error(
                    f"{message} | operation={func.__qualname__} "
                    f"ids={_identifiers(args[1:], kwargs)} error={type(e).__name__}: {e}"
                )
                raise InternalError(message, details=str(e)) from e

        return wrapper

    return decorator


# ======================================================
# 🌐 FastAPI 异常处理器
# ======================================================
def register_exception_handlers(app):
    from app.core.response import ApiResponse

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return ApiResponse.fail(exc.msg, status_code=exc.http_code, **exc.extra)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return ApiResponse.fail("Invalid request payload", status_code=400, details=details)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        trace_id = uuid.uuid4().hex[:8]
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        logger.error(f"[Unhandled] TraceID={trace_id} {request.method} {request.url.path}\n{tb_str}")
        return ApiResponse.fail("Internal server error", status_code=500, trace_id=trace_id)
