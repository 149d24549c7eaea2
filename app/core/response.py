# @Time    : 2025/11/18 01:30
# @Author  : Pedro
# @File    : response.py
# @Software: PyCharm
"""
Tienda-Core 通用响应（成功 / 分页 / 失败 / 无内容）
✅ 成功: {"message": ..., "data": ...}
✅ 失败: {"error": ..., **上下文字段}
✅ 自动识别 ORM / Pydantic / dict / list
✅ 支持 schema 参数过滤响应字段（按 alias 输出）
"""

import datetime
import json
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel
from starlette.responses import JSONResponse, Response


# =========================================================
# ✅ 通用序列化函数
# =========================================================
def serialize(data: Any) -> Any:
    """递归序列化各种复杂对象到 JSON 安全格式"""
    if isinstance(data, (datetime.datetime, datetime.date)):
        return data.isoformat()

    if isinstance(data, Decimal):
        return float(data)

    if isinstance(data, (bytes, bytearray)):
        return data.decode("utf-8", errors="ignore")

    if isinstance(data, set):
        return list(data)

    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)

    if hasattr(data, "__table__"):  # SQLAlchemy ORM
        return {c.key: serialize(getattr(data, c.key)) for c in data.__table__.columns}

    if isinstance(data, (list, tuple)):
        return [serialize(i) for i in data]

    if isinstance(data, dict):
        return {k: serialize(v) for k, v in data.items()}

    return data


# =========================================================
# ✅ Schema 过滤
# =========================================================
def filter_with_schema(schema: Type[BaseModel], value: Any) -> Any:
    """用 Pydantic schema 过滤任意对象（ORM、dict、list）"""
    if value is None:
        return None

    def _dump(v):
        return schema.model_validate(v, from_attributes=True).model_dump(mode="json", by_alias=True)

    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, dict, BaseModel)):
        return [_dump(v) for v in value]
    return _dump(value)


# =========================================================
# ✅ JSON Response
# =========================================================
class ApiJSONResponse(JSONResponse):
    """统一 JSONResponse 编码（UTF-8 + 禁止 ASCII 转义）"""

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")


class ApiResponse:

    @classmethod
    def success(
        cls,
        data: Optional[Any] = None,
        message: str = "success",
        *,
        status_code: int = 200,
        schema: Optional[Type[BaseModel]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiJSONResponse:
        payload: Dict[str, Any] = {"message": message}
        if data is not None:
            if schema is not None:
                data = filter_with_schema(schema, data)
            payload["data"] = serialize(data)
        return ApiJSONResponse(content=payload, status_code=status_code, headers=headers)

    @classmethod
    def page(
        cls,
        *,
        items: Any,
        pagination: Dict[str, int],
        message: str = "success",
        key: str = "items",
        schema: Optional[Type[BaseModel]] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> ApiJSONResponse:
        """分页统一输出: data = {**extra, <key>: [...], "pagination": {...}}"""
        if schema is not None:
            items = filter_with_schema(schema, items)
        data = dict(extra or {})
        data[key] = serialize(list(items or []))
        data["pagination"] = pagination
        payload = {"message": message, "data": serialize(data)}
        return ApiJSONResponse(content=payload, headers=headers)

    @classmethod
    def fail(cls, error: str, *, status_code: int = 400, **extra) -> ApiJSONResponse:
        payload = {"error": error, **serialize(extra)}
        return ApiJSONResponse(content=payload, status_code=status_code)

    @staticmethod
    def no_content() -> Response:
        return Response(status_code=204)
