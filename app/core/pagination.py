# -*- coding: utf-8 -*-
"""
分页参数解析
--------------------------------
✅ 宽松整数解析：取前导整数，无法解析 / 0 时回落默认值
✅ page 夹在 [1, MAX_OFFSET // limit]，limit 夹在 [1, max_limit]
✅ 分页元信息 currentPage / totalPages / totalItems / itemsPerPage
"""
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

MAX_OFFSET = 2 ** 63 - 1
_LEADING_INT = re.compile(r"^\s*([+-]?)([0-9]+)")


def parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    # 超出 64 位的输入按上限处理，之后统一夹取
    number = MAX_OFFSET if len(digits) > 19 else int(digits)
    return -number if sign == "-" else number


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    @classmethod
    def from_query(
        cls,
        page: Any = None,
        limit: Any = None,
        *,
        default_limit: int = 10,
        max_limit: int = 50,
    ) -> "Pagination":
        page_value = parse_int(page) or 1
        limit_value = min(max_limit, max(1, parse_int(limit) or default_limit))
        # OFFSET 必须落在 64 位有符号整数内
        max_page = MAX_OFFSET // limit_value
        return cls(
            page=min(max_page, max(1, page_value)),
            limit=limit_value,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> Dict[str, int]:
        return {
            "currentPage": self.page,
            "totalPages": math.ceil(total / self.limit),
            "totalItems": total,
            "itemsPerPage": self.limit,
        }
