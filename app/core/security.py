"""
Tienda-Core 认证与凭证
---------------------------------------------
✅ JWTService：签发 / 校验 Access Token（HS256）
✅ CallerContext：调用方身份（id + 是否管理员 + 角色）
✅ login_required / admin_required / roles_required 依赖
✅ passlib 加盐哈希（argon2）
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, Tuple

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext

from app.core.config import AuthConfig
from app.core.enums import RoleEnum
from app.core.exception import AuthFailed, ForbiddenError

# ======================================================
# 🔐 密码哈希
# ======================================================
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def generate_password_hash(raw: str) -> str:
    return pwd_context.hash(raw)


def check_password_hash(raw: str, hashed: str) -> bool:
    return pwd_context.verify(raw, hashed)


# ======================================================
# 🪪 调用方上下文
# ======================================================
@dataclass(frozen=True)
class CallerContext:
    id: int
    is_admin: bool = False
    roles: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_roles(cls, uid: int, roles: Iterable[str]) -> "CallerContext":
        roles = tuple(roles)
        return cls(id=uid, is_admin=RoleEnum.ADMIN.value in roles, roles=roles)

    def has_role(self, *roles: str) -> bool:
        return self.is_admin or any(r in self.roles for r in roles)


# ======================================================
# 🔑 JWT 服务
# ======================================================
class JWTService:
    def __init__(self, config: AuthConfig):
        self.secret = config.secret
        self.algorithm = config.algorithm
        self.access_exp = timedelta(seconds=config.access_expires_in)

    def create_access_token(self, uid: int, roles: Iterable[str] = (RoleEnum.USER.value,)) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "uid": uid,
            "scope": list(roles),
            "iat": now,
            "exp": now + self.access_exp,
            "type": "access",
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthFailed("Token expired")
        except InvalidTokenError:
            raise AuthFailed("Invalid token")

        if payload.get("type") != "access" or not isinstance(payload.get("uid"), int):
            raise AuthFailed("Invalid token")
        return payload

    def caller_from_token(self, token: str) -> CallerContext:
        payload = self.verify(token)
        return CallerContext.from_roles(payload["uid"], payload.get("scope") or [])


# ======================================================
# ⚙️ FastAPI 依赖封装
# ======================================================
security_scheme = HTTPBearer(auto_error=False)


def get_jwt_service(request: Request) -> JWTService:
    return request.app.state.jwt_service


async def get_caller(
        credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
        jwt_service: JWTService = Depends(get_jwt_service),
) -> CallerContext:
    if not credentials:
        raise AuthFailed("Missing authentication credentials")
    return jwt_service.caller_from_token(credentials.credentials)


async def login_required(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    return caller


async def admin_required(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    if not caller.is_admin:
        raise ForbiddenError("Admin role required")
    return caller


def roles_required(*roles: str):
    """任一角色满足即可（admin 总是放行）"""

    async def dependency(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        if not caller.has_role(*roles):
            raise ForbiddenError("Insufficient role", requiredRoles=list(roles))
        return caller

    return dependency
