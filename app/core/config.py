# -*- coding: utf-8 -*-
"""
Tienda-Core Config System
---------------------------------------------------
✅ 自动加载根目录 .env
✅ YAML 支持 ${ENV_VAR} / ${ENV_VAR:default} 占位符解析
✅ 自动根据 APP_ENV 加载 app/config/<env>.yaml
✅ 深度递归合并配置（构造参数 > YAML > 默认值）
✅ 线程安全单例
"""

import os
import re
import threading
from functools import lru_cache
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


# ======================================================
# 🔧 加载 .env 文件
# ======================================================
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))
ENV_PATH = os.path.join(BASE_DIR, ".env")
if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH, override=True)

CONFIG_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../config"))


# ======================================================
# 🧩 配置模块
# ======================================================
class AppConfig(BaseModel):
    name: str = "Tienda API"
    version: str = "0.1.0"
    env: str = "dev"
    debug: bool = True
    log_level: str = "DEBUG"
    log_file: Optional[str] = "logs/app_{time:YYYY-MM-DD}.log"
    host: str = "127.0.0.1"
    port: int = 8080


class DatabaseConfig(BaseModel):
    url: str = "sqlite+aiosqlite:///./tienda.db"
    echo: bool = False
    auto_create: bool = True


class AuthConfig(BaseModel):
    secret: str = "tienda-core"
    algorithm: str = "HS256"
    access_expires_in: int = 3600


class ShippingConfig(BaseModel):
    max_addresses_per_user: int = 5


class PaginationConfig(BaseModel):
    default_limit: int = 10
    max_limit: int = 50
    cache_control: str = "private, max-age=300"


# ======================================================
# 🧠 工具函数
# ======================================================
_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def deep_merge(base: dict, override: dict) -> dict:
    """递归合并字典"""
    result = base.copy()
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def substitute_env_vars(value: Any) -> Any:
    """解析 ${VAR} / ${VAR:default}，未设置且无默认值时保持原样"""
    if isinstance(value, str):
        def _replace(match: re.Match) -> str:
            env_val = os.getenv(match.group(1))
            if env_val:
                return env_val
            if match.group(2) is not None:
                return match.group(2)
            return match.group(0)

        return _ENV_PATTERN.sub(_replace, value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    return value


def load_yaml_config(env: str) -> Dict[str, Any]:
    """加载 YAML 配置文件并解析环境变量"""
    file_path = os.path.join(CONFIG_DIR, f"{env}.yaml")
    if not os.path.exists(file_path):
        logger.warning(f"⚠️ 未找到配置文件: {file_path}，使用默认配置。")
        return {}

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return substitute_env_vars(data)


# ======================================================
# 🌍 Settings 主配置类
# ======================================================
class Settings(BaseSettings):
    app: AppConfig = AppConfig()
    database: DatabaseConfig = DatabaseConfig()
    auth: AuthConfig = AuthConfig()
    shipping: ShippingConfig = ShippingConfig()
    pagination: PaginationConfig = PaginationConfig()

    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")

    def __init__(self, **kwargs):
        env = os.getenv("APP_ENV", "dev")
        yaml_data = load_yaml_config(env)
        explicit = {
            k: v.model_dump() if isinstance(v, BaseModel) else v
            for k, v in kwargs.items()
        }
        super().__init__(**deep_merge(yaml_data, explicit))

    def summary(self) -> None:
        """输出配置概要（隐藏密钥）"""
        logger.debug(f"🌍 [{self.app.env}] {self.app.name} 配置概览：")
        for name in type(self).model_fields:
            value = getattr(self, name)
            dumped = value.model_dump()
            if "secret" in dumped:
                dumped["secret"] = "***"
            logger.debug(f"🧩 {name}: {dumped}")


# ======================================================
# 🧷 单例实例
# ======================================================
_settings_instance: Optional[Settings] = None
_settings_lock = threading.Lock()


@lru_cache()
def get_settings() -> Settings:
    """加载配置（带缓存）"""
    s = Settings()
    s.summary()
    return s


def get_current_settings() -> Settings:
    """线程安全全局访问"""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = get_settings()
    return _settings_instance
