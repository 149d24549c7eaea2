# -*- coding: utf-8 -*-
"""
Tienda API 启动入口
--------------------------------
python starter.py                       # 按 APP_ENV 对应 YAML 的 host / port 启动
python starter.py --port 9000 --no-reload
应用由 uvicorn 通过 app:create_app 工厂构建，日志交给 Loguru（不使用 uvicorn 默认 log_config）
"""
import argparse

import uvicorn
from loguru import logger

from app.core.config import get_current_settings


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Tienda API server")
    parser.add_argument("--host", default=settings.app.host)
    parser.add_argument("--port", type=int, default=settings.app.port)
    parser.add_argument("--no-reload", action="store_true", help="disable auto reload in debug mode")
    return parser


def main(argv=None) -> None:
    settings = get_current_settings()
    args = build_parser(settings).parse_args(argv)
    reload = settings.app.debug and not args.no_reload

    logger.info(
        f"🚀 {settings.app.name} v{settings.app.version} → http://{args.host}:{args.port} "
        f"(env={settings.app.env}, reload={reload})"
    )
    uvicorn.run(
        "app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
