# -*- coding: utf-8 -*-
"""
# @Time    : 2025/11/20 09:12
# @Author  : Pedro
# @File    : issue_token.py
# @Software: PyCharm

开发环境签发 Access Token：
python -m app.cli.scripts.issue_token 1 --roles admin user
"""
import argparse

from app.core.config import get_current_settings
from app.core.enums import RoleEnum
from app.core.security import JWTService


def issue_token(uid: int, roles=("user",)) -> str:
    scope = [RoleEnum.from_name(r).value for r in roles]
    settings = get_current_settings()
    return JWTService(settings.auth).create_access_token(uid, scope)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Issue a development access token")
    parser.add_argument("uid", type=int)
    parser.add_argument("--roles", nargs="+", default=["user"])
    args = parser.parse_args(argv)
    print(issue_token(args.uid, args.roles))


if __name__ == "__main__":
    main()
