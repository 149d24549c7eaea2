"""
# @Time    : 2025/11/20 10:02
# @Author  : Pedro
# @File    : conftest.py
# @Software: PyCharm
"""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.orm import Session

from app import create_app
from app.api.v1.model.product import Product
from app.api.v1.model.review import Review  # noqa: F401
from app.api.v1.model.shipping_address import ShippingAddress  # noqa: F401
from app.api.v1.model.user import User
from app.core.config import AppConfig, DatabaseConfig, Settings
from app.core.db import Base, create_engine, create_session_factory, init_models, transaction
from app.core.security import CallerContext, JWTService


def make_user(uid=None, first_name="Alice", last_name_father="Lopez", last_name_mother="Ruiz", email=None, password="secret"):
    user = User(
        id=uid,
        first_name=first_name,
        last_name_father=last_name_father,
        last_name_mother=last_name_mother,
        email=email or f"{first_name.lower()}@example.com",
    )
    user.set_password(password)
    return user


def address_payload(usuario_id, **overrides):
    payload = {
        "usuario_id": usuario_id,
        "direccion": "Av. Reforma 100",
        "ciudad": "CDMX",
        "estado_provincia": "CDMX",
        "codigo_postal": "06600",
        "pais": "USA",
    }
    payload.update(overrides)
    return payload


# ======================================================
# 🗄️ 服务层：临时 SQLite + 异步 Session 工厂
# ======================================================
@pytest.fixture
async def session_factory(tmp_path):
    engine = create_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'service.db'}"))
    await init_models(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def users(session_factory):
    async with transaction(session_factory) as session:
        alice = make_user(first_name="Alice")
        bob = make_user(first_name="Bob", last_name_father="Garcia", last_name_mother="Diaz")
        carol = make_user(first_name="Carol", last_name_father="Perez", last_name_mother=None)
        session.add_all([alice, bob, carol])
        await session.flush()
        ids = SimpleNamespace(alice=alice.id, bob=bob.id, carol=carol.id)
    return ids


@pytest.fixture
def alice(users):
    return CallerContext(id=users.alice)


@pytest.fixture
def bob(users):
    return CallerContext(id=users.bob)


@pytest.fixture
def admin(users):
    return CallerContext.from_roles(users.carol, ["admin"])


# ======================================================
# 🌐 HTTP 层：同步预置数据 + TestClient
# ======================================================
ADMIN_ID = 1
USER_ID = 7
OTHER_ID = 8
MODERATOR_ID = 9


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "api.db"
    engine = create_sync_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([
            make_user(ADMIN_ID, first_name="Root", last_name_father="Admin", email="root@example.com"),
            make_user(USER_ID, first_name="Maria", last_name_father="Hernandez", last_name_mother="Soto"),
            make_user(OTHER_ID, first_name="Juan", last_name_father="Martinez", last_name_mother="Cruz"),
            make_user(MODERATOR_ID, first_name="Mod", last_name_father="Erator", email="mod@example.com"),
            Product(id=1, nombre="Taza", descripcion="Taza de barro", precio=120, stock=10),
        ])
        session.commit()
    engine.dispose()
    return path


@pytest.fixture
def settings(db_path):
    return Settings(
        app=AppConfig(log_file=None, debug=True),
        database=DatabaseConfig(url=f"sqlite+aiosqlite:///{db_path}"),
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(client, settings):
    """auth(uid, *roles) -> Authorization 头"""
    jwt_service = JWTService(settings.auth)

    def _headers(uid, *roles):
        token = jwt_service.create_access_token(uid, roles or ("user",))
        return {"Authorization": f"Bearer {token}"}

    return _headers
