"""
# @Time    : 2025/11/20 10:41
# @Author  : Pedro
# @File    : test_shipping_address_service.py
# @Software: PyCharm
"""
import asyncio

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.model.shipping_address import ShippingAddress
from app.api.v1.services.shipping_address_service import ShippingAddressService, is_valid_postal_code
from app.core.exception import (
    ForbiddenError,
    InternalError,
    LimitExceededError,
    NotFoundError,
    ValidationError,
)
from conftest import address_payload


@pytest.fixture
def service(session_factory):
    return ShippingAddressService(session_factory)


async def _defaults(session_factory, owner_id):
    async with session_factory() as session:
        rows = await session.execute(
            select(ShippingAddress.id, ShippingAddress.is_default).where(ShippingAddress.usuario_id == owner_id)
        )
        return {row.id: row.is_default for row in rows}


# ======================================================
# 🆕 创建
# ======================================================
async def test_create_trims_fields_and_joins_user(service, users):
    address = await service.create(
        address_payload(users.alice, direccion="  Calle 5  ", ciudad=" Austin ", codigo_postal=" 78701 ")
    )

    assert address.id is not None
    assert address.direccion == "Calle 5"
    assert address.ciudad == "Austin"
    assert address.codigo_postal == "78701"
    assert address.is_default is False
    assert address.user.id == users.alice
    assert address.user.first_name == "Alice"


async def test_create_reports_missing_and_blank_fields(service, users):
    with pytest.raises(ValidationError) as exc:
        await service.create({"usuario_id": users.alice, "direccion": "   ", "ciudad": "Austin"})

    assert exc.value.http_code == 400
    assert set(exc.value.extra["missing"]) == {"direccion", "estado_provincia", "codigo_postal", "pais"}
    assert "usuario_id" in exc.value.extra["required"]


async def test_create_for_unknown_user_is_not_found(service, users):
    # 用户存在性先于邮编格式校验
    with pytest.raises(NotFoundError):
        await service.create(address_payload(9999, codigo_postal="bad"))


async def test_sixth_address_hits_limit(service, users):
    for i in range(5):
        await service.create(address_payload(users.alice, direccion=f"Street {i}"))

    with pytest.raises(LimitExceededError) as exc:
        await service.create(address_payload(users.alice, direccion="Street 6"))

    assert exc.value.http_code == 400
    assert exc.value.extra["currentCount"] == 5


async def test_limit_is_configurable(session_factory, users):
    service = ShippingAddressService(session_factory, max_per_user=1)
    await service.create(address_payload(users.alice))
    with pytest.raises(LimitExceededError):
        await service.create(address_payload(users.alice))


@pytest.mark.parametrize("code", ["12345", "12345-6789", " 12345 "])
def test_valid_postal_codes(code):
    assert is_valid_postal_code(code)


@pytest.mark.parametrize("code", ["1234", "abcde", "12345-67", "123456", "12345-", "١٢٣٤٥", "12345-٦٧٨٩"])
def test_invalid_postal_codes(code):
    assert not is_valid_postal_code(code)


async def test_create_rejects_bad_postal_code(service, users):
    with pytest.raises(ValidationError, match="postal code"):
        await service.create(address_payload(users.alice, codigo_postal="1234"))


# ======================================================
# 🔍 查询
# ======================================================
async def test_list_by_user_without_addresses_is_not_found(service, users):
    with pytest.raises(NotFoundError) as exc:
        await service.list_by_user(users.bob)

    assert exc.value.extra == {"userId": users.bob, "userName": "Bob"}


async def test_list_by_user_unknown_user(service, users):
    with pytest.raises(NotFoundError, match="User not found"):
        await service.list_by_user(424242)


async def test_list_by_user_requires_id(service):
    with pytest.raises(ValidationError):
        await service.list_by_user(None)


async def test_list_by_user_newest_first_with_pagination(service, users):
    created = [await service.create(address_payload(users.alice, direccion=f"Street {i}")) for i in range(3)]

    result = await service.list_by_user(users.alice, page="1", limit="2")

    assert [a.id for a in result.items] == [created[2].id, created[1].id]
    assert result.pagination == {"currentPage": 1, "totalPages": 2, "totalItems": 3, "itemsPerPage": 2}
    assert result.user.id == users.alice


async def test_list_all_filters_and_echoes(service, users):
    await service.create(address_payload(users.alice, pais="Mexico", ciudad="Monterrey"))
    await service.create(address_payload(users.bob, pais="USA"))

    result = await service.list_all(pais=" Mexico ")

    assert len(result.items) == 1
    assert result.items[0].user.last_name_mother == "Ruiz"
    assert result.filters == {"pais": " Mexico "}


async def test_list_all_without_matches_echoes_filters(service, users):
    await service.create(address_payload(users.alice, pais="USA"))

    with pytest.raises(NotFoundError) as exc:
        await service.list_all(pais="Mexico")

    assert exc.value.extra == {"filters": {"pais": "Mexico"}}


async def test_get_by_id(service, users):
    created = await service.create(address_payload(users.alice))
    found = await service.get_by_id(created.id)
    assert found.user.first_name == "Alice"

    with pytest.raises(NotFoundError):
        await service.get_by_id(created.id + 100)


# ======================================================
# ✏️ 更新 / 删除
# ======================================================
async def test_update_without_postal_code_keeps_it_and_refreshes_timestamp(service, users, alice):
    created = await service.create(address_payload(users.alice, codigo_postal="12345"))
    await asyncio.sleep(0.01)

    updated = await service.update(created.id, alice, {"ciudad": "  Dallas ", "pais": ""})

    assert updated.ciudad == "Dallas"
    assert updated.pais == "USA"
    assert updated.codigo_postal == "12345"
    assert updated.updated_at > created.updated_at


async def test_update_rejects_bad_postal_code(service, users, alice):
    created = await service.create(address_payload(users.alice))
    with pytest.raises(ValidationError):
        await service.update(created.id, alice, {"codigo_postal": "12"})


async def test_update_by_other_user_is_forbidden_and_unchanged(service, users, bob):
    created = await service.create(address_payload(users.alice, ciudad="Austin"))

    with pytest.raises(ForbiddenError):
        await service.update(created.id, bob, {"ciudad": "Hacked"})

    assert (await service.get_by_id(created.id)).ciudad == "Austin"


async def test_admin_may_update_any_address(service, users, admin):
    created = await service.create(address_payload(users.alice))
    updated = await service.update(created.id, admin, {"direccion": "Admin St 1"})
    assert updated.direccion == "Admin St 1"


async def test_update_missing_address(service, alice):
    with pytest.raises(NotFoundError):
        await service.update(12345, alice, {"ciudad": "X"})


async def test_delete_by_other_user_is_forbidden(service, users, bob):
    created = await service.create(address_payload(users.alice))

    with pytest.raises(ForbiddenError):
        await service.delete(created.id, bob)

    assert (await service.get_by_id(created.id)).id == created.id


async def test_delete_by_owner(service, users, alice):
    created = await service.create(address_payload(users.alice))

    result = await service.delete(created.id, alice)

    assert result == {
        "id": created.id,
        "userId": users.alice,
        "deletedBy": {"userId": users.alice, "isAdmin": False},
    }
    with pytest.raises(NotFoundError):
        await service.get_by_id(created.id)


async def test_delete_by_admin_reports_admin(service, users, admin):
    created = await service.create(address_payload(users.alice))
    result = await service.delete(created.id, admin)
    assert result["deletedBy"] == {"userId": users.carol, "isAdmin": True}


# ======================================================
# ⭐ 默认地址
# ======================================================
async def test_set_default_leaves_exactly_one(service, session_factory, users, alice):
    ids = [(await service.create(address_payload(users.alice, direccion=f"S{i}"))).id for i in range(3)]

    await service.set_default(ids[0], users.alice, alice)
    await service.set_default(ids[2], users.alice, alice)

    defaults = await _defaults(session_factory, users.alice)
    assert [k for k, v in defaults.items() if v] == [ids[2]]


async def test_set_default_for_foreign_address_rolls_back(service, session_factory, users, alice):
    own = await service.create(address_payload(users.alice))
    foreign = await service.create(address_payload(users.bob))
    await service.set_default(own.id, users.alice, alice)

    with pytest.raises(NotFoundError):
        await service.set_default(foreign.id, users.alice, alice)

    assert await _defaults(session_factory, users.alice) == {own.id: True}
    assert await _defaults(session_factory, users.bob) == {foreign.id: False}


async def test_set_default_requires_owner_id(service, alice):
    with pytest.raises(ValidationError):
        await service.set_default(1, None, alice)


async def test_set_default_for_someone_else_is_forbidden(service, users, bob):
    created = await service.create(address_payload(users.alice))
    with pytest.raises(ForbiddenError):
        await service.set_default(created.id, users.alice, bob)


# ======================================================
# 🗑️ 批量删除
# ======================================================
async def test_bulk_delete_only_removes_owned(service, session_factory, users, alice):
    mine = [(await service.create(address_payload(users.alice, direccion=f"S{i}"))).id for i in range(2)]
    theirs = (await service.create(address_payload(users.bob))).id

    result = await service.bulk_delete(mine + [theirs, 99999], alice)

    assert result == {"deletedCount": 2, "requestedCount": 4}
    assert await _defaults(session_factory, users.alice) == {}
    assert list(await _defaults(session_factory, users.bob)) == [theirs]


@pytest.mark.parametrize("ids", [None, []])
async def test_bulk_delete_requires_ids(service, alice, ids):
    with pytest.raises(ValidationError):
        await service.bulk_delete(ids, alice)


# ======================================================
# ✅ 校验 / 边界
# ======================================================
@pytest.mark.parametrize(
    "postal, city, country, expected",
    [
        ("12345", "Austin", "USA", True),
        ("12345-6789", "Austin", "USA", True),
        ("1234", "Austin", "USA", False),
        ("12345", "  ", "USA", False),
        ("12345", "Austin", None, False),
    ],
)
def test_validate_address(postal, city, country, expected):
    assert ShippingAddressService.validate(postal, city, country) is expected


async def test_persistence_failure_becomes_internal_error():
    def broken_factory():
        raise SQLAlchemyError("database is locked")

    service = ShippingAddressService(broken_factory)

    with pytest.raises(InternalError) as exc:
        await service.get_by_id(1)

    assert exc.value.http_code == 500
    assert exc.value.msg == "Error retrieving shipping address"
    assert exc.value.extra == {"details": "database is locked"}


async def test_create_rejects_non_ascii_digits(service, users):
    with pytest.raises(ValidationError, match="postal code"):
        await service.create(address_payload(users.alice, codigo_postal="١٢٣٤٥"))


async def test_set_default_only_touches_previous_and_new_default(service, session_factory, users, alice):
    first, middle, last = [
        (await service.create(address_payload(users.alice, direccion=f"S{i}"))).id for i in range(3)
    ]
    await service.set_default(first, users.alice, alice)

    async def stamps():
        async with session_factory() as session:
            rows = await session.execute(
                select(ShippingAddress.id, ShippingAddress.updated_at).where(ShippingAddress.usuario_id == users.alice)
            )
            return dict(rows.all())

    before = await stamps()
    await asyncio.sleep(0.01)
    await service.set_default(last, users.alice, alice)
    after = await stamps()

    assert after[middle] == before[middle]
    assert after[first] > before[first]
    assert after[last] > before[last]
