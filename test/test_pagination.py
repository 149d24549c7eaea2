"""
# @Time    : 2025/11/20 10:20
# @Author  : Pedro
# @File    : test_pagination.py
# @Software: PyCharm
"""
import pytest

from app.core.pagination import MAX_OFFSET, Pagination, parse_int


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("3", 3),
        ("  12abc", 12),
        ("-2", -2),
        ("abc", None),
        ("", None),
        (None, None),
        (4, 4),
    ],
)
def test_parse_int_takes_leading_integer(raw, expected):
    assert parse_int(raw) == expected


def test_defaults_when_missing():
    paging = Pagination.from_query()
    assert (paging.page, paging.limit, paging.offset) == (1, 10, 0)


def test_limit_above_max_is_clamped():
    assert Pagination.from_query("1", "500").limit == 50


def test_page_below_one_is_clamped():
    assert Pagination.from_query("-4", "10").page == 1


def test_zero_or_garbage_falls_back_to_default():
    paging = Pagination.from_query("0", "zero")
    assert paging.page == 1
    assert paging.limit == 10


def test_negative_limit_is_clamped_to_one():
    assert Pagination.from_query("1", "-5").limit == 1


def test_meta_total_pages_is_ceiling():
    paging = Pagination.from_query("2", "4")
    assert paging.offset == 4
    assert paging.meta(9) == {
        "currentPage": 2,
        "totalPages": 3,
        "totalItems": 9,
        "itemsPerPage": 4,
    }
    assert paging.meta(0)["totalPages"] == 0


def test_non_ascii_digits_are_not_numbers():
    assert parse_int("١٢") is None
    assert Pagination.from_query("٣", "٢٠") == Pagination(page=1, limit=10)


def test_huge_page_keeps_offset_in_64_bit_range():
    paging = Pagination.from_query("99999999999999999999", "10")
    assert paging.page == MAX_OFFSET // 10
    assert paging.offset <= MAX_OFFSET


def test_overlong_digit_string_is_clamped():
    paging = Pagination.from_query("9" * 5000, "-" + "9" * 5000)
    assert paging.limit == 1
    assert paging.page == MAX_OFFSET
