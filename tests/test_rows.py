import pytest

from dbdoc.core.rows import CatalogAccessError, Row


def test_missing_column_is_a_data_access_failure():
    with pytest.raises(CatalogAccessError, match="table_name"):
        Row({}).string("table_name")


def test_string_rejects_null():
    with pytest.raises(CatalogAccessError, match="must not be null"):
        Row({"table_name": None}).string("table_name")


def test_optional_values_read_null_as_none():
    row = Row({"a": None, "b": None})
    assert row.optional_string("a") is None
    assert row.optional_integer("b") is None


def test_integer_reads_null_as_zero():
    assert Row({"len": None}).integer("len") == 0
    assert Row({"len": 255}).integer("len") == 255


def test_integer_rejects_text():
    with pytest.raises(CatalogAccessError, match="not an integer"):
        Row({"len": "abc"}).integer("len")


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (False, False), (None, False), ("t", True), ("f", False), ("YES", True), (1, True)],
)
def test_boolean(value, expected):
    assert Row({"flag": value}).boolean("flag") is expected


def test_boolean_rejects_garbage():
    with pytest.raises(CatalogAccessError, match="not a boolean"):
        Row({"flag": "maybe"}).boolean("flag")
