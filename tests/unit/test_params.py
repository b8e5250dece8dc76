"""Unit tests for parameter preparation."""

from __future__ import annotations

from row_bind.core.params import coerce_params, normalize_params, prepare_params


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = "SELECT * FROM users WHERE id = :user_id"
        assert normalize_params(sql, "named") == sql

    def test_pyformat_conversion(self) -> None:
        sql = "SELECT * FROM users WHERE id = :user_id"
        expected = "SELECT * FROM users WHERE id = %(user_id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_typecast_exclusion(self) -> None:
        sql = "SELECT value::integer FROM t WHERE id = :id"
        expected = "SELECT value::integer FROM t WHERE id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT * FROM t WHERE col = ':not_a_param' AND id = :id"
        expected = "SELECT * FROM t WHERE col = ':not_a_param' AND id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_duplicate_param_names(self) -> None:
        sql = "SELECT * FROM t WHERE a = :val OR b = :val"
        expected = "SELECT * FROM t WHERE a = %(val)s OR b = %(val)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_no_params(self) -> None:
        sql = "SELECT 1"
        assert normalize_params(sql, "pyformat") == sql


class TestCoerceParams:
    def test_none(self) -> None:
        assert coerce_params(None) is None

    def test_mapping_to_dict(self) -> None:
        assert coerce_params({"a": 1}) == {"a": 1}

    def test_list_to_tuple(self) -> None:
        assert coerce_params([1, 2]) == (1, 2)

    def test_scalar_wrapped(self) -> None:
        assert coerce_params(5) == (5,)
        assert coerce_params("abc") == ("abc",)


class TestPrepareParams:
    def test_collection_values_become_lists(self) -> None:
        prepared = prepare_params({"ids": (1, 2), "tags": {"x"}, "name": "bob"})
        assert prepared == {"ids": [1, 2], "tags": ["x"], "name": "bob"}

    def test_generator_value(self) -> None:
        prepared = prepare_params(i for i in range(3))
        assert prepared == ([0, 1, 2],)

    def test_positional(self) -> None:
        assert prepare_params([1, [2, 3], b"raw"]) == (1, [2, 3], b"raw")

    def test_none(self) -> None:
        assert prepare_params(None) is None
