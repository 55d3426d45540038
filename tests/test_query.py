"""
Tests for the filter / sort / pagination pipeline.
"""

import pytest

from company_mcp.query import (
    FilterCondition,
    SortSpec,
    matches,
    matches_all,
    normalize_record,
    parse_filters,
    run_query,
    to_number,
)


def cond(field, op, value):
    return FilterCondition(field=field, op=op, value=value)


# ============================================================================
# Predicate Evaluator
# ============================================================================

class TestMatches:

    def test_absent_field_is_skipped(self):
        assert matches({"country": "US"}, cond("employees", "gt", "10")) is True

    def test_eq_is_case_sensitive(self):
        record = {"country": "US"}
        assert matches(record, cond("country", "eq", "US"))
        assert not matches(record, cond("country", "eq", "us"))

    def test_eq_compares_numbers_loosely(self):
        record = {"annual_revenue_usd": "500000"}
        assert matches(record, cond("annual_revenue_usd", "eq", 500000))
        assert matches(record, cond("annual_revenue_usd", "eq", "500000.0"))
        assert not matches(record, cond("annual_revenue_usd", "eq", "500001"))

    def test_contains_is_case_insensitive(self):
        record = {"industry": "Manufacturing"}
        assert matches(record, cond("industry", "contains", "FACTUR"))
        assert not matches(record, cond("industry", "contains", "energy"))

    def test_contains_empty_value_never_matches(self):
        assert not matches({"industry": ""}, cond("industry", "contains", ""))

    def test_gt_lt_numeric(self):
        record = {"annual_revenue_usd": "500000"}
        assert matches(record, cond("annual_revenue_usd", "gt", "100000"))
        assert not matches(record, cond("annual_revenue_usd", "gt", "500000"))
        assert matches(record, cond("annual_revenue_usd", "lt", 600000))
        assert not matches(record, cond("annual_revenue_usd", "lt", "500000"))

    @pytest.mark.parametrize("actual,expected", [
        ("", "100"),
        ("n/a", "100"),
        ("500", "lots"),
        ("1_000", "500"),
        ("500", "1_000"),
        ("\u0661\u0662\u0663", "100"),
        ("\uff11\uff10\uff10\uff10", "500"),
    ])
    def test_non_numeric_operand_is_non_match(self, actual, expected):
        assert not matches({"x": actual}, cond("x", "gt", expected))
        assert not matches({"x": actual}, cond("x", "lt", expected))

    def test_matches_all_is_logical_and(self):
        record = {"country": "US", "annual_revenue_usd": "500000"}
        assert matches_all(record, [cond("country", "eq", "US"), cond("annual_revenue_usd", "gt", "1")])
        assert not matches_all(record, [cond("country", "eq", "US"), cond("annual_revenue_usd", "lt", "1")])
        assert matches_all(record, [])


def test_to_number():
    assert to_number("42") == 42.0
    assert to_number(" 3.5 ") == 3.5
    assert to_number("") is None
    assert to_number("inf") is None
    assert to_number(None) is None
    assert to_number(True) is None
    assert to_number("1_000") is None
    assert to_number("\u0661\u0662\u0663") is None


def test_parse_filters_drops_malformed():
    raw = [
        {"field": "country", "op": "eq", "value": "US"},
        {"field": "country", "op": "eq"},
        {"op": "eq", "value": "US"},
        {"field": "country", "op": "startswith", "value": "U"},
        "not-a-filter",
    ]
    conditions = parse_filters(raw)
    assert len(conditions) == 1
    assert conditions[0].field == "country"


def test_parse_filters_non_list_is_ignored():
    assert parse_filters("country=US") == []
    assert parse_filters(None) == []


# ============================================================================
# Field Normalizer
# ============================================================================

def test_normalize_replaces_empty_and_none():
    record = {"a": "", "b": None, "c": "x", "d": "0"}
    assert normalize_record(record) == {"a": "no_data", "b": "no_data", "c": "x", "d": "0"}


def test_normalize_is_idempotent():
    record = {"a": "", "b": "value"}
    once = normalize_record(record)
    assert normalize_record(once) == once


def test_normalize_does_not_mutate_input():
    record = {"a": ""}
    normalize_record(record)
    assert record == {"a": ""}


def test_normalize_custom_sentinel():
    assert normalize_record({"a": ""}, missing_value="N/A") == {"a": "N/A"}


# ============================================================================
# Query Pipeline
# ============================================================================

def test_filter_by_country(sample_rows):
    page = run_query(sample_rows, filters=[{"field": "country", "op": "eq", "value": "US"}])
    assert page.total == 1
    assert page.results[0]["company_name"] == "Acme"


def test_empty_revenue_fails_numeric_filter(sample_rows):
    page = run_query(sample_rows, filters=[{"field": "annual_revenue_usd", "op": "gt", "value": "100000"}])
    assert page.total == 1
    assert page.results[0]["company_name"] == "Acme"


def test_pagination_over_unfiltered_store(sample_rows):
    page = run_query(sample_rows, limit=1, offset=1)
    assert page.total == 2
    assert page.showing == 1
    assert page.offset == 1
    assert [r["company_name"] for r in page.results] == ["Globex"]


def test_results_are_normalized_but_filtering_sees_raw(sample_rows):
    page = run_query(sample_rows, filters=[{"field": "annual_revenue_usd", "op": "eq", "value": ""}])
    assert page.total == 1
    assert page.results[0]["annual_revenue_usd"] == "no_data"


def test_malformed_filter_does_not_fail_request(sample_rows):
    page = run_query(sample_rows, filters=[{"field": "country"}, {"field": "country", "op": "eq", "value": "UK"}])
    assert page.total == 1
    assert page.results[0]["company_name"] == "Globex"


def test_limit_is_clamped_to_max():
    rows = [{"n": str(i)} for i in range(20)]
    page = run_query(rows, limit=100, max_limit=5)
    assert page.total == 20
    assert page.showing == 5


@pytest.mark.parametrize("limit,offset", [(0, 0), (1, 0), (3, 2), (10, 8), (5, 50)])
def test_total_independent_of_paging(limit, offset):
    rows = [{"n": str(i)} for i in range(10)]
    page = run_query(rows, limit=limit, offset=offset)
    assert page.total == 10
    assert 0 <= page.showing <= max(0, min(limit, page.total - offset))


def test_sort_numeric_desc():
    rows = [{"name": "a", "rev": "9"}, {"name": "b", "rev": "100"}, {"name": "c", "rev": "20"}]
    page = run_query(rows, sort={"field": "rev", "dir": "desc"})
    assert [r["name"] for r in page.results] == ["b", "c", "a"]


def test_sort_lexicographic_asc():
    rows = [{"name": "pear"}, {"name": "apple"}, {"name": "fig"}]
    page = run_query(rows, sort=SortSpec(field="name"))
    assert [r["name"] for r in page.results] == ["apple", "fig", "pear"]


def test_sort_is_stable():
    rows = [{"k": "1", "id": "a"}, {"k": "0", "id": "b"}, {"k": "1", "id": "c"}, {"k": "0", "id": "d"}]
    asc = run_query(rows, sort={"field": "k"})
    assert [r["id"] for r in asc.results] == ["b", "d", "a", "c"]
    desc = run_query(rows, sort={"field": "k", "dir": "desc"})
    assert [r["id"] for r in desc.results] == ["a", "c", "b", "d"]


def test_sort_puts_records_without_field_last():
    rows = [
        {"id": "a", "rev": "5"},
        {"id": "b"},
        {"id": "c", "rev": "1"},
        {"id": "d"},
        {"id": "e", "rev": "3"},
    ]
    asc = run_query(rows, sort={"field": "rev"})
    assert [r["id"] for r in asc.results] == ["c", "e", "a", "b", "d"]
    desc = run_query(rows, sort={"field": "rev", "dir": "desc"})
    assert [r["id"] for r in desc.results] == ["a", "e", "c", "b", "d"]


def test_sort_without_field_is_ignored(sample_rows):
    page = run_query(sample_rows, sort={"dir": "desc"})
    assert [r["company_name"] for r in page.results] == ["Acme", "Globex"]
