from itertools import permutations

import pytest

from inventory_health.analytics.filter_sort import apply_filters, build_view, sort_records
from inventory_health.data.models import FilterCriteria, SortCriteria


@pytest.fixture
def records(make_record):
    return [
        make_record(sku_id="sku-b", store_id="S1", status="Critical", days_to_stockout=2, category="Snacks"),
        make_record(sku_id="SKU-A", store_id="S2", status="Warning", days_to_stockout=5, category="Frozen"),
        make_record(sku_id="milk-1", store_id="S1", status="Safe", days_to_stockout="Infinity", category=None),
        make_record(sku_id="SKU-C", store_id="S2", status="Critical", days_to_stockout=1, category="Snacks"),
        make_record(sku_id="bread", store_id="S3", status="Safe", days_to_stockout=12, category="Snacks",
                    recommended_reorder_quantity=None),
    ]


def skus(view):
    return [r.sku_id for r in view]


def test_default_criteria_keep_everything(records):
    view = apply_filters(records, FilterCriteria())
    assert skus(view) == skus(records)


def test_store_filter(records):
    assert skus(apply_filters(records, FilterCriteria(store="S1"))) == ["sku-b", "milk-1"]


def test_category_filter_skips_missing_categories(records):
    assert skus(apply_filters(records, FilterCriteria(category="Snacks"))) == ["sku-b", "SKU-C", "bread"]


def test_critical_only(records):
    assert skus(apply_filters(records, FilterCriteria(critical_only=True))) == ["sku-b", "SKU-C"]


def test_search_is_case_insensitive_substring(records):
    assert skus(apply_filters(records, FilterCriteria(search_term="sku"))) == ["sku-b", "SKU-A", "SKU-C"]
    assert skus(apply_filters(records, FilterCriteria(search_term="U-c"))) == ["SKU-C"]


@pytest.mark.parametrize("term", ["", "   "])
def test_blank_search_matches_all(records, term):
    assert len(apply_filters(records, FilterCriteria(search_term=term))) == len(records)


def test_search_treats_term_literally(make_record):
    records = [make_record(sku_id="A.1"), make_record(sku_id="AB1")]
    assert skus(apply_filters(records, FilterCriteria(search_term="a.1"))) == ["A.1"]


def test_filters_commute(records):
    """Applying any two predicates in either order yields the same set."""
    single = [
        FilterCriteria(store="S2"),
        FilterCriteria(category="Snacks"),
        FilterCriteria(critical_only=True),
        FilterCriteria(search_term="sku"),
    ]
    for first, second in permutations(single, 2):
        forward = apply_filters(apply_filters(records, first), second)
        backward = apply_filters(apply_filters(records, second), first)
        assert set(skus(forward)) == set(skus(backward))


def test_combined_filters_equal_sequential_filters(records):
    combined = FilterCriteria(store="S2", category="Snacks", critical_only=True, search_term="c")
    sequential = records
    for part in (
        FilterCriteria(search_term="c"),
        FilterCriteria(critical_only=True),
        FilterCriteria(category="Snacks"),
        FilterCriteria(store="S2"),
    ):
        sequential = apply_filters(sequential, part)
    assert skus(build_view(records, combined, SortCriteria())) == skus(sequential) == ["SKU-C"]


def test_sort_strings_by_code_point(records):
    view = sort_records(records, SortCriteria(field="sku_id"))
    assert skus(view) == ["SKU-A", "SKU-C", "bread", "milk-1", "sku-b"]
    view = sort_records(records, SortCriteria(field="sku_id", direction="desc"))
    assert skus(view) == ["sku-b", "milk-1", "bread", "SKU-C", "SKU-A"]


def test_infinity_sorts_last_ascending_and_first_descending(records):
    asc = sort_records(records, SortCriteria(field="days_to_stockout"))
    assert skus(asc) == ["SKU-C", "sku-b", "SKU-A", "bread", "milk-1"]
    desc = sort_records(records, SortCriteria(field="days_to_stockout", direction="desc"))
    assert skus(desc)[0] == "milk-1"
    assert skus(desc) == ["milk-1", "bread", "SKU-A", "sku-b", "SKU-C"]


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_sort_is_stable(make_record, direction):
    records = [
        make_record(sku_id="first", store_id="S9", days_to_stockout=4),
        make_record(sku_id="other", store_id="S1", days_to_stockout=9),
        make_record(sku_id="second", store_id="S9", days_to_stockout=4),
        make_record(sku_id="third", store_id="S9", days_to_stockout=4),
    ]
    for field in ("store_id", "days_to_stockout"):
        view = sort_records(records, SortCriteria(field=field, direction=direction))
        tied = [sku for sku in skus(view) if sku != "other"]
        assert tied == ["first", "second", "third"]


def test_missing_reorder_quantity_sorts_as_zero(records):
    view = sort_records(records, SortCriteria(field="recommended_reorder_quantity"))
    assert skus(view)[0] == "bread"


def test_build_view_does_not_mutate_input(records):
    before = list(records)
    build_view(records, FilterCriteria(critical_only=True), SortCriteria(field="days_to_stockout", direction="desc"))
    assert records == before


def test_empty_input():
    assert build_view([], FilterCriteria(), SortCriteria()) == []
    assert apply_filters((), FilterCriteria(store="S1")) == []


def test_sort_toggle():
    sort = SortCriteria()
    assert (sort.field, sort.direction) == ("sku_id", "asc")
    sort = sort.toggled("sku_id")
    assert sort.direction == "desc"
    sort = sort.toggled("days_to_stockout")
    assert (sort.field, sort.direction) == ("days_to_stockout", "asc")
    sort = sort.toggled("days_to_stockout").toggled("days_to_stockout")
    assert sort.direction == "asc"
