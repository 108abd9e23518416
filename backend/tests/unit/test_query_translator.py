"""Tests for query-string translation."""

import pytest

from resource_api.domain.query import ReservedKeys, SortDirection, SortField
from resource_api.engines.query_translator import translate

FIELDS = frozenset({"id", "name", "age", "tag", "owner"})


class TestFilter:
    def test_empty_params_yield_empty_descriptor(self):
        query = translate({}, FIELDS)

        assert dict(query.filter) == {}
        assert query.select == ()
        assert query.populate == ()
        assert query.sort == ()
        assert query.limit is None
        assert query.skip is None
        assert query.is_empty()

    def test_unknown_keys_are_dropped(self):
        query = translate({"name": "Alice", "extra": "x"}, {"name", "age"})

        assert dict(query.filter) == {"name": "Alice"}

    def test_cache_busting_token_ignored(self):
        query = translate({"_": "1712345678", "tag": "red"}, FIELDS)

        assert dict(query.filter) == {"tag": "red"}

    def test_filter_values_stay_strings(self):
        query = translate({"age": "30"}, FIELDS)

        assert query.filter["age"] == "30"

    def test_reserved_keys_never_filter(self):
        params = {"select": "name", "populate": "owner", "sort": "age", "limit": "5", "skip": "1"}
        query = translate(params, FIELDS)

        assert dict(query.filter) == {}

    def test_reserved_key_wins_over_model_field_of_same_name(self):
        fields = FIELDS | {"sort", "limit"}
        query = translate({"sort": "name", "limit": "3"}, fields)

        assert "sort" not in query.filter
        assert "limit" not in query.filter
        assert query.sort == (SortField("name", SortDirection.ASC),)
        assert query.limit == 3

    @pytest.mark.parametrize(
        "params",
        [
            {"name": "a", "bogus": "b"},
            {"owner": "1", "select": "x", "zzz": ""},
            {"id": "1", "age": "2", "tag": "3", "nope": "4"},
        ],
    )
    def test_every_filter_key_is_a_valid_field(self, params):
        query = translate(params, FIELDS)

        assert set(query.filter) <= FIELDS


class TestSelectAndPopulate:
    def test_select_keeps_order_and_drops_unknown(self):
        query = translate({"select": "tag,name,secret"}, FIELDS)

        assert query.select == ("tag", "name")

    def test_select_accepts_whitespace_separator(self):
        query = translate({"select": "name  age"}, FIELDS)

        assert query.select == ("name", "age")

    def test_select_exclusions(self):
        query = translate({"select": "-tag,-age"}, FIELDS)

        assert query.select == ("-tag", "-age")
        assert query.excluded_fields == ("tag", "age")
        assert query.included_fields == ()

    def test_select_duplicates_collapse(self):
        query = translate({"select": "name,name,-name"}, FIELDS)

        assert query.select == ("name",)

    def test_populate(self):
        query = translate({"populate": "owner missing"}, FIELDS)

        assert query.populate == ("owner",)

    def test_empty_select_means_all_fields(self):
        query = translate({"select": ""}, FIELDS)

        assert query.select == ()


class TestSort:
    def test_sort_directions(self):
        query = translate({"sort": "-age,name,+tag"}, FIELDS)

        assert query.sort == (
            SortField("age", SortDirection.DESC),
            SortField("name", SortDirection.ASC),
            SortField("tag", SortDirection.ASC),
        )

    def test_sort_drops_unknown_fields(self):
        query = translate({"sort": "-password name"}, FIELDS)

        assert query.sort == (SortField("name", SortDirection.ASC),)

    def test_sort_first_occurrence_wins(self):
        query = translate({"sort": "age -age"}, FIELDS)

        assert query.sort == (SortField("age", SortDirection.ASC),)


class TestLimitAndSkip:
    def test_numeric_values(self):
        query = translate({"limit": "10", "skip": "20"}, FIELDS)

        assert query.limit == 10
        assert query.skip == 20

    def test_non_numeric_limit_fails_open(self):
        query = translate({"limit": "abc"}, FIELDS)

        assert query.limit is None

    @pytest.mark.parametrize("value", ["-1", "1.5", "", "ten", "0x10", "1_0", "\u0663", "+5"])
    def test_invalid_counts_yield_no_constraint(self, value):
        query = translate({"limit": value, "skip": value}, FIELDS)

        assert query.limit is None
        assert query.skip is None

    def test_zero_is_kept(self):
        query = translate({"skip": "0"}, FIELDS)

        assert query.skip == 0

    def test_surrounding_whitespace_tolerated(self):
        query = translate({"limit": " 7 "}, FIELDS)

        assert query.limit == 7


class TestCustomKeys:
    def test_configured_key_names(self):
        keys = ReservedKeys(select="fields", populate="expand", sort="order", limit="take", skip="offset")
        params = {"fields": "name", "expand": "owner", "order": "-age", "take": "2", "offset": "4", "sort": "x"}

        query = translate(params, FIELDS | {"sort"}, keys)

        assert query.select == ("name",)
        assert query.populate == ("owner",)
        assert query.sort == (SortField("age", SortDirection.DESC),)
        assert query.limit == 2
        assert query.skip == 4
        # "sort" is no longer reserved, so it filters like any field
        assert dict(query.filter) == {"sort": "x"}


def test_descriptor_is_immutable():
    query = translate({"name": "Alice"}, FIELDS)

    with pytest.raises(TypeError):
        query.filter["name"] = "Bob"
