"""Unit tests for ResourceRepository."""

from types import MappingProxyType

import pytest

from resource_api.domain.errors import InvalidFieldError
from resource_api.domain.query import QueryDescriptor, SortDirection, SortField
from resource_api.models import ItemModel
from resource_api.repositories.resource_repo import ResourceRepository


@pytest.fixture()
def repo(db, items_entry) -> ResourceRepository:
    return ResourceRepository(db, items_entry)


def _names(records):
    return [r.name for r in records]


class TestFind:
    def test_no_query_returns_everything(self, repo, sample_items):
        assert sorted(_names(repo.find())) == ["Alice", "Bob", "Carol"]

    def test_equality_filter(self, repo, sample_items):
        query = QueryDescriptor(filter=MappingProxyType({"name": "Alice"}))

        assert _names(repo.find(query)) == ["Alice"]

    def test_filter_value_coerced_to_column_type(self, repo, sample_items):
        query = QueryDescriptor(filter={"age": "25"})

        assert _names(repo.find(query)) == ["Bob"]

    def test_boolean_filter(self, repo, sample_items):
        query = QueryDescriptor(filter={"active": "false"})

        assert _names(repo.find(query)) == ["Carol"]

    def test_unparseable_filter_value_raises(self, repo, sample_items):
        with pytest.raises(InvalidFieldError) as exc_info:
            repo.find(QueryDescriptor(filter={"age": "old"}))

        assert exc_info.value.field == "age"

    def test_filter_on_many_to_one_relation_uses_join_column(self, repo, sample_items, sample_owner):
        records = repo.find(QueryDescriptor(filter={"owner": str(sample_owner.id)}))

        assert sorted(_names(records)) == ["Alice", "Bob"]

    def test_sort_on_many_to_one_relation(self, repo, sample_items):
        query = QueryDescriptor(sort=(
            SortField("owner", SortDirection.DESC),
            SortField("name", SortDirection.ASC),
        ))

        # SQLite sorts NULL first ascending, so last descending
        assert _names(repo.find(query)) == ["Alice", "Bob", "Carol"]

    def test_filter_on_collection_relation_raises(self, db, registry, sample_items, sample_owner):
        owners = ResourceRepository(db, registry.get("owners"))

        with pytest.raises(InvalidFieldError, match="only single-column many-to-one relations can be used to filter"):
            owners.find(QueryDescriptor(filter={"items": "1"}))

    def test_select_many_to_one_relation_loads_join_column(self, repo, sample_items, sample_owner):
        records = repo.find(QueryDescriptor(select=("owner",), sort=(SortField("name"),)))

        assert [r.owner_id for r in records] == [sample_owner.id, sample_owner.id, None]

    def test_empty_result_is_empty_list(self, repo, sample_items):
        assert repo.find(QueryDescriptor(filter={"name": "Zed"})) == []

    def test_sort_descending_then_ascending(self, repo, sample_items):
        query = QueryDescriptor(sort=(
            SortField("tag", SortDirection.DESC),
            SortField("age", SortDirection.ASC),
        ))

        assert _names(repo.find(query)) == ["Alice", "Carol", "Bob"]

    def test_limit_and_skip(self, repo, sample_items):
        query = QueryDescriptor(sort=(SortField("age"),), skip=1, limit=1)

        assert _names(repo.find(query)) == ["Alice"]

    def test_zero_limit_means_no_limit(self, repo, sample_items):
        assert len(repo.find(QueryDescriptor(limit=0))) == 3

    def test_select_and_populate_options_apply(self, repo, sample_items):
        query = QueryDescriptor(
            filter={"name": "Alice"},
            select=("name",),
            populate=("owner",),
        )

        [record] = repo.find(query)

        assert record.owner.name == "Dana"


class TestCount:
    def test_count_all(self, repo, sample_items):
        assert repo.count() == 3

    def test_count_filtered(self, repo, sample_items):
        assert repo.count({"tag": "red"}) == 2


class TestFindById:
    def test_existing_record(self, repo, sample_items):
        record = repo.find_by_id(str(sample_items[1].id))

        assert record.name == "Bob"

    def test_missing_record(self, repo, sample_items):
        assert repo.find_by_id("9999") is None

    def test_malformed_id_is_missing(self, repo, sample_items):
        assert repo.find_by_id("doesnotexist") is None


class TestWrites:
    def test_create_ignores_unknown_keys(self, repo, db):
        record = repo.create({"name": "Dave", "age": 41, "nickname": "D"})
        db.commit()

        assert record.id is not None
        assert db.get(ItemModel, record.id).age == 41

    def test_save_applies_changes_but_not_primary_key(self, repo, db, sample_items):
        record = sample_items[0]
        original_id = record.id

        repo.save(record, {"tag": None, "id": 999, "unknown": 1})
        db.commit()

        reloaded = db.get(ItemModel, original_id)
        assert reloaded.tag is None
        assert reloaded.id == original_id

    def test_find_by_id_and_remove(self, repo, db, sample_items):
        removed = repo.find_by_id_and_remove(str(sample_items[0].id))
        db.commit()

        assert removed is not None
        assert repo.count() == 2

    def test_find_by_id_and_remove_missing_returns_none(self, repo, sample_items):
        assert repo.find_by_id_and_remove("9999") is None

    def test_remove_by_filter(self, repo, db, sample_items):
        deleted = repo.remove({"tag": "red"})
        db.commit()

        assert deleted == 2
        assert _names(repo.find()) == ["Bob"]

    def test_remove_without_filter_deletes_all(self, repo, db, sample_items):
        assert repo.remove() == 3
        db.commit()

        assert repo.count() == 0
