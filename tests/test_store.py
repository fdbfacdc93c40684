"""Tests for CollectionStore against an in-memory MongoDB."""

import pytest
from bson import ObjectId

from reflect.store import CollectionStore, EntryNotFound, InvalidEntryId, StoreError, serialize


@pytest.fixture
def store(mongo_db) -> CollectionStore:
    return CollectionStore(mongo_db, "notes")


NOTE = {"title": "font", "search": ["font"], "source": ["https://fontpair.co/"], "content": ["pair fonts"]}


class TestSerialize:
    def test_object_id_becomes_hex_string(self):
        oid = ObjectId()
        assert serialize({"_id": oid, "title": "x"}) == {"_id": str(oid), "title": "x"}

    def test_does_not_modify_input(self):
        doc = {"_id": ObjectId()}
        serialize(doc)
        assert isinstance(doc["_id"], ObjectId)


class TestCrud:
    def test_insert_then_get(self, store):
        entry_id = store.insert(NOTE)

        entry = store.get(entry_id)
        assert entry["_id"] == entry_id
        assert entry["title"] == "font"

    def test_insert_does_not_mutate_document(self, store):
        doc = dict(NOTE)
        store.insert(doc)
        assert "_id" not in doc

    def test_list_all_returns_serialized_documents(self, store):
        first = store.insert(NOTE)
        second = store.insert({**NOTE, "title": "color"})

        entries = store.list_all()
        assert [e["_id"] for e in entries] == [first, second]
        assert all(isinstance(e["_id"], str) for e in entries)

    def test_list_all_empty(self, store):
        assert store.list_all() == []

    def test_insert_many(self, store):
        ids = store.insert_many([NOTE, {**NOTE, "title": "color"}])
        assert len(ids) == 2
        assert len(store.list_all()) == 2

    def test_insert_many_empty(self, store):
        assert store.insert_many([]) == []

    def test_update(self, store):
        entry_id = store.insert(NOTE)

        matched, modified = store.update(entry_id, {**NOTE, "title": "fonts"})

        assert (matched, modified) == (1, 1)
        assert store.get(entry_id)["title"] == "fonts"

    def test_delete(self, store):
        entry_id = store.insert(NOTE)

        assert store.delete(entry_id) == 1
        with pytest.raises(EntryNotFound):
            store.get(entry_id)


class TestErrors:
    @pytest.mark.parametrize("method", ["get", "delete"])
    def test_malformed_id(self, store, method):
        with pytest.raises(InvalidEntryId):
            getattr(store, method)("not-an-id")

    def test_malformed_id_on_update(self, store):
        with pytest.raises(InvalidEntryId):
            store.update("not-an-id", NOTE)

    def test_missing_entry(self, store):
        missing = str(ObjectId())
        with pytest.raises(EntryNotFound):
            store.get(missing)
        with pytest.raises(EntryNotFound):
            store.update(missing, NOTE)
        with pytest.raises(EntryNotFound):
            store.delete(missing)

    def test_errors_share_base_class(self):
        assert issubclass(InvalidEntryId, StoreError)
        assert issubclass(EntryNotFound, StoreError)
