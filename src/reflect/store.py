"""CRUD access to a single MongoDB collection."""

import logging
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.database import Database

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for storage errors."""

    pass


class InvalidEntryId(StoreError):
    """Raised when an id is not a valid ObjectId."""

    pass


class EntryNotFound(StoreError):
    """Raised when no document has the given id."""

    pass


def _object_id(entry_id: str) -> ObjectId:
    try:
        return ObjectId(entry_id)
    except (InvalidId, TypeError):
        raise InvalidEntryId(f"Invalid id: {entry_id!r}")


def serialize(doc: dict[str, Any]) -> dict[str, Any]:
    """Render a stored document with its `_id` as a hex string."""
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out


class CollectionStore:
    """Thin wrapper over one collection that speaks string ids."""

    def __init__(self, database: Database, name: str):
        self._name = name
        self._collection = database[name]

    @property
    def name(self) -> str:
        return self._name

    def list_all(self) -> list[dict[str, Any]]:
        """Return every document in insertion order."""
        return [serialize(doc) for doc in self._collection.find()]

    def get(self, entry_id: str) -> dict[str, Any]:
        """Fetch one document.

        Raises:
            InvalidEntryId: If entry_id is malformed.
            EntryNotFound: If no document has that id.
        """
        doc = self._collection.find_one({"_id": _object_id(entry_id)})
        if doc is None:
            raise EntryNotFound(f"No {self._name} entry with id {entry_id}")
        return serialize(doc)

    def insert(self, doc: dict[str, Any]) -> str:
        """Insert a document and return its new id."""
        # insert_one adds _id to the dict it is given
        result = self._collection.insert_one(dict(doc))
        logger.info("Inserted %s entry %s", self._name, result.inserted_id)
        return str(result.inserted_id)

    def insert_many(self, docs: list[dict[str, Any]]) -> list[str]:
        """Insert several documents and return their ids."""
        if not docs:
            return []
        result = self._collection.insert_many([dict(d) for d in docs])
        logger.info("Inserted %d %s entries", len(result.inserted_ids), self._name)
        return [str(i) for i in result.inserted_ids]

    def update(self, entry_id: str, doc: dict[str, Any]) -> tuple[int, int]:
        """Replace the given fields of a document.

        Returns:
            (matched_count, modified_count)

        Raises:
            InvalidEntryId: If entry_id is malformed.
            EntryNotFound: If no document has that id.
        """
        result = self._collection.update_one({"_id": _object_id(entry_id)}, {"$set": doc})
        if result.matched_count == 0:
            raise EntryNotFound(f"No {self._name} entry with id {entry_id}")
        logger.info("Updated %s entry %s", self._name, entry_id)
        return result.matched_count, result.modified_count

    def delete(self, entry_id: str) -> int:
        """Delete a document.

        Returns:
            Number of documents deleted (always 1).

        Raises:
            InvalidEntryId: If entry_id is malformed.
            EntryNotFound: If no document has that id.
        """
        result = self._collection.delete_one({"_id": _object_id(entry_id)})
        if result.deleted_count == 0:
            raise EntryNotFound(f"No {self._name} entry with id {entry_id}")
        logger.info("Deleted %s entry %s", self._name, entry_id)
        return result.deleted_count
