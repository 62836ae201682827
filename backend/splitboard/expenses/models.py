"""Expense records cached from Splitwise."""
import copy
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from splitboard.errors import StoreError
from splitboard.extensions import get_db

logger = logging.getLogger(__name__)

SYNCED_AT = "_synced_at"
# Insertion timestamp written by the earlier mongoose-based dashboard
LEGACY_CREATED_AT = "createdAt"
_HIDDEN_FIELDS = {"_id": 0, SYNCED_AT: 0}


class ExpenseStore:
    """
    Persists Splitwise expense payloads keyed by their upstream ``id``.

    Records are write-once: nothing here updates or deletes a stored expense.
    The unique index on ``id`` is the only guard against two concurrent syncs
    inserting the same expense.
    """

    COLLECTION = "expenses"

    def __init__(self, collection=None):
        """
        Args:
            collection: A pymongo collection to use directly. When omitted the
                        store connects lazily and uses ``db.expenses``.
        """
        self._collection = collection
        self._indexes_ready = False

    @property
    def collection(self):
        if self._collection is None:
            self._collection = get_db()[self.COLLECTION]
        if not self._indexes_ready:
            self.ensure_indexes()
        return self._collection

    def ensure_indexes(self) -> None:
        # Default index names (id_1, group_id_1, date_1) match the indexes an
        # existing expense-tracker database already carries; MongoDB rejects
        # the same key pattern under another name.
        try:
            self._collection.create_index([("id", ASCENDING)], unique=True)
            self._collection.create_index([("group_id", ASCENDING)])
            self._collection.create_index([("date", ASCENDING)])
            self._collection.create_index([("group_id", ASCENDING), (SYNCED_AT, DESCENDING)])
        except PyMongoError as e:
            raise StoreError(f"Could not create expense indexes: {e}") from e
        self._indexes_ready = True

    def find_by_id(self, expense_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.collection.find_one({"id": expense_id}, _HIDDEN_FIELDS)
        except PyMongoError as e:
            raise StoreError(f"Lookup of expense {expense_id} failed: {e}") from e

    def insert_if_absent(self, record: Dict[str, Any]) -> bool:
        """
        Insert an expense payload unless one with the same id is stored.

        Returns:
            True if inserted, False if the id already existed
        """
        # insert_one mutates its argument (adds _id), so never hand it the caller's dict
        document = copy.deepcopy(record)
        document[SYNCED_AT] = datetime.now(timezone.utc)

        try:
            self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.debug("Expense %s already stored", record.get("id"))
            return False
        except PyMongoError as e:
            raise StoreError(f"Insert of expense {record.get('id')} failed: {e}") from e
        return True

    def find_recent_by_group(self, group_id: int, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Get the most recently stored expenses of a group, newest first.

        Documents inserted before ``_synced_at`` existed sort after the synced
        ones, ordered among themselves by their ``createdAt``.
        """
        try:
            cursor = (
                self.collection.find({"group_id": group_id}, _HIDDEN_FIELDS)
                .sort([(SYNCED_AT, DESCENDING), (LEGACY_CREATED_AT, DESCENDING), ("id", DESCENDING)])
                .limit(limit)
            )
            return list(cursor)
        except PyMongoError as e:
            raise StoreError(f"Listing expenses of group {group_id} failed: {e}") from e

    def count_by_group(self, group_id: int) -> int:
        try:
            return self.collection.count_documents({"group_id": group_id})
        except PyMongoError as e:
            raise StoreError(f"Counting expenses of group {group_id} failed: {e}") from e
