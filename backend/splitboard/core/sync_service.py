"""
Sync Service - Pull recent Splitwise expenses into the local store.

Responsibilities:
- Fetch the latest page of a group's expenses
- Store the ones not seen before (write-once, deduplicated by upstream id)
- Send one notification listing every newly stored expense
"""
import logging
from dataclasses import dataclass, field
from typing import List

from splitboard.core.notification_service import format_expense
from splitboard.errors import ConfigError, NotificationError

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    group_id: int
    fetched: int = 0
    inserted: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    notified: bool = False


class ExpenseSyncService:
    """
    Fetch-dedup-persist-notify for one group.

    The collaborators are injected: ``client`` needs ``fetch_expenses``,
    ``store`` needs ``find_by_id`` and ``insert_if_absent``, ``notifier``
    needs ``send``.

    Failure rules:
    - UpstreamError from the client propagates before anything is written.
    - StoreError stops the batch and propagates. Expenses stored before the
      failure stay stored and are still notified before the error is raised.
    - Notifier failures are logged and swallowed.
    """

    DEFAULT_LIMIT = 10

    def __init__(self, client, store, notifier, limit: int = DEFAULT_LIMIT, dashboard_url: str = ""):
        self.client = client
        self.store = store
        self.notifier = notifier
        self.limit = limit
        self.dashboard_url = dashboard_url

    def sync(self, group_id: int) -> SyncResult:
        expenses = self.client.fetch_expenses(group_id, limit=self.limit)
        result = SyncResult(group_id=group_id, fetched=len(expenses))

        blocks = []
        try:
            for expense in expenses:
                if self.store.find_by_id(expense.id) is not None:
                    result.skipped.append(expense.id)
                    continue

                block = format_expense(expense, self.dashboard_url)
                if not self.store.insert_if_absent(expense.raw):
                    # a concurrent sync stored it between the lookup and the insert
                    result.skipped.append(expense.id)
                    continue

                result.inserted.append(expense.id)
                blocks.append(block)
        finally:
            # announce whatever was stored, even when a StoreError cut the batch short
            if blocks:
                result.notified = self._notify("\n".join(blocks))

        logger.info(
            "Synced group %s: fetched=%d inserted=%d skipped=%d",
            group_id, result.fetched, len(result.inserted), len(result.skipped),
        )
        return result

    def _notify(self, text: str) -> bool:
        try:
            return bool(self.notifier.send(text))
        except (NotificationError, ConfigError) as e:
            logger.warning("Expense notification not delivered: %s", e)
            return False
